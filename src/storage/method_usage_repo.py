"""
MethodUsage Repository - счётчики использования учебных методов.

AICODE-NOTE: Репозиторий содержит только доступ к данным, БЕЗ бизнес-логики.
Какие методы допустимы, решает core/domain/badge_rules.py.
"""

from datetime import datetime

from tortoise.expressions import F

from src.database.models import MethodUsage, Profile


async def increment(profile: Profile, method: str, used_at: datetime) -> int:
    """Увеличить счётчик метода на 1. Возвращает новое значение."""
    usage, _ = await MethodUsage.get_or_create(profile=profile, method=method)
    await MethodUsage.filter(id=usage.id).update(count=F("count") + 1, last_used=used_at)
    await usage.refresh_from_db(fields=["count"])
    return usage.count


async def get_usage_map(profile: Profile) -> dict[str, int]:
    """{method: count} для пользователя."""
    rows = await MethodUsage.filter(profile=profile).values_list("method", "count")
    return {method: count for method, count in rows}
