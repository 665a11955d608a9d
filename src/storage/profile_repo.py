"""
Profile Repository - тупые CRUD операции для Profile модели.

AICODE-NOTE: Репозиторий содержит только доступ к данным, БЕЗ бизнес-логики.
Бизнес-логика (расчет streak, level) находится в core/domain/.
"""

from datetime import date
from typing import Optional

from tortoise.expressions import F

from src.database.models import Profile


async def get_profile(external_id: str) -> Optional[Profile]:
    """Получить профиль по внешнему id пользователя."""
    return await Profile.get_or_none(external_id=external_id)


async def get_or_create_profile(external_id: str, **defaults) -> Profile:
    profile, _ = await Profile.get_or_create(external_id=external_id, defaults=defaults)
    return profile


async def save_profile(profile: Profile) -> Profile:
    """Сохранить изменения профиля."""
    await profile.save()
    return profile


async def list_profiles() -> list[Profile]:
    return await Profile.all().order_by("id")


async def add_xp(profile: Profile, xp_delta: int, activity_day: date) -> Profile:
    """
    Добавить XP пользователю.

    Инкремент на стороне БД, параллельные начисления не теряются.
    """
    await Profile.filter(id=profile.id).update(
        xp=F("xp") + xp_delta, last_activity_date=activity_day
    )
    await profile.refresh_from_db(fields=["xp", "last_activity_date"])
    return profile


async def save_cache(
    profile: Profile, level: int, streak: int, highest_streak: int
) -> Profile:
    """Записать пересчитанный кэш прогресса."""
    profile.level = level
    profile.streak = streak
    profile.highest_streak = highest_streak
    await profile.save(update_fields=["level", "streak", "highest_streak"])
    return profile
