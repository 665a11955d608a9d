"""
UserBadge Repository - полученные значки.

AICODE-NOTE: Репозиторий содержит только доступ к данным, БЕЗ бизнес-логики.
"""

from datetime import datetime

from src.database.models import Profile, UserBadge


async def get_earned_badge_ids(profile: Profile) -> set[str]:
    ids = await UserBadge.filter(profile=profile).values_list("badge_id", flat=True)
    return set(ids)


async def award_badge(profile: Profile, badge_id: str, earned_at: datetime) -> UserBadge:
    """Выдать значок (повторная выдача ничего не меняет)."""
    badge, _ = await UserBadge.get_or_create(
        profile=profile, badge_id=badge_id, defaults={"earned_at": earned_at}
    )
    return badge
