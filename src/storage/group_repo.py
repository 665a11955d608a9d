"""
Group Repository - учебные группы и участники.

AICODE-NOTE: Репозиторий содержит только доступ к данным, БЕЗ бизнес-логики.
Рейтинг группы считается в core/use_cases/get_leaderboard.py.
"""

from typing import Optional

from src.database.models import Group, GroupMember, Profile


async def create_group(name: str) -> Group:
    return await Group.create(name=name)


async def get_group(group_id: int) -> Optional[Group]:
    return await Group.get_or_none(id=group_id)


async def add_member(group: Group, profile: Profile) -> bool:
    """
    Добавить профиль в группу.

    Returns:
        True если профиль добавлен, False если уже был участником
    """
    _, created = await GroupMember.get_or_create(group=group, profile=profile)
    return created


async def count_members(group: Group) -> int:
    return await GroupMember.filter(group=group).count()


async def get_member_profiles(group: Group) -> list[Profile]:
    """Профили участников в порядке вступления."""
    members = (
        await GroupMember.filter(group=group)
        .order_by("joined_at", "id")
        .prefetch_related("profile")
    )
    return [member.profile for member in members]
