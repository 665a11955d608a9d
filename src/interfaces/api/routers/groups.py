"""
Study groups API router.

Endpoints:
- POST /api/groups - Create group
- POST /api/groups/{group_id}/members/{user_id} - Join group
- GET  /api/groups/{group_id}/leaderboard - Members ranked by live progress
"""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from src.core.use_cases.get_leaderboard import GetLeaderboardUseCase
from src.database.models import Group, Profile
from src.interfaces.api.deps import get_profile_or_404
from src.interfaces.api.schemas import (
    GroupRequest,
    GroupResponse,
    LeaderboardEntryResponse,
    LeaderboardResponse,
)
from src.storage import group_repo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/groups", tags=["groups"])

SortBy = Literal["xp", "level", "streak", "lessons", "name"]


async def get_group_or_404(group_id: int = Path(..., ge=1)) -> Group:
    group = await group_repo.get_group(group_id)
    if not group:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Grupul nu a fost găsit",
        )
    return group


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(body: GroupRequest) -> GroupResponse:
    group = await group_repo.create_group(body.name)
    logger.info(f"Group {group.id} created: {group.name}")
    return GroupResponse(id=group.id, name=group.name, member_count=0)


@router.post("/{group_id}/members/{user_id}", response_model=GroupResponse)
async def join_group(
    group: Group = Depends(get_group_or_404),
    profile: Profile = Depends(get_profile_or_404),
) -> GroupResponse:
    """Add the user to the group. Joining twice is a no-op."""
    if await group_repo.add_member(group, profile):
        logger.info(f"Profile {profile.external_id} joined group {group.id}")

    return GroupResponse(
        id=group.id, name=group.name, member_count=await group_repo.count_members(group)
    )


@router.get("/{group_id}/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    group_id: int = Path(..., ge=1),
    sort_by: SortBy = Query(default="xp"),
) -> LeaderboardResponse:
    """
    Group leaderboard.

    Level and streak are recomputed from XP and completions, not read
    from the cached profile columns.
    """
    result = await GetLeaderboardUseCase().execute(group_id, sort_by)

    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=result.error_message,
        )

    return LeaderboardResponse(
        group_id=result.group_id,
        name=result.group_name,
        sort_by=result.sort_by,
        entries=[
            LeaderboardEntryResponse(
                rank=row.rank,
                user_id=row.entry.external_id,
                name=row.entry.name,
                xp=row.entry.xp,
                level=row.entry.level,
                streak=row.entry.current_streak,
                highest_streak=row.entry.highest_streak,
                lessons_completed=row.entry.lessons_completed,
            )
            for row in result.entries
        ],
    )
