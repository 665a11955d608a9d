"""
User API router.

Endpoints:
- GET  /api/users/{user_id} - Get profile
- PUT  /api/users/{user_id} - Create profile or update its settings
"""

import logging

from fastapi import APIRouter, Depends, Path

from src.database.models import Profile
from src.interfaces.api.deps import get_profile_or_404
from src.interfaces.api.schemas import ProfileRequest, ProfileResponse
from src.storage import profile_repo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["user"])


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_user(profile: Profile = Depends(get_profile_or_404)) -> ProfileResponse:
    """
    Get profile.

    level/streak here are the cached values; use /progress for live ones.
    """
    return ProfileResponse.model_validate(profile)


@router.put("/{user_id}", response_model=ProfileResponse)
async def upsert_user(
    body: ProfileRequest,
    user_id: str = Path(..., min_length=1, max_length=64),
) -> ProfileResponse:
    """Create profile on first call (registration), update settings after."""
    profile = await profile_repo.get_or_create_profile(
        user_id, username=body.username, learning_style=body.learning_style
    )

    changed = False
    if body.username is not None and body.username != profile.username:
        profile.username = body.username
        changed = True
    if body.learning_style is not None and body.learning_style != profile.learning_style:
        profile.learning_style = body.learning_style
        changed = True
    if changed:
        await profile_repo.save_profile(profile)
        logger.info(f"Profile {user_id} updated")

    return ProfileResponse.model_validate(profile)
