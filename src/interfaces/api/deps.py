"""
Shared FastAPI dependencies.

AICODE-NOTE: Authentication is handled outside this service. Users are
addressed by their external id in the path.
"""

from fastapi import HTTPException, Path, status

from src.database.models import Profile
from src.storage import profile_repo


async def get_profile_or_404(
    user_id: str = Path(..., min_length=1, max_length=64, description="External user id"),
) -> Profile:
    """
    FastAPI dependency resolving the profile from the path.

    Raises:
        HTTPException 404 if the profile does not exist
    """
    profile = await profile_repo.get_profile(user_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Profile {user_id} not found",
        )
    return profile
