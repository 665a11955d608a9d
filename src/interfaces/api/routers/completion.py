"""
Completion API router.

Endpoints:
- POST /api/users/{user_id}/lessons/{lesson_id}/complete
- POST /api/users/{user_id}/tasks/{task_id}/complete
- POST /api/users/{user_id}/goals/{goal_id}/complete
- POST /api/users/{user_id}/methods/{method} - Record study method usage
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.core.use_cases.complete_goal import CompleteGoalUseCase
from src.core.use_cases.complete_lesson import CompleteLessonUseCase
from src.core.use_cases.complete_task import CompleteTaskUseCase
from src.core.use_cases.progress_state import CompletionResult
from src.core.use_cases.record_method_usage import RecordMethodUsageUseCase
from src.database.models import Profile
from src.interfaces.api.deps import get_profile_or_404
from src.interfaces.api.schemas import CompletionResponse, MethodUsageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["completion"])


def _completion_response(result: CompletionResult) -> CompletionResponse:
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.error_message,
        )

    return CompletionResponse(
        success=True,
        xp_earned=result.xp_earned,
        total_xp=result.total_xp,
        level=result.level,
        leveled_up=result.leveled_up,
        current_streak=result.current_streak,
        highest_streak=result.highest_streak,
        unlocked_badges=result.unlocked_badges,
    )


@router.post("/{user_id}/lessons/{lesson_id}/complete", response_model=CompletionResponse)
async def complete_lesson(
    lesson_id: int, profile: Profile = Depends(get_profile_or_404)
) -> CompletionResponse:
    """
    Mark lesson as completed.

    Awards the lesson XP, updates streak and unlocks badges.
    """
    result = await CompleteLessonUseCase().execute(profile, lesson_id)
    response = _completion_response(result)

    logger.info(
        f"Lesson {lesson_id} completed via API by {profile.external_id}: +{result.xp_earned} XP"
    )
    return response


@router.post("/{user_id}/tasks/{task_id}/complete", response_model=CompletionResponse)
async def complete_task(
    task_id: int, profile: Profile = Depends(get_profile_or_404)
) -> CompletionResponse:
    result = await CompleteTaskUseCase().execute(profile, task_id)
    return _completion_response(result)


@router.post("/{user_id}/goals/{goal_id}/complete", response_model=CompletionResponse)
async def complete_goal(
    goal_id: int, profile: Profile = Depends(get_profile_or_404)
) -> CompletionResponse:
    result = await CompleteGoalUseCase().execute(profile, goal_id)
    return _completion_response(result)


@router.post("/{user_id}/methods/{method}", response_model=MethodUsageResponse)
async def record_method(
    method: str, profile: Profile = Depends(get_profile_or_404)
) -> MethodUsageResponse:
    """Record one use of a study tool (pomodoro, feynman, sq3r, ...)."""
    result = await RecordMethodUsageUseCase().execute(profile, method)

    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.error_message,
        )

    return MethodUsageResponse(
        success=True,
        method=result.method,
        count=result.count,
        unlocked_badges=result.unlocked_badges,
    )
