"""Tests for progress use-cases on an in-memory database."""

from datetime import datetime, timedelta, timezone

import pytest

from src.core.domain.errors import InvalidArgument
from src.core.use_cases.award_xp import AwardXPUseCase
from src.core.use_cases.complete_goal import CompleteGoalUseCase
from src.core.use_cases.complete_lesson import CompleteLessonUseCase
from src.core.use_cases.complete_task import CompleteTaskUseCase
from src.core.use_cases.get_leaderboard import GetLeaderboardUseCase
from src.core.use_cases.get_progress import GetProgressUseCase
from src.core.use_cases.record_method_usage import RecordMethodUsageUseCase
from src.core.use_cases.sync_profile_cache import SyncProfileCacheUseCase
from src.database.models import (
    ActivityLog,
    Goal,
    Group,
    Lesson,
    LessonProgress,
    MethodUsage,
    Profile,
    Task,
    UserBadge,
)
from src.storage import activity_repo, completion_repo, group_repo

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


async def completed_lesson(profile: Profile, when: datetime, title: str) -> LessonProgress:
    lesson = await Lesson.create(title=title)
    return await LessonProgress.create(
        profile=profile, lesson=lesson, completed=True, completed_at=when
    )


# ============ Award XP ============


@pytest.mark.asyncio
async def test_award_xp_updates_total_and_logs_activity(profile: Profile) -> None:
    use_case = AwardXPUseCase()

    first = await use_case.execute(profile, 140, "xp_award", {"source": "test"}, now=NOW)
    assert first.success
    assert (first.total_xp, first.level, first.leveled_up) == (140, 1, False)

    second = await use_case.execute(profile, 10, now=NOW)
    assert (second.total_xp, second.level, second.leveled_up) == (150, 2, True)

    await profile.refresh_from_db()
    assert profile.xp == 150
    assert profile.last_activity_date == NOW.date()

    logs = await ActivityLog.filter(profile=profile).order_by("id")
    assert [log.details["xp_earned"] for log in logs] == [140, 10]
    assert logs[0].details["source"] == "test"


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -10])
async def test_award_xp_rejects_non_positive_amount(profile: Profile, amount: int) -> None:
    with pytest.raises(InvalidArgument):
        await AwardXPUseCase().execute(profile, amount, now=NOW)

    assert await ActivityLog.filter(profile=profile).count() == 0


# ============ Complete Lesson ============


@pytest.mark.asyncio
async def test_complete_lesson_awards_xp_streak_and_badge(profile: Profile) -> None:
    lesson = await Lesson.create(title="Harta mentală", learning_style="visual", xp_reward=60)

    result = await CompleteLessonUseCase().execute(profile, lesson.id, now=NOW)

    assert result.success
    assert result.xp_earned == 60
    assert result.total_xp == 60
    assert result.current_streak == 1
    assert result.highest_streak == 1
    assert result.unlocked_badges == ["first_lesson"]

    usage = await MethodUsage.get(profile=profile, method="style_specific_lessons")
    assert usage.count == 1

    await profile.refresh_from_db()
    assert (profile.xp, profile.level, profile.streak) == (60, 1, 1)
    assert await UserBadge.filter(profile=profile, badge_id="first_lesson").exists()


@pytest.mark.asyncio
async def test_complete_lesson_twice_fails(profile: Profile) -> None:
    lesson = await Lesson.create(title="Tehnica Feynman")
    use_case = CompleteLessonUseCase()

    await use_case.execute(profile, lesson.id, now=NOW)
    result = await use_case.execute(profile, lesson.id, now=NOW)

    assert not result.success
    assert result.error_message == "Lecția este deja finalizată"

    await profile.refresh_from_db()
    assert profile.xp == 50  # default lesson reward, awarded once


@pytest.mark.asyncio
async def test_complete_missing_lesson_fails(profile: Profile) -> None:
    result = await CompleteLessonUseCase().execute(profile, 999, now=NOW)

    assert not result.success
    assert result.error_message == "Lecția nu a fost găsită"


@pytest.mark.asyncio
async def test_other_style_lesson_is_not_style_specific(profile: Profile) -> None:
    lesson = await Lesson.create(title="Podcast", learning_style="auditory")

    await CompleteLessonUseCase().execute(profile, lesson.id, now=NOW)

    assert not await MethodUsage.filter(profile=profile, method="style_specific_lessons").exists()


@pytest.mark.asyncio
async def test_new_lesson_categories_feed_knowledge_explorer(profile: Profile) -> None:
    use_case = CompleteLessonUseCase()
    lessons = [
        await Lesson.create(title="Fracții", category="matematică"),
        await Lesson.create(title="Ecuații", category="matematică"),
        await Lesson.create(title="Fără categorie"),
        await Lesson.create(title="Verbe", category="limbi"),
        await Lesson.create(title="Celula", category="biologie"),
    ]

    results = [await use_case.execute(profile, lesson.id, now=NOW) for lesson in lessons]

    usage = await MethodUsage.get(profile=profile, method="diverse_lessons")
    assert usage.count == 3
    assert "knowledge_explorer" in results[-1].unlocked_badges
    assert not any("knowledge_explorer" in r.unlocked_badges for r in results[:-1])


@pytest.mark.asyncio
async def test_lessons_on_consecutive_days_build_streak(profile: Profile) -> None:
    use_case = CompleteLessonUseCase()
    results = []
    for days_ago in (2, 1, 0):
        lesson = await Lesson.create(title=f"Lecția {days_ago}")
        results.append(
            await use_case.execute(profile, lesson.id, now=NOW - timedelta(days=days_ago))
        )

    assert [r.current_streak for r in results] == [1, 2, 3]
    assert "streak_3" in results[-1].unlocked_badges

    await profile.refresh_from_db()
    assert (profile.streak, profile.highest_streak) == (3, 3)


# ============ Complete Task / Goal ============


@pytest.mark.asyncio
async def test_complete_task(profile: Profile) -> None:
    task = await Task.create(profile=profile, title="Recitește notițele")

    result = await CompleteTaskUseCase().execute(profile, task.id, now=NOW)

    assert result.success
    assert result.xp_earned == 5
    await task.refresh_from_db()
    assert task.completed
    usage = await MethodUsage.get(profile=profile, method="task_completion")
    assert usage.count == 1


@pytest.mark.asyncio
async def test_complete_task_of_another_user_fails(profile: Profile) -> None:
    other = await Profile.create(external_id="someone-else")
    task = await Task.create(profile=other, title="Nu e a mea")

    result = await CompleteTaskUseCase().execute(profile, task.id, now=NOW)

    assert not result.success
    assert result.error_message == "Sarcina nu a fost găsită"


@pytest.mark.asyncio
async def test_complete_goal_uses_goal_reward(profile: Profile) -> None:
    goal = await Goal.create(profile=profile, title="Termin cursul", xp_reward=25)
    use_case = CompleteGoalUseCase()

    result = await use_case.execute(profile, goal.id, now=NOW)
    again = await use_case.execute(profile, goal.id, now=NOW)

    assert result.success
    assert result.xp_earned == 25
    assert not again.success
    assert again.error_message == "Obiectivul este deja finalizat"

    log = await ActivityLog.get(profile=profile, activity_type="goal_completion")
    assert log.details["goal_id"] == goal.id


# ============ Method usage ============


@pytest.mark.asyncio
async def test_pomodoro_badge_unlocks_on_tenth_session(profile: Profile) -> None:
    use_case = RecordMethodUsageUseCase()

    results = [await use_case.execute(profile, "pomodoro", now=NOW) for _ in range(10)]

    assert results[-1].count == 10
    assert results[-1].unlocked_badges == ["pomodoro_master"]
    assert all(r.unlocked_badges == [] for r in results[:-1])


@pytest.mark.asyncio
async def test_unknown_method_is_rejected(profile: Profile) -> None:
    result = await RecordMethodUsageUseCase().execute(profile, "yoga", now=NOW)

    assert not result.success
    assert await MethodUsage.filter(profile=profile).count() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method", ["task_completion", "style_specific_lessons", "completed_goals", "diverse_lessons"]
)
async def test_completion_counters_cannot_be_recorded_directly(profile: Profile, method: str) -> None:
    use_case = RecordMethodUsageUseCase()

    results = [await use_case.execute(profile, method, now=NOW) for _ in range(10)]

    assert not any(r.success for r in results)
    assert results[0].error_message == f"Metoda {method} se înregistrează automat"
    assert await MethodUsage.filter(profile=profile).count() == 0
    assert await UserBadge.filter(profile=profile).count() == 0


# ============ Progress summary ============


@pytest.mark.asyncio
async def test_get_progress_summary(profile: Profile) -> None:
    profile.xp = 375
    await profile.save()
    for i, days_ago in enumerate((1, 1, 2, 5)):
        await completed_lesson(profile, NOW - timedelta(days=days_ago, hours=1), f"L{i}")

    summary = await GetProgressUseCase().execute(profile, now=NOW)

    assert summary.total_xp == 375
    assert (summary.level_info.level, summary.level_info.current_level_xp) == (3, 75)
    assert (summary.streaks.current, summary.streaks.highest) == (2, 2)
    assert summary.completed_lessons == 4
    assert [d.count for d in summary.activity] == [0, 1, 0, 0, 1, 2, 0]
    assert summary.activity[-1].day == NOW.date()

    first_lesson = next(s for s in summary.badges if s.badge.id == "first_lesson")
    assert first_lesson.unlocked


@pytest.mark.asyncio
async def test_get_progress_ignores_stale_cache(profile: Profile) -> None:
    profile.level = 9
    profile.streak = 40
    await profile.save()

    summary = await GetProgressUseCase().execute(profile, now=NOW)

    assert summary.level_info.level == 1
    assert summary.streaks.current == 0


@pytest.mark.asyncio
async def test_activity_window_of_custom_length(profile: Profile) -> None:
    await completed_lesson(profile, NOW - timedelta(days=10), "veche")
    await completed_lesson(profile, NOW - timedelta(days=2), "nouă")

    window = await GetProgressUseCase().activity(profile, 3, now=NOW)

    assert [d.count for d in window] == [1, 0, 0]


@pytest.mark.asyncio
async def test_activity_window_must_be_positive(profile: Profile) -> None:
    with pytest.raises(InvalidArgument):
        await GetProgressUseCase().activity(profile, 0, now=NOW)


# ============ Cache sync ============


@pytest.mark.asyncio
async def test_sync_profile_cache_fixes_drift(profile: Profile) -> None:
    profile.xp = 300
    profile.level = 1
    profile.streak = 5
    await profile.save()

    dry = await SyncProfileCacheUseCase().execute(profile, now=NOW, dry_run=True)
    assert dry.drifted
    await profile.refresh_from_db()
    assert profile.level == 1

    result = await SyncProfileCacheUseCase().execute(profile, now=NOW)
    assert (result.old_level, result.new_level) == (1, 3)
    assert (result.old_streak, result.new_streak) == (5, 0)

    await profile.refresh_from_db()
    assert (profile.level, profile.streak) == (3, 0)

    again = await SyncProfileCacheUseCase().execute(profile, now=NOW)
    assert not again.drifted


# ============ Completion repository ============


@pytest.mark.asyncio
async def test_completion_timestamps_by_kind(profile: Profile) -> None:
    await completed_lesson(profile, NOW - timedelta(days=1), "L")
    await Task.create(profile=profile, title="T", completed=True, completed_at=NOW)
    await Task.create(profile=profile, title="open")
    await Goal.create(profile=profile, title="G", completed=True, completed_at=NOW - timedelta(days=3))

    assert len(await completion_repo.get_completion_timestamps(profile, "lesson")) == 1
    assert len(await completion_repo.get_completion_timestamps(profile, "task")) == 1
    assert len(await completion_repo.get_completion_timestamps(profile, "all")) == 3
    assert (
        len(
            await completion_repo.get_completion_timestamps(
                profile, "all", since=NOW - timedelta(days=2)
            )
        )
        == 2
    )

    with pytest.raises(InvalidArgument):
        await completion_repo.get_completion_timestamps(profile, "quiz")


# ============ Leaderboard ============


@pytest.mark.asyncio
async def test_leaderboard_recomputes_level_and_streak(profile: Profile) -> None:
    # Кэш профиля устарел: level/streak не совпадают с XP и завершениями
    stale = await Profile.create(external_id="u-stale", username="Bogdan", xp=450, level=1, streak=9)
    fresh = await Profile.create(external_id="u-fresh", username="Crina", xp=20)
    for days_ago in (0, 1, 2):
        await completed_lesson(fresh, NOW - timedelta(days=days_ago), f"L{days_ago}")
    await completed_lesson(profile, NOW - timedelta(days=1), "Ana")

    group = await group_repo.create_group("Anul I")
    for member in (profile, stale, fresh):
        assert await group_repo.add_member(group, member)
    assert not await group_repo.add_member(group, profile)

    by_xp = await GetLeaderboardUseCase().execute(group.id, "xp", now=NOW)
    assert by_xp.success
    assert by_xp.group_name == "Anul I"
    assert [r.entry.external_id for r in by_xp.entries] == ["u-stale", "u-fresh", "user-123"]

    top = by_xp.entries[0].entry
    assert (top.level, top.current_streak, top.lessons_completed) == (4, 0, 0)

    by_streak = await GetLeaderboardUseCase().execute(group.id, "streak", now=NOW)
    assert [(r.rank, r.entry.external_id, r.entry.current_streak) for r in by_streak.entries] == [
        (1, "u-fresh", 3),
        (2, "user-123", 1),
        (3, "u-stale", 0),
    ]


@pytest.mark.asyncio
async def test_leaderboard_of_missing_group_fails(db) -> None:  # noqa: ANN001
    result = await GetLeaderboardUseCase().execute(404, now=NOW)

    assert not result.success
    assert result.error_message == "Grupul nu a fost găsit"


@pytest.mark.asyncio
async def test_leaderboard_rejects_unknown_sort_key(profile: Profile) -> None:
    group = await Group.create(name="G")
    await group_repo.add_member(group, profile)

    with pytest.raises(InvalidArgument):
        await GetLeaderboardUseCase().execute(group.id, "badges", now=NOW)


# ============ Activity journal ============


@pytest.mark.asyncio
async def test_recent_activity_is_newest_first_and_limited(profile: Profile) -> None:
    use_case = AwardXPUseCase()
    for i, amount in enumerate((10, 20, 30)):
        await use_case.execute(profile, amount, now=NOW + timedelta(minutes=i))

    recent = await activity_repo.get_recent_activity(profile, limit=2)

    assert [entry.details["xp_earned"] for entry in recent] == [30, 20]
