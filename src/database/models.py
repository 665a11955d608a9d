"""
Модели базы данных для NeuroLearn.

Структура:
- Profile: пользователь с XP и кэшем прогресса (level, streak)
- Lesson: урок с наградой XP
- LessonProgress: прохождение урока пользователем
- Task: задача из списка дел
- Goal: цель из повестки с наградой XP
- ActivityLog: журнал активности (append-only)
- MethodUsage: счётчики использования учебных методов
- UserBadge: полученные значки
- Group, GroupMember: учебные группы и их участники (для рейтинга)
"""

from tortoise import fields, models


class Profile(models.Model):
    """Профиль пользователя."""

    id = fields.IntField(primary_key=True)
    # Идентификатор пользователя у провайдера авторизации
    external_id = fields.CharField(max_length=64, unique=True, db_index=True)
    username = fields.CharField(max_length=255, null=True)
    # visual, auditory, kinesthetic, reading_writing
    learning_style = fields.CharField(max_length=32, null=True)

    xp = fields.IntField(default=0)

    # AICODE-NOTE: Денормализованный кэш. Источник истины: xp и завершения.
    # Пишется только use-case'ами после пересчёта.
    level = fields.IntField(default=1)
    streak = fields.IntField(default=0)
    highest_streak = fields.IntField(default=0)
    last_activity_date = fields.DateField(null=True)

    created_at = fields.DatetimeField(auto_now_add=True)

    lesson_progress: fields.ReverseRelation["LessonProgress"]
    tasks: fields.ReverseRelation["Task"]
    goals: fields.ReverseRelation["Goal"]
    activity_logs: fields.ReverseRelation["ActivityLog"]
    method_usage: fields.ReverseRelation["MethodUsage"]
    badges: fields.ReverseRelation["UserBadge"]
    group_memberships: fields.ReverseRelation["GroupMember"]

    class Meta:
        table = "profiles"


class Lesson(models.Model):
    """Урок."""

    id = fields.IntField(primary_key=True)
    title = fields.CharField(max_length=255)
    # visual, auditory, kinesthetic, reading_writing, all, universal
    learning_style = fields.CharField(max_length=32, default="all")
    xp_reward = fields.IntField(default=50)
    # Предметная область (matematică, limbi, ...). Нужна для "knowledge_explorer"
    category = fields.CharField(max_length=64, null=True)

    class Meta:
        table = "lessons"


class LessonProgress(models.Model):
    """Прохождение урока. Завершённая запись = событие завершения."""

    id = fields.IntField(primary_key=True)
    profile: fields.ForeignKeyRelation[Profile] = fields.ForeignKeyField(
        "models.Profile", related_name="lesson_progress", on_delete=fields.CASCADE
    )
    lesson: fields.ForeignKeyRelation[Lesson] = fields.ForeignKeyField(
        "models.Lesson", related_name="progress", on_delete=fields.CASCADE
    )
    lesson_id: int

    completed = fields.BooleanField(default=False)
    completed_at = fields.DatetimeField(null=True)

    class Meta:
        table = "lesson_progress"
        unique_together = (("profile", "lesson"),)


class Task(models.Model):
    """Задача из списка дел."""

    id = fields.IntField(primary_key=True)
    profile: fields.ForeignKeyRelation[Profile] = fields.ForeignKeyField(
        "models.Profile", related_name="tasks", on_delete=fields.CASCADE
    )
    profile_id: int

    title = fields.CharField(max_length=500)
    completed = fields.BooleanField(default=False)
    completed_at = fields.DatetimeField(null=True)

    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "tasks"


class Goal(models.Model):
    """Цель из повестки."""

    id = fields.IntField(primary_key=True)
    profile: fields.ForeignKeyRelation[Profile] = fields.ForeignKeyField(
        "models.Profile", related_name="goals", on_delete=fields.CASCADE
    )
    profile_id: int

    title = fields.CharField(max_length=255)
    xp_reward = fields.IntField(default=10)
    completed = fields.BooleanField(default=False)
    completed_at = fields.DatetimeField(null=True)

    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "goals"


class ActivityLog(models.Model):
    """
    Журнал активности.
    Только добавление, записи не меняются.
    """

    id = fields.IntField(primary_key=True)
    profile: fields.ForeignKeyRelation[Profile] = fields.ForeignKeyField(
        "models.Profile", related_name="activity_logs", on_delete=fields.CASCADE
    )

    # lesson_completion, task_completion, goal_completion, xp_award
    activity_type = fields.CharField(max_length=50)
    details: dict = fields.JSONField(default={})

    created_at = fields.DatetimeField()

    class Meta:
        table = "activity_log"


class MethodUsage(models.Model):
    """Сколько раз пользователь применил учебный метод."""

    id = fields.IntField(primary_key=True)
    profile: fields.ForeignKeyRelation[Profile] = fields.ForeignKeyField(
        "models.Profile", related_name="method_usage", on_delete=fields.CASCADE
    )

    method = fields.CharField(max_length=50)
    count = fields.IntField(default=0)
    last_used = fields.DatetimeField(null=True)

    class Meta:
        table = "method_usage"
        unique_together = (("profile", "method"),)


class UserBadge(models.Model):
    """Полученный значок."""

    id = fields.IntField(primary_key=True)
    profile: fields.ForeignKeyRelation[Profile] = fields.ForeignKeyField(
        "models.Profile", related_name="badges", on_delete=fields.CASCADE
    )

    badge_id = fields.CharField(max_length=64)
    earned_at = fields.DatetimeField()

    class Meta:
        table = "user_badges"
        unique_together = (("profile", "badge_id"),)


class Group(models.Model):
    """Учебная группа."""

    id = fields.IntField(primary_key=True)
    name = fields.CharField(max_length=255)
    created_at = fields.DatetimeField(auto_now_add=True)

    members: fields.ReverseRelation["GroupMember"]

    class Meta:
        table = "study_groups"


class GroupMember(models.Model):
    """Участник группы."""

    id = fields.IntField(primary_key=True)
    group: fields.ForeignKeyRelation[Group] = fields.ForeignKeyField(
        "models.Group", related_name="members", on_delete=fields.CASCADE
    )
    profile: fields.ForeignKeyRelation[Profile] = fields.ForeignKeyField(
        "models.Profile", related_name="group_memberships", on_delete=fields.CASCADE
    )

    joined_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "group_members"
        unique_together = (("group", "profile"),)
