"""
Конфигурация NeuroLearn progress service.
Загружает переменные из .env файла.
"""

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.domain.day_boundary import resolve_timezone


class Settings(BaseSettings):
    # Database URL (Railway/Render format)
    # If set, overrides PostgreSQL individual vars
    DATABASE_URL: str | None = None

    # PostgreSQL (individual vars, fallback if DATABASE_URL not set)
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "neurolearn"
    POSTGRES_USER: str = "neurolearn"
    POSTGRES_PASSWORD: SecretStr | None = None

    # Environment (development | production)
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Frontend origin for CORS
    FRONTEND_URL: str | None = None

    # API server (run_api.py)
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    # None = reload only in development
    API_RELOAD: bool | None = None

    # Gamification
    XP_PER_LEVEL: int = 150
    # Day boundary for streaks and the activity chart (IANA name)
    PROGRESS_TIMEZONE: str = "UTC"
    ACTIVITY_WINDOW_DAYS: int = 7
    # Какие завершения образуют серию: lesson | task | goal | all
    STREAK_ACTIVITY_KIND: str = "lesson"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @field_validator("XP_PER_LEVEL", "ACTIVITY_WINDOW_DAYS", "API_PORT")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("PROGRESS_TIMEZONE")
    @classmethod
    def must_be_known_timezone(cls, v: str) -> str:
        # InvalidArgument is a ValueError, pydantic reports it as a validation error
        resolve_timezone(v)
        return v

    @field_validator("STREAK_ACTIVITY_KIND")
    @classmethod
    def must_be_known_kind(cls, v: str) -> str:
        if v not in ("lesson", "task", "goal", "all"):
            raise ValueError(f"unknown activity kind: {v}")
        return v

    @property
    def database_url(self) -> str:
        """
        Get database URL based on environment.

        Priority:
        1. DATABASE_URL env var (Railway/Render format)
        2. PostgreSQL individual vars (production)
        3. SQLite (development)
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if self.ENVIRONMENT == "production":
            if not self.POSTGRES_PASSWORD:
                raise ValueError("POSTGRES_PASSWORD required for production")
            return (
                f"postgres://{self.POSTGRES_USER}:"
                f"{self.POSTGRES_PASSWORD.get_secret_value()}"
                f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        return "sqlite://db.sqlite3"

    @property
    def api_reload(self) -> bool:
        if self.API_RELOAD is not None:
            return self.API_RELOAD
        return self.ENVIRONMENT == "development"


config = Settings()
