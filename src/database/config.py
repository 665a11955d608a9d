"""
Конфигурация базы данных (Tortoise ORM).
Поддерживает SQLite (dev) и PostgreSQL (production).
"""

import logging

from tortoise import Tortoise

from src.config import config

logger = logging.getLogger(__name__)

MODELS_MODULE = "src.database.models"


def get_tortoise_db_url() -> str:
    """
    Get database URL with proper scheme for Tortoise ORM.

    Tortoise ORM requires 'postgres://' scheme, but Railway/Render
    provide 'postgresql://' URLs. This function ensures conversion.
    """
    url = config.database_url

    if url.startswith("postgresql://"):
        url = "postgres://" + url[len("postgresql://"):]
        logger.info("Converted postgresql:// to postgres:// for Tortoise ORM")

    logger.info(
        f"Database URL scheme: {url.split('://')[0] if '://' in url else 'unknown'}"
    )

    return url


TORTOISE_ORM = {
    "connections": {"default": get_tortoise_db_url()},
    "apps": {
        "models": {
            "models": [MODELS_MODULE],
            "default_connection": "default",
        },
    },
}


async def init_db() -> None:
    """Open connections and create missing tables."""
    await Tortoise.init(config=TORTOISE_ORM)
    await Tortoise.generate_schemas(safe=True)
    logger.info("Database initialized")


async def close_db() -> None:
    await Tortoise.close_connections()
    logger.info("Database connections closed")
