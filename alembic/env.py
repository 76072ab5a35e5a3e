"""Alembic migration environment."""

from logging.config import fileConfig
import logging
import os
import re
import sys

from sqlalchemy import engine_from_config, pool
from alembic import context

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.database import Base, _normalize_async_database_url
from app.models import Tenant, Office, Room, OccupancyEvent  # noqa: F401  register models
from app.core.config import settings

config = context.config
logger = logging.getLogger("alembic.env")

# Logging config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _sync_database_url(database_url: str) -> str:
    """psycopg 3 serves both sync and async; SQLite needs the stdlib driver."""
    url = _normalize_async_database_url(database_url)
    return url.replace("sqlite+aiosqlite://", "sqlite://", 1)


sync_database_url = _sync_database_url(settings.DATABASE_URL)
logger.info("Using database URL (redacted): %s", re.sub(r':([^/@]+)@', ':****@', sync_database_url))
config.set_main_option("sqlalchemy.url", sync_database_url)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
