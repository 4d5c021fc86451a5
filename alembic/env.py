"""Alembic env.py for the purchase store (async SQLAlchemy)."""

import asyncio
from logging.config import fileConfig

from alembic import context

from src.infrastructure.config import Settings
from src.infrastructure.database import Base, build_engine
import src.infrastructure.persistence.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# DATABASE_URL from the environment / .env wins over alembic.ini.
_settings = Settings()
DATABASE_URL = (
    _settings.database_url
    if "database_url" in _settings.model_fields_set
    else config.get_main_option("sqlalchemy.url") or _settings.database_url
)


def run_migrations_offline() -> None:
    """Emit migration SQL to stdout without connecting."""
    context.configure(
        url=DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def _apply(connection):  # type: ignore[no-untyped-def]
    context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = build_engine(DATABASE_URL)
    async with engine.connect() as connection:
        await connection.run_sync(_apply)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
