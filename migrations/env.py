"""Alembic environment for the CrushConfessions schema.

The target URL comes from ``ALEMBIC_URL`` when set, then from ``alembic.ini``,
and finally from the application settings.
"""
from __future__ import annotations

import os
import sys
from logging.config import fileConfig
from pathlib import Path
from typing import Any

from alembic import context
from sqlalchemy import engine_from_config, pool

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from crush_confessions.core.settings import settings  # noqa: E402
from crush_confessions.db.session import Base  # noqa: E402

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_url = (
    os.getenv("ALEMBIC_URL")
    or config.get_main_option("sqlalchemy.url")
    or settings.database_url_sync
)
config.set_main_option("sqlalchemy.url", target_url)


def _skip_version_table(obj, name, type_, reflected, compare_to) -> bool:
    return not (type_ == "table" and name == "alembic_version")


def _configure(dialect_name: str, **kwargs: Any) -> None:
    context.configure(
        target_metadata=Base.metadata,
        include_object=_skip_version_table,
        compare_type=True,
        # SQLite cannot ALTER most constraints in place.
        render_as_batch=dialect_name == "sqlite",
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Render the migration SQL for ``target_url`` without a connection."""
    _configure(
        target_url.split(":", 1)[0].split("+", 1)[0],
        url=target_url,
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
        _configure(connection.dialect.name, connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
