"""Alembic environment for RentalOps (async engine, one transaction per step)."""

import asyncio
import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.pool import NullPool

from rentalops import models  # noqa: F401  (registers all tables on Base.metadata)
from rentalops.config import settings
from rentalops.database import Base, make_engine
from rentalops.schema import ledger

config = context.config

if config.config_file_name is not None and not logging.getLogger().handlers:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata


def include_object(obj, name, type_, reflected, compare_to) -> bool:
    """Keep the ledger table out of autogenerate comparisons."""
    return not (type_ == "table" and name == ledger.LEDGER_TABLE_NAME)


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of running against a database."""
    context.configure(
        url=settings.async_database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        include_object=include_object,
        transaction_per_migration=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    lock_id = settings.migration_lock_id
    connection.execute(text("SELECT pg_advisory_lock(:id)"), {"id": lock_id})
    try:
        ledger.ensure_table(connection)
        applied = ledger.applied_revisions(connection)
        config.attributes["applied_before"] = applied
        logger.info("Ledger lists %d applied step(s)", len(applied))
        # Session-level lock survives the commit; per-step transactions start clean.
        connection.commit()

        results = config.attributes.setdefault("step_results", [])
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            include_object=include_object,
            transaction_per_migration=True,
            on_version_apply=ledger.make_version_hook(results),
        )

        with context.begin_transaction():
            context.run_migrations()
    finally:
        if connection.in_transaction():
            connection.rollback()
        connection.execute(text("SELECT pg_advisory_unlock(:id)"), {"id": lock_id})
        connection.commit()


async def run_async_migrations() -> None:
    engine = make_engine(poolclass=NullPool)

    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await engine.dispose()


def run_migrations_online() -> None:
    connection = config.attributes.get("connection")
    if connection is None:
        asyncio.run(run_async_migrations())
    else:
        do_run_migrations(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
