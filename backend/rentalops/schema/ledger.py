"""Persisted ledger of applied migration steps.

Alembic's ``alembic_version`` table only holds the current head. The
``schema_migrations`` table keeps one row per applied step so operators (and
the runner) can see exactly which steps a database has taken. Rows are
written from Alembic's ``on_version_apply`` hook, inside the same
transaction as the step itself.
"""

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy import Column, DateTime, MetaData, String, Table, delete, func, insert, select
from sqlalchemy.engine import Connection

from rentalops.schema.steps import StepDirection, StepResult, result_for

logger = logging.getLogger(__name__)

LEDGER_TABLE_NAME = "schema_migrations"

ledger_metadata = MetaData()

schema_migrations = Table(
    LEDGER_TABLE_NAME,
    ledger_metadata,
    Column("revision", String(64), primary_key=True),
    Column("description", String(255), nullable=True),
    Column("applied_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)


def ensure_table(connection: Connection) -> None:
    schema_migrations.create(connection, checkfirst=True)


def applied_revisions(connection: Connection) -> list[str]:
    """Return applied step identifiers in the order they were applied."""
    if not connection.dialect.has_table(connection, LEDGER_TABLE_NAME):
        return []
    rows = connection.execute(
        select(schema_migrations.c.revision).order_by(
            schema_migrations.c.applied_at, schema_migrations.c.revision
        )
    )
    return [row.revision for row in rows]


def _sync_to_heads(connection: Connection, revision_map: Any, heads: Any) -> None:
    """Make the ledger list exactly the ancestry of ``heads`` (used for stamps)."""
    expected = (
        {script.revision for script in revision_map.iterate_revisions(tuple(heads), "base")}
        if heads
        else set()
    )
    present = set(applied_revisions(connection))
    stale = present - expected
    if stale:
        connection.execute(delete(schema_migrations).where(schema_migrations.c.revision.in_(stale)))
    for revision in sorted(expected - present):
        connection.execute(insert(schema_migrations).values(revision=revision))


def make_version_hook(results: list[StepResult]) -> Callable[..., None]:
    """Build an ``on_version_apply`` callback that updates the ledger and collects results."""

    def on_version_apply(ctx: Any, step: Any, heads: Any, run_args: Any) -> None:
        revision = step.up_revision_id or "base"
        script = step.up_revision
        description = script.doc if script is not None else None
        module = getattr(script, "module", None)

        if step.is_stamp:
            _sync_to_heads(ctx.connection, step.revision_map, heads)
            direction = StepDirection.UPGRADE if step.is_upgrade else StepDirection.DOWNGRADE
        elif step.is_upgrade:
            ctx.connection.execute(
                insert(schema_migrations).values(revision=revision, description=description)
            )
            direction = StepDirection.UPGRADE
        else:
            ctx.connection.execute(
                delete(schema_migrations).where(schema_migrations.c.revision == revision)
            )
            direction = StepDirection.DOWNGRADE

        result = result_for(revision, direction, module, description)
        results.append(result)
        logger.info("Applied %s", result)

    return on_version_apply
