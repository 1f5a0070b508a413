"""Tests for the migration chain and runner against a real PostgreSQL schema.

Each test runs the chain inside its own throwaway PostgreSQL schema on the
test database, so the tables created by ``Base.metadata`` for the other tests
are not touched.
"""

import json
import logging
import uuid
import warnings
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import AsyncConnection

from rentalops.database import Base
from rentalops.models.email_template import DEFAULT_AVAILABLE_VARIABLES
from rentalops.schema import MigrationError, StepDirection, StepKind, ledger, runner

pytestmark = pytest.mark.asyncio

FIRST = "20250101_0000"
GUESTS = "20250120_0100"
LOCK_PINS = "20250120_0200"
CONTACTS = "20250120_0400"
PROPERTY_CLEANERS = "20250120_0500"
PIN_ON_BOOKINGS = "20250120_0800"
CLEANER_ROLE = "20250120_0900"
REVIEWS = "20250123_0100"

BOOKKEEPING_TABLES = {"alembic_version", ledger.LEDGER_TABLE_NAME}
CHAIN = runner.script_revisions()


# ---------------------------------------------------------------------------
# Fixtures and helpers
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def migration_conn(test_engine) -> AsyncGenerator[tuple[AsyncConnection, str], None]:
    """A connection whose search_path points at a fresh, empty schema."""
    schema = f"mig_{uuid.uuid4().hex[:10]}"
    async with test_engine.connect() as conn:
        await conn.execute(text(f'CREATE SCHEMA "{schema}"'))
        await conn.execute(text(f'SET search_path TO "{schema}"'))
        await conn.commit()
        try:
            yield conn, schema
        finally:
            if conn.in_transaction():
                await conn.rollback()
            await conn.execute(text("RESET search_path"))
            await conn.execute(text(f'DROP SCHEMA "{schema}" CASCADE'))
            await conn.commit()


async def _run(conn: AsyncConnection, fn, target: str):
    return await conn.run_sync(lambda sync_conn: fn(target, connection=sync_conn))


async def _applied(conn: AsyncConnection) -> list[str]:
    applied = await conn.run_sync(ledger.applied_revisions)
    await conn.commit()
    return applied


async def _snapshot(conn: AsyncConnection, schema: str) -> dict:
    """Structural description of every table, index, foreign key and enum in ``schema``."""

    def collect(sync_conn) -> dict:
        insp = inspect(sync_conn)
        tables = {}
        for name in sorted(insp.get_table_names(schema=schema)):
            tables[name] = {
                "columns": [
                    (c["name"], str(c["type"]), c["nullable"], str(c.get("default")))
                    for c in insp.get_columns(name, schema=schema)
                ],
                "indexes": sorted(
                    (i["name"], tuple(i["column_names"]), bool(i["unique"]))
                    for i in insp.get_indexes(name, schema=schema)
                ),
                "foreign_keys": sorted(
                    (
                        fk["referred_table"],
                        tuple(fk["constrained_columns"]),
                        fk["options"].get("ondelete"),
                        fk["options"].get("onupdate"),
                    )
                    for fk in insp.get_foreign_keys(name, schema=schema)
                ),
            }
        enums = {e["name"]: list(e["labels"]) for e in insp.get_enums(schema=schema)}
        return {"tables": tables, "enums": enums}

    snapshot = await conn.run_sync(collect)
    await conn.commit()
    return snapshot


def _structure(snapshot: dict) -> dict:
    """Snapshot without the bookkeeping tables, which appear on the first run."""
    tables = {k: v for k, v in snapshot["tables"].items() if k not in BOOKKEEPING_TABLES}
    return {"tables": tables, "enums": snapshot["enums"]}


async def _user_role_labels(conn: AsyncConnection, schema: str) -> list[str]:
    result = await conn.execute(
        text(
            "SELECT e.enumlabel FROM pg_enum e "
            "JOIN pg_type t ON t.oid = e.enumtypid "
            "JOIN pg_namespace n ON n.oid = t.typnamespace "
            "WHERE t.typname = 'user_role' AND n.nspname = :schema "
            "ORDER BY e.enumsortorder"
        ),
        {"schema": schema},
    )
    labels = [row[0] for row in result]
    await conn.commit()
    return labels


# ---------------------------------------------------------------------------
# Forward application
# ---------------------------------------------------------------------------


class TestUpgrade:
    async def test_applies_every_step_in_order(self, migration_conn):
        conn, _ = migration_conn
        results = await _run(conn, runner.upgrade, "head")

        chain = runner.script_revisions()
        assert [r.revision for r in results] == chain
        assert all(r.direction is StepDirection.UPGRADE for r in results)
        assert await _applied(conn) == chain
        assert chain[0] == FIRST
        assert chain[-1] == REVIEWS

    async def test_nothing_to_do_when_at_head(self, migration_conn):
        conn, _ = migration_conn
        await _run(conn, runner.upgrade, "head")
        results = await _run(conn, runner.upgrade, "head")
        assert results == []
        assert runner.pending_revisions(await _applied(conn)) == []

    async def test_partial_upgrade_leaves_rest_pending(self, migration_conn):
        conn, _ = migration_conn
        await _run(conn, runner.upgrade, LOCK_PINS)

        applied = await _applied(conn)
        assert applied == [FIRST, GUESTS, LOCK_PINS]
        assert runner.pending_revisions(applied)[0] == "20250120_0300"

    async def test_schema_matches_models(self, migration_conn):
        conn, schema = migration_conn
        await _run(conn, runner.upgrade, "head")
        snapshot = await _snapshot(conn, schema)

        assert set(snapshot["tables"]) == set(Base.metadata.tables) | BOOKKEEPING_TABLES
        for name, table in Base.metadata.tables.items():
            migrated = {col[0] for col in snapshot["tables"][name]["columns"]}
            assert migrated == {c.name for c in table.columns}, name

    async def test_enum_types_and_values(self, migration_conn):
        conn, schema = migration_conn
        await _run(conn, runner.upgrade, "head")
        enums = (await _snapshot(conn, schema))["enums"]

        assert enums["user_role"][-1] == "cleaner"
        assert enums["property_contact_type"] == ["owner", "guest"]
        assert enums["email_template_type"] == ["pre_stay", "post_stay", "booking_confirmation", "custom"]
        assert "airbnb" in enums["review_platform"]

    async def test_template_variables_default(self, migration_conn):
        conn, _ = migration_conn
        await _run(conn, runner.upgrade, "head")

        await conn.execute(
            text("INSERT INTO users (email, first_name, last_name) VALUES ('o@example.com', 'O', 'W')")
        )
        await conn.execute(
            text(
                "INSERT INTO properties (user_id, name, address, city, state, zip_code, base_price) "
                "SELECT id, 'Cabin', '1 Road', 'Town', 'ST', '00000', 100 FROM users"
            )
        )
        await conn.execute(
            text(
                "INSERT INTO email_templates (property_id, subject, html_content) "
                "SELECT id, 'Hi', '<p>Hi</p>' FROM properties"
            )
        )
        row = (await conn.execute(text("SELECT available_variables, template_type FROM email_templates"))).one()
        await conn.rollback()

        variables = row[0] if isinstance(row[0], dict) else json.loads(row[0])
        assert variables == DEFAULT_AVAILABLE_VARIABLES
        assert row[1] == "pre_stay"


# ---------------------------------------------------------------------------
# Reversal
# ---------------------------------------------------------------------------


class TestDowngrade:
    async def test_round_trip_restores_schema(self, migration_conn):
        conn, schema = migration_conn
        await _run(conn, runner.upgrade, "head")
        before = await _snapshot(conn, schema)

        results = await _run(conn, runner.downgrade, "base")
        assert [r.revision for r in results] == list(reversed(runner.script_revisions()))
        assert all(r.direction is StepDirection.DOWNGRADE for r in results)

        emptied = await _snapshot(conn, schema)
        assert set(emptied["tables"]) == BOOKKEEPING_TABLES
        assert emptied["enums"] == {}
        assert await _applied(conn) == []

        await _run(conn, runner.upgrade, "head")
        assert await _snapshot(conn, schema) == before

    @pytest.mark.parametrize(
        ("previous", "revision"),
        list(zip(["base", *CHAIN[:-1]], CHAIN)),
        ids=CHAIN,
    )
    async def test_each_step_reverts_exactly(self, migration_conn, previous, revision):
        conn, schema = migration_conn
        if previous != "base":
            await _run(conn, runner.upgrade, previous)
        before = _structure(await _snapshot(conn, schema))

        await _run(conn, runner.upgrade, revision)
        [result] = await _run(conn, runner.downgrade, previous)
        after = _structure(await _snapshot(conn, schema))

        if result.reversible:
            assert after == before
        else:
            # Only the enum label is left behind.
            assert after["tables"] == before["tables"]
            assert set(after["enums"]) == set(before["enums"])

    async def test_pin_columns_removed_on_downgrade(self, migration_conn):
        conn, schema = migration_conn
        await _run(conn, runner.upgrade, PIN_ON_BOOKINGS)
        await _run(conn, runner.downgrade, "-1")

        bookings = (await _snapshot(conn, schema))["tables"]["bookings"]
        columns = {col[0] for col in bookings["columns"]}
        assert "lock_pin_id" not in columns
        assert "assigned_lock_pin" not in columns
        assert bookings["foreign_keys"] == [("properties", ("property_id",), "CASCADE", "CASCADE")]

    async def test_enum_value_removal_is_irreversible(self, migration_conn, caplog):
        conn, schema = migration_conn
        await _run(conn, runner.upgrade, CLEANER_ROLE)

        with caplog.at_level(logging.WARNING, logger="rentalops.schema.steps"):
            results = await _run(conn, runner.downgrade, PIN_ON_BOOKINGS)

        assert len(results) == 1
        result = results[0]
        assert result.revision == CLEANER_ROLE
        assert result.kind is StepKind.IRREVERSIBLE
        assert not result.reversible
        assert "enum values" in result.reason
        assert any("Manual intervention" in rec.getMessage() for rec in caplog.records)

        # The value stays, but the step is no longer recorded as applied.
        assert "cleaner" in await _user_role_labels(conn, schema)
        assert CLEANER_ROLE not in await _applied(conn)

    async def test_reversible_steps_are_tagged(self, migration_conn):
        conn, _ = migration_conn
        await _run(conn, runner.upgrade, GUESTS)
        results = await _run(conn, runner.downgrade, FIRST)

        assert [(r.revision, r.kind) for r in results] == [(GUESTS, StepKind.REVERSIBLE)]
        assert results[0].reversible


# ---------------------------------------------------------------------------
# Re-runs and failures
# ---------------------------------------------------------------------------


class TestReruns:
    async def test_enum_value_add_is_idempotent(self, migration_conn):
        conn, schema = migration_conn
        await _run(conn, runner.upgrade, CLEANER_ROLE)
        await _run(conn, runner.stamp, PIN_ON_BOOKINGS)

        results = await _run(conn, runner.upgrade, CLEANER_ROLE)

        assert [r.revision for r in results] == [CLEANER_ROLE]
        assert (await _user_role_labels(conn, schema)).count("cleaner") == 1

    async def test_reapply_after_irreversible_downgrade(self, migration_conn):
        conn, schema = migration_conn
        await _run(conn, runner.upgrade, "head")
        await _run(conn, runner.downgrade, PIN_ON_BOOKINGS)

        await _run(conn, runner.upgrade, "head")
        assert (await _user_role_labels(conn, schema)).count("cleaner") == 1

    async def test_table_creation_is_not_guarded(self, migration_conn):
        conn, _ = migration_conn
        await _run(conn, runner.upgrade, LOCK_PINS)
        await _run(conn, runner.stamp, GUESTS)

        with pytest.raises(MigrationError) as excinfo:
            await _run(conn, runner.upgrade, LOCK_PINS)

        assert excinfo.value.revision == LOCK_PINS
        assert "already exists" in excinfo.value.message
        assert await _applied(conn) == [FIRST, GUESTS]

    async def test_failure_aborts_and_keeps_earlier_steps(self, migration_conn):
        conn, schema = migration_conn
        await conn.execute(text("CREATE TABLE guests (id integer)"))
        await conn.commit()

        with pytest.raises(MigrationError) as excinfo:
            await _run(conn, runner.upgrade, "head")

        assert excinfo.value.revision == GUESTS
        assert await _applied(conn) == [FIRST]
        tables = set((await _snapshot(conn, schema))["tables"])
        assert {"users", "properties", "bookings", "cleaners"} <= tables
        assert "property_lock_pins" not in tables

    async def test_missing_referenced_table_stops_at_dependent_step(self, migration_conn):
        conn, schema = migration_conn
        await _run(conn, runner.upgrade, CONTACTS)
        await conn.execute(text("DROP TABLE cleaners"))
        await conn.commit()

        with pytest.raises(MigrationError) as excinfo:
            await _run(conn, runner.upgrade, "head")

        assert excinfo.value.revision == PROPERTY_CLEANERS
        assert "cleaners" in excinfo.value.message
        assert await _applied(conn) == CHAIN[: CHAIN.index(CONTACTS) + 1]
        assert "property_cleaners" not in (await _snapshot(conn, schema))["tables"]

    async def test_unknown_target(self, migration_conn):
        conn, _ = migration_conn
        with pytest.raises(MigrationError) as excinfo:
            await _run(conn, runner.upgrade, "not_a_revision")
        assert excinfo.value.revision is None

    async def test_stamp_rewrites_ledger(self, migration_conn):
        conn, _ = migration_conn
        await _run(conn, runner.upgrade, LOCK_PINS)

        await _run(conn, runner.stamp, FIRST)
        assert await _applied(conn) == [FIRST]

        await _run(conn, runner.stamp, LOCK_PINS)
        assert sorted(await _applied(conn)) == [FIRST, GUESTS, LOCK_PINS]


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestConfig:
    async def test_loading_chain_emits_no_config_warnings(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            revisions = runner.script_revisions()

        assert revisions == CHAIN
        assert runner.get_config().get_main_option("path_separator") == "os"
        assert not [w for w in caught if "path_separator" in str(w.message)]
