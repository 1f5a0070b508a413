"""Unit tests for step results, the irreversible marker and migration errors."""

import logging
import types

from rentalops.schema import MigrationError, StepDirection, StepKind, StepResult, irreversible, runner
from rentalops.schema.steps import IRREVERSIBLE_ATTR, result_for


class TestResultFor:
    def test_plain_module_is_reversible(self):
        module = types.ModuleType("plain_step")
        result = result_for("20250120_0100", StepDirection.UPGRADE, module, "create guests table")

        assert result.kind is StepKind.REVERSIBLE
        assert result.reversible
        assert result.reason is None
        assert result.description == "create guests table"

    def test_declared_irreversible(self):
        module = types.ModuleType("enum_step")
        setattr(module, IRREVERSIBLE_ATTR, "cannot drop enum value")
        result = result_for("20250120_0900", StepDirection.DOWNGRADE, module, None)

        assert result.kind is StepKind.IRREVERSIBLE
        assert not result.reversible
        assert result.reason == "cannot drop enum value"

    def test_missing_module(self):
        result = result_for("base", StepDirection.DOWNGRADE, None, None)
        assert result.reversible


class TestStepResultText:
    def test_reversible(self):
        result = StepResult("20250120_0100", StepDirection.UPGRADE, description="create guests table")
        assert str(result) == "upgrade 20250120_0100 (create guests table)"

    def test_irreversible_includes_reason(self):
        result = StepResult(
            "20250120_0900",
            StepDirection.DOWNGRADE,
            kind=StepKind.IRREVERSIBLE,
            reason="enum values stay",
        )
        assert str(result) == "downgrade 20250120_0900 [irreversible: enum values stay]"


def test_irreversible_logs_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="rentalops.schema.steps"):
        assert irreversible("values stay") is None

    assert [rec.levelno for rec in caplog.records] == [logging.WARNING]
    assert "values stay" in caplog.records[0].getMessage()


class TestMigrationError:
    def test_names_revision(self):
        exc = MigrationError("20250120_0200", 'relation "property_lock_pins" already exists')
        assert exc.revision == "20250120_0200"
        assert str(exc) == 'step 20250120_0200 failed: relation "property_lock_pins" already exists'

    def test_without_revision(self):
        exc = MigrationError(None, "Can't locate revision")
        assert str(exc) == "migration run failed: Can't locate revision"


class TestChain:
    """The revision chain is read from disk; no database needed."""

    def test_chain_is_linear_and_ordered(self):
        chain = runner.script_revisions()
        assert chain == sorted(chain)
        assert len(chain) == 11
        assert chain[0] == "20250101_0000"

    def test_every_step_has_a_description(self):
        from alembic.script import ScriptDirectory

        script = ScriptDirectory.from_config(runner.get_config())
        for revision in script.walk_revisions():
            assert revision.doc, revision.revision

    def test_only_the_enum_step_is_irreversible(self):
        from alembic.script import ScriptDirectory

        script = ScriptDirectory.from_config(runner.get_config())
        flagged = [
            rev.revision for rev in script.walk_revisions() if getattr(rev.module, IRREVERSIBLE_ATTR, None)
        ]
        assert flagged == ["20250120_0900"]

    def test_pending_revisions(self):
        chain = runner.script_revisions()
        assert runner.pending_revisions([]) == chain
        assert runner.pending_revisions(chain[:3]) == chain[3:]
        assert runner.pending_revisions(chain) == []
