"""Apply or revert migration steps through Alembic's command API.

Steps run strictly one at a time, in order, each in its own transaction.
A failing step aborts the run with :class:`MigrationError`; steps completed
before it stay applied.

Pass ``connection`` to run on an existing synchronous connection (for
example from ``AsyncConnection.run_sync``); otherwise ``alembic/env.py``
opens its own async engine from settings.
"""

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from alembic.util import CommandError
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError

from rentalops.schema.errors import MigrationError
from rentalops.schema.steps import StepResult

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parents[2]
ALEMBIC_INI = BACKEND_DIR / "alembic.ini"


def get_config(connection: Connection | None = None) -> Config:
    """Build the Alembic config, optionally bound to an existing connection."""
    cfg = Config(str(ALEMBIC_INI))
    cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    if connection is not None:
        cfg.attributes["connection"] = connection
    return cfg


def script_revisions(cfg: Config | None = None) -> list[str]:
    """All step identifiers in the chain, oldest first."""
    script = ScriptDirectory.from_config(cfg or get_config())
    return [s.revision for s in reversed(list(script.walk_revisions("base", "heads")))]


def pending_revisions(applied: list[str], cfg: Config | None = None) -> list[str]:
    """Steps in the chain that are not in ``applied``, oldest first."""
    done = set(applied)
    return [rev for rev in script_revisions(cfg) if rev not in done]


def _run(cfg: Config, action: str, target: str, order: list[str] | None = None) -> list[StepResult]:
    results: list[StepResult] = []
    cfg.attributes["step_results"] = results
    try:
        if action == "upgrade":
            command.upgrade(cfg, target)
        elif action == "downgrade":
            command.downgrade(cfg, target)
        else:
            command.stamp(cfg, target)
    except DBAPIError as exc:
        # Applied-before snapshot is filled in by env.py once connected.
        applied = cfg.attributes.get("applied_before", [])
        if action == "upgrade":
            queue = pending_revisions(applied, cfg)
        else:
            chain = script_revisions(cfg)
            queue = [rev for rev in reversed(chain) if rev in set(applied)]
        failed = queue[len(results)] if len(results) < len(queue) else None
        message = str(exc.orig) if exc.orig is not None else str(exc)
        logger.error("Migration %s aborted at %s: %s", action, failed, message)
        raise MigrationError(failed, message) from exc
    except CommandError as exc:
        raise MigrationError(None, str(exc)) from exc
    return results


def upgrade(target: str = "head", connection: Connection | None = None) -> list[StepResult]:
    """Apply steps up to ``target`` and return a result per applied step."""
    return _run(get_config(connection), "upgrade", target)


def downgrade(target: str, connection: Connection | None = None) -> list[StepResult]:
    """Revert steps down to ``target`` (a revision, ``-N`` or ``base``)."""
    return _run(get_config(connection), "downgrade", target)


def stamp(target: str, connection: Connection | None = None) -> list[StepResult]:
    """Move the version pointer and ledger to ``target`` without running any DDL."""
    return _run(get_config(connection), "stamp", target)
