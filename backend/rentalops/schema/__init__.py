"""Schema migration support: step results, the applied-step ledger and the runner.

Alembic owns the migration chain under ``alembic/versions``; this package
wraps it so callers get a per-step result and a persisted ledger::

    from rentalops.schema import runner

    for result in runner.upgrade("head"):
        print(result)
"""

from rentalops.schema.errors import MigrationError
from rentalops.schema.steps import StepDirection, StepKind, StepResult, irreversible

__all__ = [
    "MigrationError",
    "StepDirection",
    "StepKind",
    "StepResult",
    "irreversible",
]
