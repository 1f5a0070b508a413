"""Exceptions raised by the migration runner."""


class MigrationError(Exception):
    """A migration step failed; the schema is left at the last completed step.

    ``message`` carries the underlying database error text unchanged.
    """

    def __init__(self, revision: str | None, message: str) -> None:
        self.revision = revision
        self.message = message
        where = f"step {revision}" if revision else "migration run"
        super().__init__(f"{where} failed: {message}")
