"""Command-line entry point for schema migrations.

Usage::

    python -m rentalops.schema upgrade [TARGET]
    python -m rentalops.schema downgrade TARGET
    python -m rentalops.schema status

Never run two of these against the same database at once; ``env.py`` holds
a PostgreSQL advisory lock for the duration of a run to enforce that.
"""

import argparse
import asyncio
import logging
import sys

from sqlalchemy.pool import NullPool

from rentalops.config import settings
from rentalops.database import make_engine
from rentalops.schema import ledger, runner
from rentalops.schema.errors import MigrationError

logger = logging.getLogger("rentalops.schema")


async def _applied() -> list[str]:
    engine = make_engine(poolclass=NullPool)
    try:
        async with engine.connect() as conn:
            return await conn.run_sync(ledger.applied_revisions)
    finally:
        await engine.dispose()


def _load_applied() -> list[str]:
    return asyncio.run(_applied())


def _status() -> int:
    applied = _load_applied()
    pending = runner.pending_revisions(applied)
    for rev in applied:
        print(f"  applied  {rev}")
    for rev in pending:
        print(f"  pending  {rev}")
    print(f"{len(applied)} applied, {len(pending)} pending")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="python -m rentalops.schema", description=__doc__.splitlines()[0])
    sub = parser.add_subparsers(dest="command", required=True)

    up = sub.add_parser("upgrade", help="apply steps up to TARGET (default: head)")
    up.add_argument("target", nargs="?", default="head")

    down = sub.add_parser("downgrade", help="revert steps down to TARGET (revision, -N or base)")
    down.add_argument("target")

    sub.add_parser("status", help="list applied and pending steps")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "status":
        return _status()

    try:
        if args.command == "upgrade":
            results = runner.upgrade(args.target)
        else:
            results = runner.downgrade(args.target)
    except MigrationError as exc:
        logger.error("%s", exc)
        return 1

    if not results:
        print("Nothing to do.")
    for result in results:
        print(f"  {result}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
