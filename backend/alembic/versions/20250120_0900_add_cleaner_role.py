"""add cleaner role

Revision ID: 20250120_0900
Revises: 20250120_0800
Create Date: 2025-01-20 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from rentalops.schema.steps import irreversible

# revision identifiers, used by Alembic.
revision: str = '20250120_0900'
down_revision: Union[str, Sequence[str], None] = '20250120_0800'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# PostgreSQL cannot drop a value from an enum type; undoing this would mean
# recreating user_role and rewriting users.role.
IRREVERSIBLE_DOWNGRADE = "Removing enum values is not supported. Manual intervention may be required."


def upgrade() -> None:
    # ALTER TYPE ... ADD VALUE cannot run inside a transaction block on older PostgreSQL.
    with op.get_context().autocommit_block():
        op.execute("ALTER TYPE user_role ADD VALUE IF NOT EXISTS 'cleaner'")


def downgrade() -> None:
    irreversible(IRREVERSIBLE_DOWNGRADE)
