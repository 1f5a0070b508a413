"""create guests table

Revision ID: 20250120_0100
Revises: 20250101_0000
Create Date: 2025-01-20 01:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '20250120_0100'
down_revision: Union[str, Sequence[str], None] = '20250101_0000'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "guests",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("total_stays", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_spent", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("first_stay_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_stay_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("preferences", postgresql.JSONB(), nullable=False, server_default="{}"),
        sa.Column("marketing_opt_in", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("tags", postgresql.ARRAY(sa.String(255)), nullable=False, server_default="{}"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_blacklisted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("blacklist_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_index("ix_guests_email", "guests", ["email"])
    op.create_index("ix_guests_total_stays", "guests", ["total_stays"])
    op.create_index("ix_guests_last_stay_date", "guests", ["last_stay_date"])
    op.create_index("ix_guests_marketing_opt_in", "guests", ["marketing_opt_in"])


def downgrade() -> None:
    op.drop_table("guests")
