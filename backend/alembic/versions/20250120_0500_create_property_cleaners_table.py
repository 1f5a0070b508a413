"""create property_cleaners table

Revision ID: 20250120_0500
Revises: 20250120_0400
Create Date: 2025-01-20 05:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20250120_0500'
down_revision: Union[str, Sequence[str], None] = '20250120_0400'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "property_cleaners",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "property_id",
            sa.UUID(),
            sa.ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "cleaner_id",
            sa.UUID(),
            sa.ForeignKey("cleaners.id", onupdate="CASCADE", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_index("ix_property_cleaners_property_id", "property_cleaners", ["property_id"])
    op.create_index("ix_property_cleaners_cleaner_id", "property_cleaners", ["cleaner_id"])
    op.create_index(
        "property_cleaners_unique_idx",
        "property_cleaners",
        ["property_id", "cleaner_id"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_table("property_cleaners")
