"""create property_lock_pins table

Revision ID: 20250120_0200
Revises: 20250120_0100
Create Date: 2025-01-20 02:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20250120_0200'
down_revision: Union[str, Sequence[str], None] = '20250120_0100'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "property_lock_pins",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "property_id",
            sa.UUID(),
            sa.ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("pin", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("usage_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_index("ix_property_lock_pins_property_id", "property_lock_pins", ["property_id"])
    op.create_index(
        "ix_property_lock_pins_property_id_order_index",
        "property_lock_pins",
        ["property_id", "order_index"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_table("property_lock_pins")
