"""add lock pin and email tracking columns to bookings

Revision ID: 20250120_0800
Revises: 20250120_0700
Create Date: 2025-01-20 08:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20250120_0800'
down_revision: Union[str, Sequence[str], None] = '20250120_0700'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "bookings",
        sa.Column("assigned_lock_pin", sa.String(255), nullable=True, comment="Lock PIN assigned to this booking"),
    )
    op.add_column(
        "bookings",
        sa.Column(
            "lock_pin_id",
            sa.UUID(),
            nullable=True,
            comment="Reference to the PropertyLockPin used",
        ),
    )
    op.create_foreign_key(
        "fk_bookings_lock_pin_id",
        "bookings",
        "property_lock_pins",
        ["lock_pin_id"],
        ["id"],
        onupdate="CASCADE",
        ondelete="SET NULL",
    )
    op.add_column(
        "bookings",
        sa.Column(
            "pre_stay_email_sent_at",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="When pre-stay email was sent",
        ),
    )
    op.add_column(
        "bookings",
        sa.Column(
            "post_stay_email_sent_at",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="When post-stay email was sent",
        ),
    )

    op.create_index("ix_bookings_lock_pin_id", "bookings", ["lock_pin_id"])


def downgrade() -> None:
    op.drop_index("ix_bookings_lock_pin_id", table_name="bookings")
    op.drop_constraint("fk_bookings_lock_pin_id", "bookings", type_="foreignkey")
    op.drop_column("bookings", "post_stay_email_sent_at")
    op.drop_column("bookings", "pre_stay_email_sent_at")
    op.drop_column("bookings", "lock_pin_id")
    op.drop_column("bookings", "assigned_lock_pin")
