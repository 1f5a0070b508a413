"""create property_settings table

Revision ID: 20250120_0300
Revises: 20250120_0200
Create Date: 2025-01-20 03:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20250120_0300'
down_revision: Union[str, Sequence[str], None] = '20250120_0200'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "property_settings",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "property_id",
            sa.UUID(),
            sa.ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("rotating_pins_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("current_pin_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("pre_stay_email_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("pre_stay_email_days", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("post_stay_email_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("post_stay_email_days", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("check_in_instructions", sa.Text(), nullable=True),
        sa.Column("wifi_network", sa.String(255), nullable=True),
        sa.Column("wifi_password", sa.String(255), nullable=True),
        sa.Column("parking_instructions", sa.Text(), nullable=True),
        sa.Column("house_rules", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # One settings row per property
    op.create_index("ix_property_settings_property_id", "property_settings", ["property_id"], unique=True)


def downgrade() -> None:
    op.drop_table("property_settings")
