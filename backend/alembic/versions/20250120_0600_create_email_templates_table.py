"""create email_templates table

Revision ID: 20250120_0600
Revises: 20250120_0500
Create Date: 2025-01-20 06:00:00.000000

"""
import json
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '20250120_0600'
down_revision: Union[str, Sequence[str], None] = '20250120_0500'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Frozen copy: later edits to the model default must not change this step.
AVAILABLE_VARIABLES = {
    "guest": ["guest_name", "guest_email", "guest_phone"],
    "booking": ["check_in_date", "check_out_date", "nights", "number_of_guests", "total_amount", "booking_id"],
    "property": ["property_name", "property_address", "property_city", "property_state", "property_zip"],
    "pin": ["lock_pin"],
    "owner": ["owner_name", "owner_phone", "owner_email"],
}


def upgrade() -> None:
    op.create_table(
        "email_templates",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "property_id",
            sa.UUID(),
            sa.ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "template_type",
            sa.Enum("pre_stay", "post_stay", "booking_confirmation", "custom", name="email_template_type"),
            nullable=False,
            server_default="pre_stay",
        ),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("html_content", sa.Text(), nullable=False),
        sa.Column("plain_text_content", sa.Text(), nullable=True),
        sa.Column("days_before_check_in", sa.Integer(), nullable=True),
        sa.Column("days_after_check_out", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("include_lock_pin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "available_variables",
            postgresql.JSONB(),
            nullable=False,
            server_default=json.dumps(AVAILABLE_VARIABLES),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_index("ix_email_templates_property_id", "email_templates", ["property_id"])
    op.create_index("ix_email_templates_template_type", "email_templates", ["template_type"])


def downgrade() -> None:
    op.drop_table("email_templates")
    sa.Enum(name="email_template_type").drop(op.get_bind(), checkfirst=True)
