"""create property_contacts table

Revision ID: 20250120_0400
Revises: 20250120_0300
Create Date: 2025-01-20 04:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20250120_0400'
down_revision: Union[str, Sequence[str], None] = '20250120_0300'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "property_contacts",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "property_id",
            sa.UUID(),
            sa.ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "contact_type",
            sa.Enum("owner", "guest", name="property_contact_type"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("receive_booking_notifications", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_index("ix_property_contacts_property_id", "property_contacts", ["property_id"])
    op.create_index("ix_property_contacts_contact_type", "property_contacts", ["contact_type"])
    op.create_index("ix_property_contacts_email", "property_contacts", ["email"])


def downgrade() -> None:
    op.drop_table("property_contacts")
    sa.Enum(name="property_contact_type").drop(op.get_bind(), checkfirst=True)
