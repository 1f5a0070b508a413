"""create reviews table

Revision ID: 20250123_0100
Revises: 20250120_0900
Create Date: 2025-01-23 01:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20250123_0100'
down_revision: Union[str, Sequence[str], None] = '20250120_0900'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "reviews",
        sa.Column("id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "property_id",
            sa.UUID(),
            sa.ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "booking_id",
            sa.UUID(),
            sa.ForeignKey("bookings.id", onupdate="CASCADE", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "guest_id",
            sa.UUID(),
            sa.ForeignKey("guests.id", onupdate="CASCADE", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("guest_name", sa.String(255), nullable=False),
        sa.Column("guest_email", sa.String(255), nullable=True),
        sa.Column("rating", sa.Numeric(2, 1), nullable=False),
        sa.Column("cleanliness", sa.Numeric(2, 1), nullable=True),
        sa.Column("communication", sa.Numeric(2, 1), nullable=True),
        sa.Column("check_in", sa.Numeric(2, 1), nullable=True),
        sa.Column("accuracy", sa.Numeric(2, 1), nullable=True),
        sa.Column("location", sa.Numeric(2, 1), nullable=True),
        sa.Column("value", sa.Numeric(2, 1), nullable=True),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column(
            "platform",
            sa.Enum("direct", "airbnb", "vrbo", "booking_com", "other", name="review_platform"),
            nullable=False,
            server_default="direct",
        ),
        sa.Column("external_review_id", sa.String(255), nullable=True),
        sa.Column("check_in_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("check_out_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("owner_response", sa.Text(), nullable=True),
        sa.Column("owner_response_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("helpful_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_index("ix_reviews_property_id", "reviews", ["property_id"])
    op.create_index("ix_reviews_booking_id", "reviews", ["booking_id"])
    op.create_index("ix_reviews_guest_id", "reviews", ["guest_id"])
    op.create_index("ix_reviews_platform", "reviews", ["platform"])
    op.create_index("ix_reviews_rating", "reviews", ["rating"])
    op.create_index("ix_reviews_created_at", "reviews", ["created_at"])


def downgrade() -> None:
    op.drop_table("reviews")
    sa.Enum(name="review_platform").drop(op.get_bind(), checkfirst=True)
