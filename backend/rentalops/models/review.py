"""Review model — guest ratings per property, from direct stays or OTAs."""

import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, Enum, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rentalops.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class ReviewPlatform(str, enum.Enum):
    DIRECT = "direct"
    AIRBNB = "airbnb"
    VRBO = "vrbo"
    BOOKING_COM = "booking_com"
    OTHER = "other"


review_platform_enum = Enum(
    ReviewPlatform,
    name="review_platform",
    values_callable=lambda members: [m.value for m in members],
)

# Sub-score columns, in display order.
REVIEW_CATEGORIES = ("cleanliness", "communication", "check_in", "accuracy", "location", "value")


class Review(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A rating of a property. Booking and guest links are optional and survive their deletion as NULL."""

    __tablename__ = "reviews"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    booking_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("bookings.id", onupdate="CASCADE", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    guest_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("guests.id", onupdate="CASCADE", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    guest_name: Mapped[str] = mapped_column(String(255), nullable=False)
    guest_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    rating: Mapped[Decimal] = mapped_column(Numeric(2, 1), nullable=False, index=True)
    cleanliness: Mapped[Decimal | None] = mapped_column(Numeric(2, 1), nullable=True)
    communication: Mapped[Decimal | None] = mapped_column(Numeric(2, 1), nullable=True)
    check_in: Mapped[Decimal | None] = mapped_column(Numeric(2, 1), nullable=True)
    accuracy: Mapped[Decimal | None] = mapped_column(Numeric(2, 1), nullable=True)
    location: Mapped[Decimal | None] = mapped_column(Numeric(2, 1), nullable=True)
    value: Mapped[Decimal | None] = mapped_column(Numeric(2, 1), nullable=True)

    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    platform: Mapped[ReviewPlatform] = mapped_column(
        review_platform_enum,
        default=ReviewPlatform.DIRECT,
        server_default=ReviewPlatform.DIRECT.value,
        index=True,
    )
    external_review_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    check_in_date: Mapped[datetime | None] = mapped_column(nullable=True)
    check_out_date: Mapped[datetime | None] = mapped_column(nullable=True)

    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")
    is_published: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true")
    owner_response: Mapped[str | None] = mapped_column(Text, nullable=True)
    owner_response_date: Mapped[datetime | None] = mapped_column(nullable=True)
    helpful_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    __table_args__ = (Index("ix_reviews_created_at", "created_at"),)
