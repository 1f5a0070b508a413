"""Booking model — tracks property reservations."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentalops.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Booking(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A reservation of a property for specific dates."""

    __tablename__ = "bookings"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    guest_name: Mapped[str] = mapped_column(String(255), nullable=False)
    guest_email: Mapped[str] = mapped_column(String(255), nullable=False)
    guest_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    number_of_guests: Mapped[int] = mapped_column(Integer, default=1, server_default="1")
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    nights: Mapped[int] = mapped_column(Integer, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(50),
        default="pending",
        server_default="pending",
        index=True,
    )  # pending, confirmed, checked_in, checked_out, cancelled
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Lock PIN handed to the guest. The string survives deletion of the PIN row.
    assigned_lock_pin: Mapped[str | None] = mapped_column(String(255), nullable=True)
    lock_pin_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("property_lock_pins.id", onupdate="CASCADE", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    pre_stay_email_sent_at: Mapped[datetime | None] = mapped_column(nullable=True)
    post_stay_email_sent_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Relationships
    property: Mapped["Property"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    lock_pin: Mapped["PropertyLockPin | None"] = relationship(  # noqa: F821
        back_populates="bookings", lazy="selectin"
    )

    __table_args__ = (Index("ix_bookings_check_in_check_out", "check_in", "check_out"),)

    @staticmethod
    def count_nights(check_in: date, check_out: date) -> int:
        return (check_out - check_in).days

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, property_id={self.property_id}, status={self.status})>"
