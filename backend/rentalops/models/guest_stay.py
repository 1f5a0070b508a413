"""GuestStay model — a finalized stay linking guest, property and booking."""

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentalops.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class GuestStay(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """One row per booking whose stay has been recorded against a guest."""

    __tablename__ = "guest_stays"

    guest_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("guests.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    nights: Mapped[int] = mapped_column(Integer, nullable=False)
    number_of_guests: Mapped[int] = mapped_column(Integer, default=1, server_default="1")
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    review: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    guest: Mapped["Guest"] = relationship(back_populates="stays", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (Index("ix_guest_stays_check_in_check_out", "check_in", "check_out"),)
