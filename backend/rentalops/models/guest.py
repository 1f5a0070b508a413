"""Guest model — one row per guest email, aggregated across stays."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Boolean, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentalops.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Guest(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A guest identified by email. Stats accrue as stays are recorded; rows are never deleted."""

    __tablename__ = "guests"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    total_stays: Mapped[int] = mapped_column(Integer, default=0, server_default="0", index=True)
    total_spent: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), default=Decimal("0"), server_default="0"
    )
    first_stay_date: Mapped[datetime | None] = mapped_column(nullable=True)
    last_stay_date: Mapped[datetime | None] = mapped_column(nullable=True, index=True)
    preferences: Mapped[dict[str, Any]] = mapped_column(JSONB, default=dict, server_default="{}")
    marketing_opt_in: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true", index=True
    )
    tags: Mapped[list[str]] = mapped_column(ARRAY(String(255)), default=list, server_default="{}")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_blacklisted: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")
    blacklist_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    stays: Mapped[list["GuestStay"]] = relationship(  # noqa: F821
        back_populates="guest", lazy="selectin", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Guest(id={self.id}, email={self.email!r}, stays={self.total_stays})>"
