"""PropertyLockPin model — smart-lock PIN codes in rotation order."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentalops.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class PropertyLockPin(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """An encrypted lock PIN; ``order_index`` is its 0-based slot in the rotation."""

    __tablename__ = "property_lock_pins"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    pin: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true")
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    last_used_at: Mapped[datetime | None] = mapped_column(nullable=True)
    usage_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship(  # noqa: F821
        back_populates="lock_pin", lazy="raise", passive_deletes=True
    )

    __table_args__ = (
        Index(
            "ix_property_lock_pins_property_id_order_index",
            "property_id",
            "order_index",
            unique=True,
        ),
    )

    def __repr__(self) -> str:
        return f"<PropertyLockPin(id={self.id}, property_id={self.property_id}, order={self.order_index})>"
