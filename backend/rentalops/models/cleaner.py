"""Cleaner model — cleaning staff linked to a user account."""

import uuid

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentalops.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Cleaner(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A cleaner; the linked user account carries the ``cleaner`` role."""

    __tablename__ = "cleaners"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true")

    # Relationships
    properties: Mapped[list["Property"]] = relationship(  # noqa: F821
        secondary="property_cleaners", viewonly=True, lazy="raise", order_by="Property.name"
    )

    def __repr__(self) -> str:
        return f"<Cleaner(id={self.id}, name={self.name!r})>"
