"""PropertyCleaner model — which cleaners service which properties."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentalops.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class PropertyCleaner(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Assignment of a cleaner to a property; at most one row per pair."""

    __tablename__ = "property_cleaners"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    cleaner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("cleaners.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_at: Mapped[datetime] = mapped_column(server_default=func.now())
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true")

    # Relationships
    cleaner: Mapped["Cleaner"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (
        Index("property_cleaners_unique_idx", "property_id", "cleaner_id", unique=True),
    )
