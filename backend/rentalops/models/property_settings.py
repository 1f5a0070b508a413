"""PropertySettings model — per-property automation toggles and guest info."""

import uuid

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentalops.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class PropertySettings(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Strict one-to-one with Property (UNIQUE property_id)."""

    __tablename__ = "property_settings"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    # PIN rotation
    rotating_pins_enabled: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")
    current_pin_index: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    # Automated emails
    pre_stay_email_enabled: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")
    pre_stay_email_days: Mapped[int] = mapped_column(Integer, default=3, server_default="3")
    post_stay_email_enabled: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")
    post_stay_email_days: Mapped[int] = mapped_column(Integer, default=1, server_default="1")

    # Guest-facing information
    check_in_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    wifi_network: Mapped[str | None] = mapped_column(String(255), nullable=True)
    wifi_password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    parking_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    house_rules: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    property: Mapped["Property"] = relationship(back_populates="settings", lazy="raise")  # type: ignore[name-defined]  # noqa: F821
