"""PropertyContact model — owner and guest contacts attached to a property."""

import enum
import uuid

from sqlalchemy import Boolean, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rentalops.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class ContactType(str, enum.Enum):
    OWNER = "owner"
    GUEST = "guest"


contact_type_enum = Enum(
    ContactType,
    name="property_contact_type",
    values_callable=lambda members: [m.value for m in members],
)


class PropertyContact(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A person to notify about a property."""

    __tablename__ = "property_contacts"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    contact_type: Mapped[ContactType] = mapped_column(contact_type_enum, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")
    receive_booking_notifications: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
