"""EmailTemplate model — per-property guest email content and triggers."""

import copy
import enum
import json
import uuid
from typing import Any

from sqlalchemy import Boolean, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from rentalops.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class TemplateType(str, enum.Enum):
    PRE_STAY = "pre_stay"
    POST_STAY = "post_stay"
    BOOKING_CONFIRMATION = "booking_confirmation"
    CUSTOM = "custom"


template_type_enum = Enum(
    TemplateType,
    name="email_template_type",
    values_callable=lambda members: [m.value for m in members],
)

# Placeholder names a template may use, grouped by the record they come from.
DEFAULT_AVAILABLE_VARIABLES: dict[str, list[str]] = {
    "guest": ["guest_name", "guest_email", "guest_phone"],
    "booking": [
        "check_in_date",
        "check_out_date",
        "nights",
        "number_of_guests",
        "total_amount",
        "booking_id",
    ],
    "property": [
        "property_name",
        "property_address",
        "property_city",
        "property_state",
        "property_zip",
    ],
    "pin": ["lock_pin"],
    "owner": ["owner_name", "owner_phone", "owner_email"],
}


def default_available_variables() -> dict[str, list[str]]:
    return copy.deepcopy(DEFAULT_AVAILABLE_VARIABLES)


class EmailTemplate(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Subject/body with ``{variable}`` placeholders, sent relative to check-in or check-out."""

    __tablename__ = "email_templates"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    template_type: Mapped[TemplateType] = mapped_column(
        template_type_enum,
        nullable=False,
        default=TemplateType.PRE_STAY,
        server_default=TemplateType.PRE_STAY.value,
        index=True,
    )
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    html_content: Mapped[str] = mapped_column(Text, nullable=False)
    plain_text_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    days_before_check_in: Mapped[int | None] = mapped_column(Integer, nullable=True)
    days_after_check_out: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true")
    include_lock_pin: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")
    available_variables: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        default=default_available_variables,
        server_default=json.dumps(DEFAULT_AVAILABLE_VARIABLES),
    )

    def __repr__(self) -> str:
        return f"<EmailTemplate(id={self.id}, type={self.template_type.value!r}, subject={self.subject!r})>"
