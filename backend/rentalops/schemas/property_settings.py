"""Pydantic v2 request/response schemas for property settings endpoints."""

import uuid

from pydantic import BaseModel, ConfigDict, Field

from rentalops.schemas.common import PartialUpdate


class PropertySettingsUpdate(PartialUpdate):
    """Partial update; ``current_pin_index`` is managed by rotation and not writable here."""

    not_nullable = frozenset(
        {
            "rotating_pins_enabled",
            "pre_stay_email_enabled",
            "pre_stay_email_days",
            "post_stay_email_enabled",
            "post_stay_email_days",
        }
    )

    rotating_pins_enabled: bool | None = None
    pre_stay_email_enabled: bool | None = None
    pre_stay_email_days: int | None = Field(None, ge=0, le=60)
    post_stay_email_enabled: bool | None = None
    post_stay_email_days: int | None = Field(None, ge=0, le=60)
    check_in_instructions: str | None = None
    wifi_network: str | None = Field(None, max_length=255)
    wifi_password: str | None = Field(None, max_length=255)
    parking_instructions: str | None = None
    house_rules: str | None = None


class RotatingPinsToggle(BaseModel):
    enabled: bool


class PropertySettingsResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    rotating_pins_enabled: bool
    current_pin_index: int
    pre_stay_email_enabled: bool
    pre_stay_email_days: int
    post_stay_email_enabled: bool
    post_stay_email_days: int
    check_in_instructions: str | None = None
    wifi_network: str | None = None
    wifi_password: str | None = None
    parking_instructions: str | None = None
    house_rules: str | None = None

    model_config = ConfigDict(from_attributes=True)
