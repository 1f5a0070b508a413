"""Pydantic v2 request/response schemas for property contact endpoints."""

import uuid

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from rentalops.models.property_contact import ContactType
from rentalops.schemas.common import PartialUpdate


class PropertyContactCreate(BaseModel):
    contact_type: ContactType
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone_number: str | None = Field(None, max_length=50)
    is_primary: bool = False
    receive_booking_notifications: bool = True
    notes: str | None = None


class PropertyContactUpdate(PartialUpdate):
    not_nullable = frozenset({"contact_type", "name", "email", "is_primary", "receive_booking_notifications"})

    contact_type: ContactType | None = None
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone_number: str | None = Field(None, max_length=50)
    is_primary: bool | None = None
    receive_booking_notifications: bool | None = None
    notes: str | None = None


class PropertyContactResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    contact_type: ContactType
    name: str
    email: str
    phone_number: str | None = None
    is_primary: bool
    receive_booking_notifications: bool
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True)
