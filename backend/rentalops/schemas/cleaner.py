"""Pydantic v2 schemas for cleaner accounts, assignments and the cleaner calendar."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from rentalops.schemas.common import PartialUpdate

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CleanerAssign(BaseModel):
    cleaner_id: uuid.UUID


class CleanerCreate(BaseModel):
    """New cleaner account. ``property_ids`` must be properties the caller manages."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone_number: str | None = Field(None, max_length=50)
    notes: str | None = None
    property_ids: list[uuid.UUID] = Field(default_factory=list)


class CleanerUpdate(PartialUpdate):
    """Partial update; a ``property_ids`` list replaces the caller's assignments."""

    not_nullable = frozenset({"name", "email", "is_active"})

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone_number: str | None = Field(None, max_length=50)
    notes: str | None = None
    is_active: bool | None = None
    property_ids: list[uuid.UUID] | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CleanerSummary(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone_number: str | None = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class PropertyCleanerResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    cleaner_id: uuid.UUID
    assigned_at: datetime
    is_active: bool
    cleaner: CleanerSummary

    model_config = ConfigDict(from_attributes=True)


class PropertyBrief(BaseModel):
    id: uuid.UUID
    name: str
    address: str
    city: str
    state: str

    model_config = ConfigDict(from_attributes=True)


class CleanerResponse(CleanerSummary):
    user_id: uuid.UUID
    notes: str | None = None
    created_at: datetime
    properties: list[PropertyBrief]


class CalendarBooking(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    guest_name: str
    number_of_guests: int
    check_in: date
    check_out: date
    nights: int
    status: str
    special_requests: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CleanerCalendarResponse(BaseModel):
    properties: list[PropertyBrief]
    bookings: list[CalendarBooking]

    model_config = ConfigDict(from_attributes=True)
