"""Pydantic v2 request/response schemas for guest endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rentalops.schemas.common import PartialUpdate

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class GuestUpdate(PartialUpdate):
    """Owner-editable guest fields. Stay aggregates are maintained by the system."""

    not_nullable = frozenset({"name", "preferences", "marketing_opt_in", "tags", "is_blacklisted"})

    name: str | None = Field(None, min_length=1, max_length=255)
    phone_number: str | None = Field(None, max_length=50)
    preferences: dict[str, Any] | None = None
    marketing_opt_in: bool | None = None
    tags: list[str] | None = None
    notes: str | None = None
    is_blacklisted: bool | None = None
    blacklist_reason: str | None = None


class GuestStayRating(BaseModel):
    rating: int | None = Field(None, ge=1, le=5)
    review: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class GuestResponse(BaseModel):
    """Guest record returned by the API."""

    id: uuid.UUID
    name: str
    email: str
    phone_number: str | None = None
    total_stays: int
    total_spent: Decimal
    first_stay_date: datetime | None = None
    last_stay_date: datetime | None = None
    preferences: dict[str, Any]
    marketing_opt_in: bool
    tags: list[str]
    notes: str | None = None
    is_blacklisted: bool
    blacklist_reason: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GuestListResponse(BaseModel):
    """Paginated list of guests."""

    items: list[GuestResponse]
    total: int


class GuestStayResponse(BaseModel):
    id: uuid.UUID
    guest_id: uuid.UUID
    property_id: uuid.UUID
    booking_id: uuid.UUID
    check_in: date
    check_out: date
    nights: int
    number_of_guests: int
    total_amount: Decimal
    rating: int | None = None
    review: str | None = None

    model_config = ConfigDict(from_attributes=True)


class GuestStatsResponse(BaseModel):
    total_guests: int
    marketing_opt_in_guests: int
    repeat_guests: int
    average_stays: Decimal

    model_config = ConfigDict(from_attributes=True)
