"""Pydantic v2 request/response schemas for lock PIN endpoints."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class LockPinCreate(BaseModel):
    pin: str = Field(..., min_length=4, max_length=32)
    notes: str | None = None


class LockPinUpdate(BaseModel):
    """All fields optional; only provided fields change."""

    pin: str | None = Field(None, min_length=4, max_length=32)
    notes: str | None = None
    is_active: bool | None = None


class LockPinReorder(BaseModel):
    pin_order: list[uuid.UUID] = Field(..., description="PIN ids in the desired rotation order")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LockPinResponse(BaseModel):
    """A lock PIN with its code decrypted for the owner."""

    id: uuid.UUID
    pin: str
    order_index: int
    is_active: bool
    last_used_at: datetime | None = None
    usage_count: int
    notes: str | None = None


class LockPinListResponse(BaseModel):
    pins: list[LockPinResponse]
    current_pin_index: int
    rotating_pins_enabled: bool


class PinHistoryEntry(BaseModel):
    booking_id: uuid.UUID
    guest_name: str
    guest_email: str
    check_in: date
    check_out: date
    pin: str | None = None
    pin_order_index: int | None = None
