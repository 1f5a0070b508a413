"""Pydantic v2 request/response schemas for review endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from rentalops.models.review import ReviewPlatform
from rentalops.schemas.common import PartialUpdate

Score = Decimal


class ReviewCreate(BaseModel):
    booking_id: uuid.UUID | None = None
    guest_id: uuid.UUID | None = None
    guest_name: str = Field(..., min_length=1, max_length=255)
    guest_email: EmailStr | None = None
    rating: Score = Field(..., ge=1, le=5, decimal_places=1)
    cleanliness: Score | None = Field(None, ge=1, le=5, decimal_places=1)
    communication: Score | None = Field(None, ge=1, le=5, decimal_places=1)
    check_in: Score | None = Field(None, ge=1, le=5, decimal_places=1)
    accuracy: Score | None = Field(None, ge=1, le=5, decimal_places=1)
    location: Score | None = Field(None, ge=1, le=5, decimal_places=1)
    value: Score | None = Field(None, ge=1, le=5, decimal_places=1)
    title: str | None = Field(None, max_length=255)
    comment: str | None = None
    platform: ReviewPlatform = ReviewPlatform.DIRECT
    external_review_id: str | None = Field(None, max_length=255)
    check_in_date: datetime | None = None
    check_out_date: datetime | None = None


class OwnerResponseUpdate(BaseModel):
    response: str = Field(..., min_length=1)


class ReviewUpdate(PartialUpdate):
    """Owner edits: the public response and whether the review is published."""

    not_nullable = frozenset({"is_published"})

    owner_response: str | None = Field(None, min_length=1)
    is_published: bool | None = None


class ReviewResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    booking_id: uuid.UUID | None = None
    guest_id: uuid.UUID | None = None
    guest_name: str
    rating: Decimal
    cleanliness: Decimal | None = None
    communication: Decimal | None = None
    check_in: Decimal | None = None
    accuracy: Decimal | None = None
    location: Decimal | None = None
    value: Decimal | None = None
    title: str | None = None
    comment: str | None = None
    platform: ReviewPlatform
    is_verified: bool
    is_published: bool
    owner_response: str | None = None
    owner_response_date: datetime | None = None
    helpful_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewListResponse(BaseModel):
    items: list[ReviewResponse]
    total: int


class ReviewSummaryResponse(BaseModel):
    total: int
    overall: Decimal | None = None
    categories: dict[str, Decimal | None]
