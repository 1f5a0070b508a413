"""Pydantic v2 request/response schemas for email template endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from rentalops.models.email_template import TemplateType
from rentalops.schemas.common import PartialUpdate

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class EmailTemplateCreate(BaseModel):
    template_type: TemplateType = TemplateType.PRE_STAY
    subject: str = Field(..., min_length=1, max_length=255)
    html_content: str = Field(..., min_length=1)
    plain_text_content: str | None = None
    days_before_check_in: int | None = Field(None, ge=0)
    days_after_check_out: int | None = Field(None, ge=0)
    is_active: bool = True
    include_lock_pin: bool = False
    available_variables: dict[str, list[str]] | None = None


class EmailTemplateUpdate(PartialUpdate):
    """Schema for partially updating a template. All fields optional."""

    not_nullable = frozenset({"template_type", "subject", "html_content", "is_active", "include_lock_pin"})

    template_type: TemplateType | None = None
    subject: str | None = Field(None, min_length=1, max_length=255)
    html_content: str | None = Field(None, min_length=1)
    plain_text_content: str | None = None
    days_before_check_in: int | None = Field(None, ge=0)
    days_after_check_out: int | None = Field(None, ge=0)
    is_active: bool | None = None
    include_lock_pin: bool | None = None
    available_variables: dict[str, list[str]] | None = None


class TemplatePreviewRequest(BaseModel):
    """Sample values for placeholders; missing ones fall back to built-in examples."""

    variables: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class EmailTemplateResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    template_type: TemplateType
    subject: str
    html_content: str
    plain_text_content: str | None = None
    days_before_check_in: int | None = None
    days_after_check_out: int | None = None
    is_active: bool
    include_lock_pin: bool
    available_variables: dict[str, list[str]]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TemplatePreviewResponse(BaseModel):
    subject: str
    html_content: str
    plain_text_content: str | None = None
