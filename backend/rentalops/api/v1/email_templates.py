"""Email template API router.

Templates belong to a property. The preview endpoint renders a template
against sample values without touching any booking.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.api.deps import get_db, get_owned_property, service_error_to_http
from rentalops.models.email_template import EmailTemplate, TemplateType, default_available_variables
from rentalops.models.property import Property
from rentalops.models.property_settings import PropertySettings
from rentalops.schemas.common import MessageResponse
from rentalops.schemas.email_template import (
    EmailTemplateCreate,
    EmailTemplateResponse,
    EmailTemplateUpdate,
    TemplatePreviewRequest,
    TemplatePreviewResponse,
)
from rentalops.services import email_templates
from rentalops.services.errors import NotFoundError

router = APIRouter(prefix="/api/v1/properties/{property_id}/email-templates", tags=["email-templates"])

# Used by the preview for any placeholder the caller leaves out.
SAMPLE_VALUES = {
    "guest_name": "John Doe",
    "guest_email": "john.doe@example.com",
    "guest_phone": "(555) 123-4567",
    "booking_id": "00000000-0000-0000-0000-000000000000",
    "check_in_date": "2025-06-01",
    "check_out_date": "2025-06-05",
    "nights": "4",
    "number_of_guests": "2",
    "total_amount": "800.00",
    "lock_pin": "1234",
    "owner_name": "Property Owner",
    "owner_phone": "(555) 987-6543",
    "owner_email": "owner@example.com",
}


async def _get_or_404(db: AsyncSession, prop: Property, template_id: uuid.UUID) -> EmailTemplate:
    try:
        return await email_templates.get_template(db, prop.id, template_id)
    except NotFoundError as exc:
        raise service_error_to_http(exc) from exc


@router.get(
    "",
    response_model=list[EmailTemplateResponse],
    summary="List email templates for a property",
)
async def list_templates(
    template_type: TemplateType | None = Query(None, description="Filter by template type"),
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> list[EmailTemplate]:
    return await email_templates.templates_for_property(db, prop.id, template_type)


@router.post(
    "",
    response_model=EmailTemplateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an email template",
)
async def create_template(
    body: EmailTemplateCreate,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> EmailTemplate:
    data = body.model_dump()
    if data["available_variables"] is None:
        data["available_variables"] = default_available_variables()

    template = EmailTemplate(property_id=prop.id, **data)
    db.add(template)
    await db.flush()
    await db.refresh(template)
    return template


@router.get(
    "/{template_id}",
    response_model=EmailTemplateResponse,
    summary="Get an email template",
)
async def get_template(
    template_id: uuid.UUID,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> EmailTemplate:
    return await _get_or_404(db, prop, template_id)


@router.put(
    "/{template_id}",
    response_model=EmailTemplateResponse,
    summary="Update an email template",
)
async def update_template(
    template_id: uuid.UUID,
    body: EmailTemplateUpdate,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> EmailTemplate:
    """Partially update a template. Only explicitly provided fields are changed."""
    template = await _get_or_404(db, prop, template_id)

    update_data = body.model_dump(exclude_unset=True)
    if "available_variables" in update_data and update_data["available_variables"] is None:
        update_data["available_variables"] = default_available_variables()
    for field, value in update_data.items():
        setattr(template, field, value)

    await db.flush()
    await db.refresh(template)
    return template


@router.delete(
    "/{template_id}",
    response_model=MessageResponse,
    summary="Delete an email template",
)
async def delete_template(
    template_id: uuid.UUID,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> dict:
    template = await _get_or_404(db, prop, template_id)
    await db.delete(template)
    await db.flush()
    return {"message": "Email template deleted"}


@router.post(
    "/{template_id}/preview",
    response_model=TemplatePreviewResponse,
    summary="Render a template with sample values",
)
async def preview_template(
    template_id: uuid.UUID,
    body: TemplatePreviewRequest,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> TemplatePreviewResponse:
    template = await _get_or_404(db, prop, template_id)

    context = {
        **SAMPLE_VALUES,
        "property_name": prop.name,
        "property_address": prop.address,
        "property_city": prop.city,
        "property_state": prop.state,
        "property_zip": prop.zip_code,
        **email_templates.SETTINGS_FALLBACKS,
    }
    prop_settings = await db.scalar(select(PropertySettings).where(PropertySettings.property_id == prop.id))
    if prop_settings is not None:
        for name in email_templates.SETTINGS_FALLBACKS:
            value = getattr(prop_settings, name)
            if value:
                context[name] = value
    context.update(body.variables)

    return TemplatePreviewResponse(
        subject=email_templates.render_template(template.subject, context),
        html_content=email_templates.render_template(template.html_content, context, escape=True),
        plain_text_content=(
            email_templates.render_template(template.plain_text_content, context)
            if template.plain_text_content
            else None
        ),
    )
