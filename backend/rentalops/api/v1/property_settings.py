"""Property settings API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.api.deps import get_db, get_owned_property
from rentalops.models.property import Property
from rentalops.models.property_settings import PropertySettings
from rentalops.schemas.property_settings import (
    PropertySettingsResponse,
    PropertySettingsUpdate,
    RotatingPinsToggle,
)
from rentalops.services import property_settings as settings_service

router = APIRouter(prefix="/api/v1/properties/{property_id}/settings", tags=["settings"])


@router.get(
    "",
    response_model=PropertySettingsResponse,
    summary="Get property settings",
)
async def get_settings(
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> PropertySettings:
    """Return the property's settings, creating the defaults on first access."""
    return await settings_service.get_or_create_settings(db, prop.id)


@router.put(
    "",
    response_model=PropertySettingsResponse,
    summary="Update property settings",
)
async def update_settings(
    body: PropertySettingsUpdate,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> PropertySettings:
    """Partially update settings. Only explicitly provided fields are changed."""
    return await settings_service.update_settings(db, prop.id, body.model_dump(exclude_unset=True))


@router.put(
    "/rotating-pins",
    response_model=PropertySettingsResponse,
    summary="Enable or disable rotating PINs",
)
async def toggle_rotating_pins(
    body: RotatingPinsToggle,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> PropertySettings:
    return await settings_service.set_rotating_pins(db, prop.id, body.enabled)
