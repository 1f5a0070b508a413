"""Cleaner accounts API router.

Owners and admins create and manage cleaner accounts here; per-property
assignment lives under ``/properties/{property_id}/cleaners``. Cleaners
themselves only reach their calendar.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.api.deps import get_db, get_property_manager, require_roles, service_error_to_http
from rentalops.models.cleaner import Cleaner
from rentalops.models.user import User, UserRole
from rentalops.schemas.cleaner import (
    CleanerCalendarResponse,
    CleanerCreate,
    CleanerResponse,
    CleanerUpdate,
)
from rentalops.schemas.common import MessageResponse
from rentalops.services import cleaners as cleaner_service
from rentalops.services.errors import ServiceError

router = APIRouter(prefix="/api/v1/cleaners", tags=["cleaners"])


@router.get(
    "/calendar",
    response_model=CleanerCalendarResponse,
    summary="Bookings at the current cleaner's properties",
)
async def get_calendar(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.CLEANER)),
) -> dict:
    try:
        calendar = await cleaner_service.cleaner_calendar(db, current_user)
    except ServiceError as exc:
        raise service_error_to_http(exc) from exc
    return {"properties": calendar.properties, "bookings": calendar.bookings}


@router.get(
    "",
    response_model=list[CleanerResponse],
    summary="List cleaners",
)
async def list_cleaners(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> list[Cleaner]:
    """Owners get the cleaners working at their properties; admins get all cleaners."""
    return await cleaner_service.list_cleaners(db, current_user)


@router.post(
    "",
    response_model=CleanerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a cleaner account",
)
async def create_cleaner(
    body: CleanerCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> Cleaner:
    """Create a ``cleaner``-role user with a cleaner profile.

    Raises 404 if a listed property is not the caller's and 409 if the email
    is already taken.
    """
    try:
        return await cleaner_service.create_cleaner(db, current_user, **body.model_dump())
    except ServiceError as exc:
        raise service_error_to_http(exc) from exc


@router.get(
    "/{cleaner_id}",
    response_model=CleanerResponse,
    summary="Get a cleaner",
)
async def get_cleaner(
    cleaner_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> Cleaner:
    try:
        return await cleaner_service.get_cleaner(db, current_user, cleaner_id)
    except ServiceError as exc:
        raise service_error_to_http(exc) from exc


@router.put(
    "/{cleaner_id}",
    response_model=CleanerResponse,
    summary="Update a cleaner",
)
async def update_cleaner(
    cleaner_id: uuid.UUID,
    body: CleanerUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> Cleaner:
    """Partially update a cleaner; ``property_ids`` replaces the caller's assignments."""
    changes = body.model_dump(exclude_unset=True)
    property_ids = changes.pop("property_ids", None)
    try:
        cleaner = await cleaner_service.get_cleaner(db, current_user, cleaner_id)
        return await cleaner_service.update_cleaner(db, current_user, cleaner, changes, property_ids)
    except ServiceError as exc:
        raise service_error_to_http(exc) from exc


@router.delete(
    "/{cleaner_id}",
    response_model=MessageResponse,
    summary="Delete a cleaner and their account",
)
async def delete_cleaner(
    cleaner_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> dict:
    try:
        cleaner = await cleaner_service.get_cleaner(db, current_user, cleaner_id)
    except ServiceError as exc:
        raise service_error_to_http(exc) from exc
    await cleaner_service.delete_cleaner(db, cleaner)
    return {"message": "Cleaner deleted"}
