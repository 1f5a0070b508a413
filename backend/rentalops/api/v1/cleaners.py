"""Property cleaner assignment API router."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.api.deps import get_db, get_owned_property
from rentalops.models.cleaner import Cleaner
from rentalops.models.property import Property
from rentalops.models.property_cleaner import PropertyCleaner
from rentalops.schemas.cleaner import CleanerAssign, PropertyCleanerResponse
from rentalops.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/properties/{property_id}/cleaners", tags=["cleaners"])


@router.get(
    "",
    response_model=list[PropertyCleanerResponse],
    summary="List cleaners assigned to a property",
)
async def list_property_cleaners(
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> list[PropertyCleaner]:
    result = await db.execute(
        select(PropertyCleaner)
        .where(PropertyCleaner.property_id == prop.id)
        .order_by(PropertyCleaner.assigned_at)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


@router.post(
    "",
    response_model=PropertyCleanerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign a cleaner to a property",
)
async def assign_cleaner(
    body: CleanerAssign,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> PropertyCleaner:
    """Assign an existing, active cleaner.

    Raises 404 if the cleaner does not exist or is inactive, and 409 if the
    cleaner is already assigned to this property.
    """
    cleaner = await db.get(Cleaner, body.cleaner_id)
    if cleaner is None or not cleaner.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cleaner not found",
        )

    assignment = PropertyCleaner(property_id=prop.id, cleaner=cleaner)
    try:
        async with db.begin_nested():
            db.add(assignment)
            await db.flush()
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cleaner is already assigned to this property",
        ) from None

    logger.info("Assigned cleaner %s to property %s", cleaner.id, prop.id)
    return assignment


@router.delete(
    "/{cleaner_id}",
    response_model=MessageResponse,
    summary="Unassign a cleaner from a property",
)
async def unassign_cleaner(
    cleaner_id: uuid.UUID,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> dict:
    result = await db.execute(
        select(PropertyCleaner).where(
            PropertyCleaner.property_id == prop.id,
            PropertyCleaner.cleaner_id == cleaner_id,
        )
    )
    assignment = result.scalar_one_or_none()
    if assignment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cleaner is not assigned to this property",
        )

    await db.delete(assignment)
    await db.flush()
    return {"message": "Cleaner unassigned"}
