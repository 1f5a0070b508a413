"""Property contacts API router."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.api.deps import get_db, get_owned_property
from rentalops.models.property import Property
from rentalops.models.property_contact import PropertyContact
from rentalops.schemas.common import MessageResponse
from rentalops.schemas.property_contact import (
    PropertyContactCreate,
    PropertyContactResponse,
    PropertyContactUpdate,
)

router = APIRouter(prefix="/api/v1/properties/{property_id}/contacts", tags=["contacts"])


async def _get_contact(db: AsyncSession, prop: Property, contact_id: uuid.UUID) -> PropertyContact:
    result = await db.execute(
        select(PropertyContact).where(
            PropertyContact.id == contact_id,
            PropertyContact.property_id == prop.id,
        )
    )
    contact = result.scalar_one_or_none()
    if contact is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contact not found",
        )
    return contact


@router.get(
    "",
    response_model=list[PropertyContactResponse],
    summary="List contacts for a property",
)
async def list_contacts(
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> list[PropertyContact]:
    """Primary contacts first, then by name."""
    result = await db.execute(
        select(PropertyContact)
        .where(PropertyContact.property_id == prop.id)
        .order_by(PropertyContact.is_primary.desc(), PropertyContact.name)
    )
    return list(result.scalars().all())


@router.post(
    "",
    response_model=PropertyContactResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a contact to a property",
)
async def create_contact(
    body: PropertyContactCreate,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> PropertyContact:
    contact = PropertyContact(property_id=prop.id, **body.model_dump())
    db.add(contact)
    await db.flush()
    await db.refresh(contact)
    return contact


@router.put(
    "/{contact_id}",
    response_model=PropertyContactResponse,
    summary="Update a contact",
)
async def update_contact(
    contact_id: uuid.UUID,
    body: PropertyContactUpdate,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> PropertyContact:
    contact = await _get_contact(db, prop, contact_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(contact, field, value)

    await db.flush()
    await db.refresh(contact)
    return contact


@router.delete(
    "/{contact_id}",
    response_model=MessageResponse,
    summary="Remove a contact",
)
async def delete_contact(
    contact_id: uuid.UUID,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> dict:
    contact = await _get_contact(db, prop, contact_id)
    await db.delete(contact)
    await db.flush()
    return {"message": "Contact deleted"}
