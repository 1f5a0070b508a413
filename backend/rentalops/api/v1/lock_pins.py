"""Lock PIN API router.

PINs are returned decrypted to the owner of the property. Rotation order is
the ``order_index`` of each PIN; the settings row carries the rotation cursor.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.api.deps import get_db, get_owned_property, service_error_to_http
from rentalops.models.property import Property
from rentalops.models.property_lock_pin import PropertyLockPin
from rentalops.schemas.common import MessageResponse
from rentalops.schemas.lock_pin import (
    LockPinCreate,
    LockPinListResponse,
    LockPinReorder,
    LockPinResponse,
    LockPinUpdate,
    PinHistoryEntry,
)
from rentalops.services import lock_pins
from rentalops.services.errors import ServiceError
from rentalops.services.property_settings import get_or_create_settings

router = APIRouter(prefix="/api/v1/properties/{property_id}/lock-pins", tags=["lock-pins"])


def _to_response(lock_pin: PropertyLockPin) -> LockPinResponse:
    return LockPinResponse(
        id=lock_pin.id,
        pin=lock_pins.decrypt_pin(lock_pin.pin),
        order_index=lock_pin.order_index,
        is_active=lock_pin.is_active,
        last_used_at=lock_pin.last_used_at,
        usage_count=lock_pin.usage_count,
        notes=lock_pin.notes,
    )


async def _list_response(db: AsyncSession, property_id: uuid.UUID) -> LockPinListResponse:
    pins = await lock_pins.list_lock_pins(db, property_id)
    prop_settings = await get_or_create_settings(db, property_id)
    return LockPinListResponse(
        pins=[_to_response(p) for p in pins],
        current_pin_index=prop_settings.current_pin_index,
        rotating_pins_enabled=prop_settings.rotating_pins_enabled,
    )


@router.get(
    "",
    response_model=LockPinListResponse,
    summary="List lock PINs in rotation order",
)
async def list_pins(
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> LockPinListResponse:
    return await _list_response(db, prop.id)


@router.post(
    "",
    response_model=LockPinResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a lock PIN at the end of the rotation",
)
async def add_pin(
    body: LockPinCreate,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> LockPinResponse:
    try:
        lock_pin = await lock_pins.add_lock_pin(db, prop.id, body.pin, body.notes)
    except ServiceError as exc:
        raise service_error_to_http(exc) from exc
    await db.refresh(lock_pin)
    return _to_response(lock_pin)


@router.get(
    "/history",
    response_model=list[PinHistoryEntry],
    summary="Bookings that were handed a PIN",
)
async def pin_history(
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> list[PinHistoryEntry]:
    bookings = await lock_pins.pin_history(db, prop.id)
    return [
        PinHistoryEntry(
            booking_id=b.id,
            guest_name=b.guest_name,
            guest_email=b.guest_email,
            check_in=b.check_in,
            check_out=b.check_out,
            pin=b.assigned_lock_pin,
            pin_order_index=b.lock_pin.order_index if b.lock_pin is not None else None,
        )
        for b in bookings
    ]


# Declared before "/{pin_id}" so "reorder" is not parsed as a PIN id.
@router.put(
    "/reorder",
    response_model=LockPinListResponse,
    summary="Set the rotation order",
)
async def reorder_pins(
    body: LockPinReorder,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> LockPinListResponse:
    """Reorder PINs. The body must list every PIN of the property exactly once."""
    try:
        await lock_pins.reorder_lock_pins(db, prop.id, body.pin_order)
    except ServiceError as exc:
        raise service_error_to_http(exc) from exc
    return await _list_response(db, prop.id)


@router.put(
    "/{pin_id}",
    response_model=LockPinResponse,
    summary="Update a lock PIN",
)
async def update_pin(
    pin_id: uuid.UUID,
    body: LockPinUpdate,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> LockPinResponse:
    try:
        lock_pin = await lock_pins.get_lock_pin(db, prop.id, pin_id)
        lock_pin = await lock_pins.update_lock_pin(db, lock_pin, **body.model_dump(exclude_unset=True))
    except ServiceError as exc:
        raise service_error_to_http(exc) from exc
    return _to_response(lock_pin)


@router.delete(
    "/{pin_id}",
    response_model=MessageResponse,
    summary="Delete a lock PIN",
)
async def delete_pin(
    pin_id: uuid.UUID,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Delete a PIN and close the gap in the rotation order.

    Bookings that were given this PIN keep the PIN text but lose the link.
    """
    try:
        lock_pin = await lock_pins.get_lock_pin(db, prop.id, pin_id)
        await lock_pins.delete_lock_pin(db, prop.id, lock_pin)
    except ServiceError as exc:
        raise service_error_to_http(exc) from exc
    return {"message": "Lock PIN deleted"}
