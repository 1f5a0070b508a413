"""Lock PIN service — storage, ordering and round-robin rotation of smart-lock PINs.

PINs are stored Fernet-encrypted. ``order_index`` is unique per property and
kept dense (0..n-1); rotation walks the *active* PINs in that order using
``PropertySettings.current_pin_index`` as the cursor.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from cryptography.fernet import Fernet, InvalidToken
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rentalops.config import settings
from rentalops.models.booking import Booking
from rentalops.models.property_lock_pin import PropertyLockPin
from rentalops.models.property_settings import PropertySettings
from rentalops.services.errors import LockPinError, NotFoundError

logger = logging.getLogger(__name__)

MIN_PIN_LENGTH = 4
MASKED_PIN = "****"
HISTORY_LIMIT = 100


@dataclass(frozen=True)
class RotatedPin:
    """The PIN picked by a rotation step."""

    pin: str
    pin_id: uuid.UUID
    order_index: int


def _fernet() -> Fernet:
    return Fernet(settings.pin_encryption_key.encode("utf-8"))


def encrypt_pin(pin: str) -> str:
    return _fernet().encrypt(pin.encode("utf-8")).decode("ascii")


def decrypt_pin(token: str) -> str:
    """Decrypt a stored PIN. Undecryptable values are masked rather than raised."""
    try:
        return _fernet().decrypt(token.encode("ascii")).decode("utf-8")
    except (InvalidToken, ValueError):
        logger.error("Could not decrypt lock PIN; returning masked value")
        return MASKED_PIN


def _validate_pin(pin: str) -> None:
    if len(pin) < MIN_PIN_LENGTH:
        raise LockPinError(f"PIN must be at least {MIN_PIN_LENGTH} characters")


async def list_lock_pins(db: AsyncSession, property_id: uuid.UUID) -> list[PropertyLockPin]:
    result = await db.execute(
        select(PropertyLockPin)
        .where(PropertyLockPin.property_id == property_id)
        .order_by(PropertyLockPin.order_index)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_lock_pin(db: AsyncSession, property_id: uuid.UUID, pin_id: uuid.UUID) -> PropertyLockPin:
    result = await db.execute(
        select(PropertyLockPin).where(
            PropertyLockPin.id == pin_id,
            PropertyLockPin.property_id == property_id,
        )
    )
    lock_pin = result.scalar_one_or_none()
    if lock_pin is None:
        raise NotFoundError("Lock PIN not found")
    return lock_pin


async def add_lock_pin(
    db: AsyncSession, property_id: uuid.UUID, pin: str, notes: str | None = None
) -> PropertyLockPin:
    """Append a PIN at the end of the rotation order."""
    _validate_pin(pin)

    max_index = await db.scalar(
        select(func.max(PropertyLockPin.order_index)).where(PropertyLockPin.property_id == property_id)
    )
    next_index = 0 if max_index is None else max_index + 1

    lock_pin = PropertyLockPin(
        property_id=property_id,
        pin=encrypt_pin(pin),
        order_index=next_index,
        notes=notes,
        is_active=True,
    )
    db.add(lock_pin)
    await db.flush()
    logger.info("Added lock PIN %s at index %d for property %s", lock_pin.id, next_index, property_id)
    return lock_pin


async def update_lock_pin(
    db: AsyncSession,
    lock_pin: PropertyLockPin,
    *,
    pin: str | None = None,
    notes: str | None = None,
    is_active: bool | None = None,
) -> PropertyLockPin:
    if pin is not None:
        _validate_pin(pin)
        lock_pin.pin = encrypt_pin(pin)
    if notes is not None:
        lock_pin.notes = notes
    if is_active is not None:
        lock_pin.is_active = is_active

    await db.flush()
    await db.refresh(lock_pin)
    return lock_pin


async def _assign_order(db: AsyncSession, property_id: uuid.UUID, pin_ids: list[uuid.UUID]) -> None:
    # Two passes so no intermediate state collides on (property_id, order_index).
    for position, pin_id in enumerate(pin_ids):
        await db.execute(
            update(PropertyLockPin)
            .where(PropertyLockPin.id == pin_id, PropertyLockPin.property_id == property_id)
            .values(order_index=-(position + 1))
        )
    for position, pin_id in enumerate(pin_ids):
        await db.execute(
            update(PropertyLockPin)
            .where(PropertyLockPin.id == pin_id, PropertyLockPin.property_id == property_id)
            .values(order_index=position)
        )


async def _get_settings(
    db: AsyncSession, property_id: uuid.UUID, *, for_update: bool = False
) -> PropertySettings | None:
    query = select(PropertySettings).where(PropertySettings.property_id == property_id)
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def _active_pin_count(db: AsyncSession, property_id: uuid.UUID) -> int:
    count = await db.scalar(
        select(func.count())
        .select_from(PropertyLockPin)
        .where(PropertyLockPin.property_id == property_id, PropertyLockPin.is_active.is_(True))
    )
    return count or 0


async def delete_lock_pin(db: AsyncSession, property_id: uuid.UUID, lock_pin: PropertyLockPin) -> None:
    """Delete a PIN, close the gap in the order, and keep the rotation cursor in range.

    Bookings that used the PIN keep their ``assigned_lock_pin`` string; their
    ``lock_pin_id`` is cleared by the foreign key (ON DELETE SET NULL).
    """
    await db.delete(lock_pin)
    await db.flush()

    remaining = [p.id for p in await list_lock_pins(db, property_id)]
    await _assign_order(db, property_id, remaining)

    active = await _active_pin_count(db, property_id)
    prop_settings = await _get_settings(db, property_id)
    if prop_settings is not None and prop_settings.current_pin_index >= active:
        prop_settings.current_pin_index = 0
    await db.flush()
    logger.info("Deleted lock PIN %s for property %s", lock_pin.id, property_id)


async def reorder_lock_pins(db: AsyncSession, property_id: uuid.UUID, pin_ids: list[uuid.UUID]) -> list[PropertyLockPin]:
    """Set the rotation order to ``pin_ids``; every PIN of the property must be listed once."""
    existing = {p.id for p in await list_lock_pins(db, property_id)}
    if len(set(pin_ids)) != len(pin_ids) or set(pin_ids) != existing:
        raise LockPinError("pin order must list every PIN of the property exactly once")

    await _assign_order(db, property_id, pin_ids)
    await db.flush()
    return await list_lock_pins(db, property_id)


async def next_rotating_pin(db: AsyncSession, property_id: uuid.UUID) -> RotatedPin | None:
    """Pick the next PIN in round-robin order and advance the cursor.

    Returns None when rotation is disabled or the property has no active PINs.
    """
    prop_settings = await _get_settings(db, property_id, for_update=True)
    if prop_settings is None or not prop_settings.rotating_pins_enabled:
        return None

    result = await db.execute(
        select(PropertyLockPin)
        .where(PropertyLockPin.property_id == property_id, PropertyLockPin.is_active.is_(True))
        .order_by(PropertyLockPin.order_index)
    )
    pins = list(result.scalars().all())
    if not pins:
        logger.info("No active PINs found for property %s", property_id)
        return None

    current = prop_settings.current_pin_index or 0
    position = current % len(pins)
    selected = pins[position]

    selected.last_used_at = datetime.now(timezone.utc)
    selected.usage_count = (selected.usage_count or 0) + 1
    prop_settings.current_pin_index = (current + 1) % len(pins)
    await db.flush()

    logger.info("Assigned PIN at index %d for property %s", position, property_id)
    return RotatedPin(pin=decrypt_pin(selected.pin), pin_id=selected.id, order_index=selected.order_index)


async def assign_pin_to_booking(db: AsyncSession, booking: Booking) -> str | None:
    """Give the booking the next rotating PIN; returns the plain PIN or None."""
    rotated = await next_rotating_pin(db, booking.property_id)
    if rotated is None:
        logger.info("No PIN assigned for booking %s", booking.id)
        return None

    booking.assigned_lock_pin = rotated.pin
    booking.lock_pin_id = rotated.pin_id
    await db.flush()
    logger.info("PIN assigned to booking %s", booking.id)
    return rotated.pin


async def pin_history(db: AsyncSession, property_id: uuid.UUID) -> list[Booking]:
    """Bookings that were given a PIN still on record, newest check-in first."""
    result = await db.execute(
        select(Booking)
        .where(Booking.property_id == property_id, Booking.lock_pin_id.is_not(None))
        .options(selectinload(Booking.lock_pin))
        .order_by(Booking.check_in.desc())
        .limit(HISTORY_LIMIT)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
