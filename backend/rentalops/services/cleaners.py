"""Cleaner service — cleaner accounts, their property assignments and their calendar.

A cleaner is a ``cleaner``-role user plus a ``cleaners`` profile row. Owners
manage the cleaners working at their properties; admins manage every cleaner.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rentalops.models.booking import Booking
from rentalops.models.cleaner import Cleaner
from rentalops.models.property import Property
from rentalops.models.property_cleaner import PropertyCleaner
from rentalops.models.user import User, UserRole
from rentalops.services.errors import CleanerError, NotFoundError

logger = logging.getLogger(__name__)

# Bookings a cleaner has to turn the property around for.
CALENDAR_STATUSES = ("confirmed", "checked_in")


@dataclass(frozen=True)
class CleanerCalendar:
    properties: list[Property]
    bookings: list[Booking]


def split_name(name: str) -> tuple[str, str]:
    """First word is the first name; the rest (or the first word again) the last name."""
    first, _, rest = name.strip().partition(" ")
    return first, rest.strip() or first


def _managed_by(manager: User):
    """Query for the cleaners ``manager`` may see, with their properties loaded.

    Owners see the cleaners assigned to at least one of their properties.
    """
    query = select(Cleaner).options(selectinload(Cleaner.properties))
    if manager.role != UserRole.ADMIN:
        working_for = (
            select(PropertyCleaner.cleaner_id)
            .join(Property, Property.id == PropertyCleaner.property_id)
            .where(Property.user_id == manager.id)
        )
        query = query.where(Cleaner.id.in_(working_for))
    return query


async def _reload(db: AsyncSession, cleaner_id: uuid.UUID) -> Cleaner:
    result = await db.execute(
        select(Cleaner)
        .options(selectinload(Cleaner.properties))
        .where(Cleaner.id == cleaner_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def _managed_properties(db: AsyncSession, manager: User, property_ids: list[uuid.UUID]) -> list[Property]:
    """Load ``property_ids``, all of which must be managed by ``manager``."""
    wanted = set(property_ids)
    if not wanted:
        return []
    query = select(Property).where(Property.id.in_(wanted))
    if manager.role != UserRole.ADMIN:
        query = query.where(Property.user_id == manager.id)
    properties = list((await db.execute(query)).scalars().all())
    if len(properties) != len(wanted):
        raise NotFoundError("Property not found")
    return properties


async def _ensure_email_free(db: AsyncSession, email: str, user_id: uuid.UUID | None = None) -> None:
    query = select(User.id).where(User.email == email)
    if user_id is not None:
        query = query.where(User.id != user_id)
    if await db.scalar(query) is not None:
        raise CleanerError("A user with this email already exists")


async def list_cleaners(db: AsyncSession, manager: User) -> list[Cleaner]:
    """Cleaners visible to ``manager``, newest first."""
    result = await db.execute(_managed_by(manager).order_by(Cleaner.created_at.desc(), Cleaner.name))
    return list(result.scalars().all())


async def get_cleaner(db: AsyncSession, manager: User, cleaner_id: uuid.UUID) -> Cleaner:
    """Load a cleaner that ``manager`` may manage, or raise ``NotFoundError``."""
    result = await db.execute(_managed_by(manager).where(Cleaner.id == cleaner_id))
    cleaner = result.scalar_one_or_none()
    if cleaner is None:
        raise NotFoundError("Cleaner not found")
    return cleaner


async def create_cleaner(
    db: AsyncSession,
    manager: User,
    *,
    name: str,
    email: str,
    phone_number: str | None = None,
    notes: str | None = None,
    property_ids: list[uuid.UUID] | None = None,
) -> Cleaner:
    """Create the cleaner's user account and profile and assign their properties.

    Raises:
        CleanerError: If a user with ``email`` already exists.
        NotFoundError: If a property is unknown or not managed by ``manager``.
    """
    await _ensure_email_free(db, email)
    properties = await _managed_properties(db, manager, property_ids or [])

    first_name, last_name = split_name(name)
    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        phone_number=phone_number,
        role=UserRole.CLEANER,
    )
    db.add(user)
    await db.flush()

    cleaner = Cleaner(user_id=user.id, name=name, email=email, phone_number=phone_number, notes=notes)
    db.add(cleaner)
    await db.flush()

    db.add_all(PropertyCleaner(property_id=prop.id, cleaner_id=cleaner.id) for prop in properties)
    await db.flush()

    logger.info("Created cleaner %s (%s) for %d properties", cleaner.id, email, len(properties))
    return await _reload(db, cleaner.id)


async def update_cleaner(
    db: AsyncSession,
    manager: User,
    cleaner: Cleaner,
    changes: dict[str, Any],
    property_ids: list[uuid.UUID] | None = None,
) -> Cleaner:
    """Apply profile ``changes`` and, when given, replace the manager's assignments.

    Name, email, phone and active flag are mirrored onto the cleaner's user
    account. An owner's ``property_ids`` only replace assignments at that
    owner's properties; an admin's list replaces every assignment.

    Raises:
        CleanerError: If the new email belongs to another user.
        NotFoundError: If a property is unknown or not managed by ``manager``.
    """
    if "email" in changes:
        await _ensure_email_free(db, changes["email"], cleaner.user_id)
    properties = await _managed_properties(db, manager, property_ids) if property_ids is not None else None

    for field, value in changes.items():
        setattr(cleaner, field, value)

    user = await db.get(User, cleaner.user_id)
    if "name" in changes:
        user.first_name, user.last_name = split_name(changes["name"])
    for field in ("email", "phone_number", "is_active"):
        if field in changes:
            setattr(user, field, changes[field])

    if properties is not None:
        stale = delete(PropertyCleaner).where(PropertyCleaner.cleaner_id == cleaner.id)
        if manager.role != UserRole.ADMIN:
            owned = select(Property.id).where(Property.user_id == manager.id)
            stale = stale.where(PropertyCleaner.property_id.in_(owned))
        await db.execute(stale)
        db.add_all(PropertyCleaner(property_id=prop.id, cleaner_id=cleaner.id) for prop in properties)

    await db.flush()
    logger.info("Updated cleaner %s", cleaner.id)
    return await _reload(db, cleaner.id)


async def delete_cleaner(db: AsyncSession, cleaner: Cleaner) -> None:
    """Delete the cleaner's user account; the profile and assignments cascade."""
    cleaner_id, user_id = cleaner.id, cleaner.user_id
    db.expunge(cleaner)
    await db.execute(delete(User).where(User.id == user_id))
    logger.info("Deleted cleaner %s and user %s", cleaner_id, user_id)


async def cleaner_calendar(db: AsyncSession, user: User) -> CleanerCalendar:
    """Upcoming and in-progress bookings at the properties the cleaner is assigned to.

    Raises:
        NotFoundError: If ``user`` has no cleaner profile.
    """
    cleaner = await db.scalar(select(Cleaner).where(Cleaner.user_id == user.id))
    if cleaner is None:
        raise NotFoundError("Cleaner profile not found")

    result = await db.execute(
        select(Property)
        .join(PropertyCleaner, PropertyCleaner.property_id == Property.id)
        .where(PropertyCleaner.cleaner_id == cleaner.id, PropertyCleaner.is_active.is_(True))
        .order_by(Property.name)
    )
    properties = list(result.scalars().all())
    if not properties:
        return CleanerCalendar(properties=[], bookings=[])

    result = await db.execute(
        select(Booking)
        .where(
            Booking.property_id.in_([p.id for p in properties]),
            Booking.status.in_(CALENDAR_STATUSES),
        )
        .order_by(Booking.check_in, Booking.id)
    )
    return CleanerCalendar(properties=properties, bookings=list(result.scalars().all()))
