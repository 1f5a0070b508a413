"""Guest service — recording stays and keeping per-guest aggregates current."""

import csv
import io
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, time, timezone
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select, true
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.models.booking import Booking
from rentalops.models.guest import Guest
from rentalops.models.guest_stay import GuestStay
from rentalops.models.property import Property
from rentalops.services.errors import GuestStayError

logger = logging.getLogger(__name__)

REPEAT_GUEST_TAG = "Repeat Guest"
VIP_TAG = "VIP"
REPEAT_GUEST_STAYS = 3
VIP_STAYS = 5
MIN_STAY_RATING = 1
MAX_STAY_RATING = 5

CSV_COLUMNS = (
    "Name",
    "Email",
    "Phone",
    "Total Stays",
    "Total Spent",
    "Last Stay Date",
    "Marketing Opt-In",
    "Tags",
)


@dataclass(frozen=True)
class BlacklistStatus:
    is_blacklisted: bool
    reason: str | None = None


@dataclass(frozen=True)
class GuestStats:
    total_guests: int
    marketing_opt_in_guests: int
    repeat_guests: int
    average_stays: Decimal


async def get_guest_by_email(db: AsyncSession, email: str) -> Guest | None:
    result = await db.execute(select(Guest).where(Guest.email == email))
    return result.scalar_one_or_none()


def _as_datetime(day) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


async def record_guest_stay(db: AsyncSession, booking: Booking) -> tuple[Guest, GuestStay]:
    """Record the stay of a completed booking and update the guest's aggregates.

    The guest is matched (or created) by the booking's email. Each booking can
    be recorded once.
    """
    existing_stay = await db.scalar(select(GuestStay.id).where(GuestStay.booking_id == booking.id))
    if existing_stay is not None:
        raise GuestStayError(f"Stay already recorded for booking {booking.id}")

    stay_date = _as_datetime(booking.check_out)

    guest = await get_guest_by_email(db, booking.guest_email)
    if guest is None:
        guest = Guest(
            email=booking.guest_email,
            name=booking.guest_name,
            phone_number=booking.guest_phone,
            total_stays=0,
            total_spent=Decimal("0"),
            first_stay_date=stay_date,
            last_stay_date=stay_date,
            marketing_opt_in=True,
            tags=[],
        )
        db.add(guest)
        await db.flush()
        logger.info("Created guest record for %s", booking.guest_email)

    stay = GuestStay(
        guest_id=guest.id,
        property_id=booking.property_id,
        booking_id=booking.id,
        check_in=booking.check_in,
        check_out=booking.check_out,
        nights=booking.nights,
        number_of_guests=booking.number_of_guests,
        total_amount=booking.total_amount,
    )
    db.add(stay)

    guest.total_stays = (guest.total_stays or 0) + 1
    guest.total_spent = Decimal(guest.total_spent or 0) + Decimal(booking.total_amount)
    guest.last_stay_date = stay_date
    if guest.first_stay_date is None or stay_date < guest.first_stay_date:
        guest.first_stay_date = stay_date

    # Reassign so the ARRAY column is seen as changed.
    tags = list(guest.tags or [])
    if guest.total_stays >= REPEAT_GUEST_STAYS and REPEAT_GUEST_TAG not in tags:
        tags.append(REPEAT_GUEST_TAG)
    if guest.total_stays >= VIP_STAYS and VIP_TAG not in tags:
        tags.append(VIP_TAG)
    guest.tags = tags

    await db.flush()
    logger.info("Guest stay recorded for %s (booking %s)", guest.email, booking.id)
    return guest, stay


async def update_guest_info(
    db: AsyncSession, email: str, *, name: str | None = None, phone_number: str | None = None
) -> Guest | None:
    """Copy changed contact details from a booking onto the guest, if one exists."""
    guest = await get_guest_by_email(db, email)
    if guest is None:
        return None

    if name:
        guest.name = name
    if phone_number:
        guest.phone_number = phone_number
    await db.flush()
    return guest


async def check_blacklist(db: AsyncSession, email: str) -> BlacklistStatus:
    guest = await get_guest_by_email(db, email)
    if guest is None:
        return BlacklistStatus(is_blacklisted=False)
    return BlacklistStatus(is_blacklisted=guest.is_blacklisted, reason=guest.blacklist_reason)


async def marketing_list(db: AsyncSession, property_ids: list[uuid.UUID]) -> list[Guest]:
    """Opted-in, non-blacklisted guests who stayed at any of ``property_ids``."""
    if not property_ids:
        return []
    stayed = select(GuestStay.guest_id).where(GuestStay.property_id.in_(property_ids))
    result = await db.execute(
        select(Guest)
        .where(
            Guest.marketing_opt_in.is_(True),
            Guest.is_blacklisted.is_(False),
            Guest.id.in_(stayed),
        )
        .order_by(Guest.email)
    )
    return list(result.scalars().all())


def stayed_with(owner_id: uuid.UUID | None):
    """Filter clause: guests with a stay at one of ``owner_id``'s properties.

    ``None`` matches every guest.
    """
    if owner_id is None:
        return true()
    stayed = (
        select(GuestStay.guest_id)
        .join(Property, Property.id == GuestStay.property_id)
        .where(Property.user_id == owner_id)
    )
    return Guest.id.in_(stayed)


async def rate_guest_stay(
    db: AsyncSession, stay: GuestStay, *, rating: int | None = None, review: str | None = None
) -> GuestStay:
    """Store the owner's rating (1-5) and/or notes on a guest's stay."""
    if rating is not None:
        if not MIN_STAY_RATING <= rating <= MAX_STAY_RATING:
            raise ValueError(f"Rating must be between {MIN_STAY_RATING} and {MAX_STAY_RATING}")
        stay.rating = rating
    if review is not None:
        stay.review = review
    await db.flush()
    return stay


async def guest_stats(db: AsyncSession, owner_id: uuid.UUID | None) -> GuestStats:
    """Headline numbers over the guests visible to ``owner_id``.

    Stay counts are the guest's totals across all properties.
    """
    result = await db.execute(
        select(
            func.count(Guest.id),
            func.count(Guest.id).filter(Guest.marketing_opt_in.is_(True)),
            func.count(Guest.id).filter(Guest.total_stays > 1),
            func.avg(Guest.total_stays),
        ).where(stayed_with(owner_id))
    )
    total, opted_in, repeat, average = result.one()
    return GuestStats(
        total_guests=total,
        marketing_opt_in_guests=opted_in,
        repeat_guests=repeat,
        average_stays=Decimal(average or 0).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP),
    )


def guests_csv(guests: list[Guest]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for guest in guests:
        writer.writerow(
            [
                guest.name,
                guest.email,
                guest.phone_number or "",
                guest.total_stays,
                guest.total_spent,
                guest.last_stay_date.date().isoformat() if guest.last_stay_date else "",
                "Yes" if guest.marketing_opt_in else "No",
                ", ".join(guest.tags or []),
            ]
        )
    return buffer.getvalue()
