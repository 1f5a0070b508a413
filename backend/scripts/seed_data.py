"""Seed the database with a demo owner, two rentals and their operations data.

Creates lock PINs with rotation enabled, property settings, a pre-stay email
template, contacts, a cleaner, bookings (past ones checked out and recorded as guest
stays) and a few reviews.

Run from the backend directory:
    python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select

from rentalops.database import session_scope
from rentalops.models import (
    Booking,
    ContactType,
    EmailTemplate,
    Guest,
    Property,
    PropertyContact,
    PropertySettings,
    Review,
    TemplateType,
    User,
    UserRole,
)
from rentalops.services import cleaners as cleaner_service
from rentalops.services import guests as guest_service
from rentalops.services import lock_pins

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_OWNER = {
    "email": "demo@rentalops.dev",
    "first_name": "Demo",
    "last_name": "Owner",
    "phone_number": "+1 207 555 0100",
}

DEMO_CLEANER = {
    "email": "cleaner@rentalops.dev",
    "name": "Casey Morales",
    "phone_number": "+1 207 555 0142",
}

PROPERTIES = [
    {
        "name": "Seaside Cottage",
        "property_type": "cottage",
        "description": "Two-bedroom cottage a short walk from the harbour.",
        "address": "12 Harbour Road",
        "city": "Portland",
        "state": "ME",
        "zip_code": "04101",
        "max_guests": 4,
        "base_price": Decimal("180.00"),
        "status": "active",
    },
    {
        "name": "Lakeview Cabin",
        "property_type": "cabin",
        "description": "Log cabin with a private dock and wood stove.",
        "address": "88 Shore Lane",
        "city": "Rangeley",
        "state": "ME",
        "zip_code": "04970",
        "max_guests": 6,
        "base_price": Decimal("240.00"),
        "status": "active",
    },
]

SETTINGS = {
    "rotating_pins_enabled": True,
    "pre_stay_email_enabled": True,
    "pre_stay_email_days": 3,
    "wifi_network": "GuestNet",
    "wifi_password": "welcome-home",
    "check_in_instructions": "Check-in from 4:00 PM. The keypad is left of the front door.",
    "parking_instructions": "Two spaces in the driveway.",
    "house_rules": "No smoking. Quiet hours 10 PM to 8 AM.",
}

PINS = [("4821", "Spring rotation"), ("7305", None), ("1968", "Backup")]

PRE_STAY_TEMPLATE = {
    "template_type": TemplateType.PRE_STAY,
    "subject": "Your stay at {property_name} starts {check_in_date}",
    "html_content": (
        "<p>Hi {guest_name},</p>"
        "<p>Your door code is <strong>{lock_pin}</strong>.</p>"
        "<p>WiFi: {wifi_network} / {wifi_password}</p>"
        "<p>{check_in_instructions}</p>"
        "<p>See you soon,<br>{owner_name}</p>"
    ),
    "days_before_check_in": 3,
    "include_lock_pin": True,
}

GUESTS = [
    ("Maya Chen", "maya.chen@example.com", "+1 617 555 0191"),
    ("Tom Becker", "tom.becker@example.com", None),
    ("Priya Nair", "priya.nair@example.com", "+1 212 555 0134"),
]

REVIEWS = [
    ("Maya Chen", Decimal("5.0"), "Spotless and cosy", Decimal("5.0")),
    ("Tom Becker", Decimal("4.0"), "Great location, small kitchen", Decimal("4.5")),
]


def _booking_rows(prop: Property, today: date) -> list[dict]:
    """One past stay and one upcoming booking per guest, spread across the calendar."""
    rows = []
    for offset, (name, email, phone) in enumerate(GUESTS):
        past_in = today - timedelta(days=40 - offset * 10)
        upcoming_in = today + timedelta(days=2 + offset * 7)
        for check_in, status in ((past_in, "checked_out"), (upcoming_in, "confirmed")):
            check_out = check_in + timedelta(days=3)
            nights = Booking.count_nights(check_in, check_out)
            rows.append(
                {
                    "property_id": prop.id,
                    "guest_name": name,
                    "guest_email": email,
                    "guest_phone": phone,
                    "number_of_guests": 2,
                    "check_in": check_in,
                    "check_out": check_out,
                    "nights": nights,
                    "total_amount": prop.base_price * nights,
                    "status": status,
                }
            )
    return rows


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed() -> None:
    """Populate the database with demo data.

    Idempotent: an existing demo owner is deleted first (properties and their
    rows go with it through ON DELETE CASCADE), and all guests are cleared.
    """
    async with session_scope() as session:
        await session.execute(delete(Guest))
        await session.execute(
            delete(User).where(User.email.in_([DEMO_OWNER["email"], DEMO_CLEANER["email"]]))
        )
        await session.flush()

        # ------------------------------------------------------------------
        # 1. Users
        # ------------------------------------------------------------------
        owner = User(**DEMO_OWNER, role=UserRole.OWNER, is_active=True)
        session.add(owner)
        await session.flush()
        print(f"Created owner {owner.email}")

        # ------------------------------------------------------------------
        # 2. Properties with settings, PINs, template, contacts
        # ------------------------------------------------------------------
        today = date.today()
        property_ids = []
        booking_count = 0
        stay_count = 0

        for prop_data in PROPERTIES:
            prop = Property(user_id=owner.id, **prop_data)
            session.add(prop)
            await session.flush()
            property_ids.append(prop.id)

            session.add(PropertySettings(property_id=prop.id, **SETTINGS))
            session.add(EmailTemplate(property_id=prop.id, **PRE_STAY_TEMPLATE))
            session.add(
                PropertyContact(
                    property_id=prop.id,
                    contact_type=ContactType.OWNER,
                    name=owner.name,
                    email=owner.email,
                    phone_number=owner.phone_number,
                    is_primary=True,
                )
            )
            await session.flush()

            for pin, notes in PINS:
                await lock_pins.add_lock_pin(session, prop.id, pin, notes=notes)

            # ------------------------------------------------------------------
            # 3. Bookings, guest stays and PIN rotation
            # ------------------------------------------------------------------
            for row in _booking_rows(prop, today):
                booking = Booking(**row)
                session.add(booking)
                await session.flush()
                booking_count += 1

                if booking.status == "checked_out":
                    await guest_service.record_guest_stay(session, booking)
                    stay_count += 1
                else:
                    await lock_pins.assign_pin_to_booking(session, booking)

            print(f"   {prop.name} ({prop.city}, {prop.state}) with {len(PINS)} PINs")

        # ------------------------------------------------------------------
        # 4. Reviews on the first property
        # ------------------------------------------------------------------
        first = (
            await session.execute(select(Property).where(Property.user_id == owner.id).order_by(Property.name))
        ).scalars().first()
        for guest_name, rating, title, cleanliness in REVIEWS:
            session.add(
                Review(
                    property_id=first.id,
                    guest_name=guest_name,
                    rating=rating,
                    cleanliness=cleanliness,
                    title=title,
                )
            )

        # ------------------------------------------------------------------
        # 5. Cleaner working at every property
        # ------------------------------------------------------------------
        cleaner = await cleaner_service.create_cleaner(session, owner, **DEMO_CLEANER, property_ids=property_ids)

        print()
        print("=" * 60)
        print("Seed Summary")
        print("=" * 60)
        print(f"   Owner:       {owner.email}")
        print(f"   Cleaner:     {cleaner.email}")
        print(f"   Properties:  {len(PROPERTIES)}")
        print(f"   Bookings:    {booking_count}")
        print(f"   Guest stays: {stay_count}")
        print(f"   Reviews:     {len(REVIEWS)}")
        print("=" * 60)


if __name__ == "__main__":
    asyncio.run(seed())
