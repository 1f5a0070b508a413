"""Database-level uniqueness and referential behaviour of the models."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from factories import make_booking, make_property, make_user
from rentalops.models import (
    Booking,
    Cleaner,
    ContactType,
    EmailTemplate,
    Guest,
    GuestStay,
    Property,
    PropertyCleaner,
    PropertyContact,
    PropertyLockPin,
    PropertySettings,
    Review,
    TemplateType,
    UserRole,
)
from rentalops.models.email_template import DEFAULT_AVAILABLE_VARIABLES

pytestmark = pytest.mark.asyncio


async def _count(db: AsyncSession, model, *criteria) -> int:
    return await db.scalar(select(func.count()).select_from(model).where(*criteria))


async def _cleaner(db: AsyncSession) -> Cleaner:
    user = await make_user(db, role=UserRole.CLEANER)
    cleaner = Cleaner(user_id=user.id, name="Sam Sparkle", email=user.email)
    db.add(cleaner)
    await db.flush()
    return cleaner


# ---------------------------------------------------------------------------
# Uniqueness
# ---------------------------------------------------------------------------


class TestUniqueness:
    async def test_lock_pin_order_index_per_property(self, db_session, test_property):
        db_session.add(PropertyLockPin(property_id=test_property.id, pin="x", order_index=0))
        await db_session.flush()

        with pytest.raises(IntegrityError):
            async with db_session.begin_nested():
                db_session.add(PropertyLockPin(property_id=test_property.id, pin="y", order_index=0))
                await db_session.flush()

    async def test_same_order_index_on_other_property(self, db_session, test_user, test_property):
        other = await make_property(db_session, test_user, name="Mountain Lodge")
        db_session.add(PropertyLockPin(property_id=test_property.id, pin="x", order_index=0))
        db_session.add(PropertyLockPin(property_id=other.id, pin="y", order_index=0))
        await db_session.flush()

        assert await _count(db_session, PropertyLockPin, PropertyLockPin.order_index == 0) >= 2

    async def test_cleaner_assigned_once(self, db_session, test_property):
        cleaner = await _cleaner(db_session)
        db_session.add(PropertyCleaner(property_id=test_property.id, cleaner_id=cleaner.id))
        await db_session.flush()

        with pytest.raises(IntegrityError):
            async with db_session.begin_nested():
                db_session.add(PropertyCleaner(property_id=test_property.id, cleaner_id=cleaner.id))
                await db_session.flush()

    async def test_one_settings_row_per_property(self, db_session, test_property):
        db_session.add(PropertySettings(property_id=test_property.id))
        await db_session.flush()

        with pytest.raises(IntegrityError):
            async with db_session.begin_nested():
                db_session.add(PropertySettings(property_id=test_property.id))
                await db_session.flush()

    async def test_guest_email_unique(self, db_session):
        db_session.add(Guest(email="repeat@test.com", name="First"))
        await db_session.flush()

        with pytest.raises(IntegrityError):
            async with db_session.begin_nested():
                db_session.add(Guest(email="repeat@test.com", name="Second"))
                await db_session.flush()


# ---------------------------------------------------------------------------
# Cascades and SET NULL
# ---------------------------------------------------------------------------


class TestReferentialActions:
    async def test_deleting_property_removes_dependents(self, db_session, test_property, test_booking):
        pid = test_property.id
        cleaner = await _cleaner(db_session)
        guest = Guest(email="cascade@test.com", name="Cascade Guest")
        db_session.add(guest)
        await db_session.flush()

        db_session.add_all(
            [
                PropertyLockPin(property_id=pid, pin="x", order_index=0),
                PropertyContact(
                    property_id=pid, contact_type=ContactType.OWNER, name="Owner", email="o@test.com"
                ),
                PropertyCleaner(property_id=pid, cleaner_id=cleaner.id),
                PropertySettings(property_id=pid),
                GuestStay(
                    guest_id=guest.id,
                    property_id=pid,
                    booking_id=test_booking.id,
                    check_in=test_booking.check_in,
                    check_out=test_booking.check_out,
                    nights=test_booking.nights,
                    total_amount=test_booking.total_amount,
                ),
                EmailTemplate(property_id=pid, subject="Hi", html_content="<p>Hi</p>"),
            ]
        )
        await db_session.flush()

        await db_session.execute(delete(Property).where(Property.id == pid))

        for model in (
            PropertyLockPin,
            PropertyContact,
            PropertyCleaner,
            PropertySettings,
            GuestStay,
            EmailTemplate,
            Booking,
        ):
            assert await _count(db_session, model, model.property_id == pid) == 0, model.__name__

        # The guest and the cleaner outlive the property.
        assert await db_session.scalar(select(Guest.id).where(Guest.id == guest.id)) == guest.id
        assert await db_session.scalar(select(Cleaner.id).where(Cleaner.id == cleaner.id)) == cleaner.id

    async def test_deleting_booking_keeps_review(self, db_session, test_property, test_booking):
        review = Review(
            property_id=test_property.id,
            booking_id=test_booking.id,
            guest_name=test_booking.guest_name,
            rating=Decimal("4.5"),
        )
        db_session.add(review)
        await db_session.flush()

        await db_session.execute(delete(Booking).where(Booking.id == test_booking.id))
        await db_session.refresh(review)

        assert review.booking_id is None
        assert review.rating == Decimal("4.5")

    async def test_deleting_pin_clears_booking_link(self, db_session, test_property):
        lock_pin = PropertyLockPin(property_id=test_property.id, pin="1234", order_index=0)
        db_session.add(lock_pin)
        await db_session.flush()

        booking = await make_booking(
            db_session, test_property, lock_pin_id=lock_pin.id, assigned_lock_pin="1234"
        )

        await db_session.execute(delete(PropertyLockPin).where(PropertyLockPin.id == lock_pin.id))
        await db_session.refresh(booking)

        assert booking.lock_pin_id is None
        assert booking.assigned_lock_pin == "1234"

    async def test_deleting_guest_removes_stays(self, db_session, test_property, test_booking):
        guest = Guest(email="gone@test.com", name="Gone")
        db_session.add(guest)
        await db_session.flush()
        db_session.add(
            GuestStay(
                guest_id=guest.id,
                property_id=test_property.id,
                booking_id=test_booking.id,
                check_in=date(2025, 6, 1),
                check_out=date(2025, 6, 5),
                nights=4,
                total_amount=Decimal("720.00"),
            )
        )
        await db_session.flush()

        await db_session.execute(delete(Guest).where(Guest.id == guest.id))

        assert await _count(db_session, GuestStay, GuestStay.guest_id == guest.id) == 0


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    async def test_pre_stay_template_lookup(self, db_session, test_property):
        template = EmailTemplate(
            property_id=test_property.id,
            template_type=TemplateType.PRE_STAY,
            subject="Welcome to {property_name}",
            html_content="<p>See you on {check_in_date}</p>",
            days_before_check_in=3,
        )
        db_session.add(template)
        await db_session.flush()

        result = await db_session.execute(
            select(EmailTemplate).where(EmailTemplate.property_id == test_property.id)
        )
        found = result.scalars().all()

        assert [t.id for t in found] == [template.id]
        assert found[0].days_before_check_in == 3
        assert found[0].available_variables == DEFAULT_AVAILABLE_VARIABLES
        assert set(found[0].available_variables) == {"guest", "booking", "property", "pin", "owner"}

    async def test_settings_defaults(self, db_session, test_property):
        prop_settings = PropertySettings(property_id=test_property.id)
        db_session.add(prop_settings)
        await db_session.flush()
        await db_session.refresh(prop_settings)

        assert prop_settings.rotating_pins_enabled is False
        assert prop_settings.current_pin_index == 0
        assert prop_settings.pre_stay_email_days == 3
        assert prop_settings.post_stay_email_days == 1

    async def test_user_role_accepts_cleaner(self, db_session):
        user = await make_user(db_session, role=UserRole.CLEANER)
        await db_session.refresh(user)
        assert user.role is UserRole.CLEANER

    async def test_booking_nights(self):
        assert Booking.count_nights(date(2025, 6, 1), date(2025, 6, 5)) == 4
