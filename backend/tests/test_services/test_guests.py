"""Tests for guest-stay recording and guest aggregates."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import select

from factories import make_booking, make_property
from rentalops.models import Guest, GuestStay
from rentalops.services import guests
from rentalops.services.errors import GuestStayError

pytestmark = pytest.mark.asyncio


async def _stays(db_session, prop, email: str, count: int) -> Guest:
    guest = None
    for i in range(count):
        booking = await make_booking(
            db_session,
            prop,
            guest_email=email,
            check_in=date(2025, 1, 1 + i * 5),
            check_out=date(2025, 1, 3 + i * 5),
            total_amount=Decimal("100.00"),
        )
        guest, _ = await guests.record_guest_stay(db_session, booking)
    return guest


class TestRecordGuestStay:
    async def test_creates_guest_on_first_stay(self, db_session, test_booking):
        guest, stay = await guests.record_guest_stay(db_session, test_booking)

        assert guest.email == test_booking.guest_email
        assert guest.name == test_booking.guest_name
        assert guest.total_stays == 1
        assert guest.total_spent == Decimal("720.00")
        assert guest.first_stay_date == datetime(2025, 6, 5, tzinfo=timezone.utc)
        assert guest.last_stay_date == guest.first_stay_date
        assert guest.tags == []
        assert stay.booking_id == test_booking.id
        assert stay.nights == 4
        assert stay.guest_id == guest.id

    async def test_second_recording_of_same_booking_rejected(self, db_session, test_booking):
        await guests.record_guest_stay(db_session, test_booking)

        with pytest.raises(GuestStayError):
            await guests.record_guest_stay(db_session, test_booking)

    async def test_aggregates_accumulate(self, db_session, test_property):
        guest = await _stays(db_session, test_property, "loyal@test.com", 2)

        assert guest.total_stays == 2
        assert guest.total_spent == Decimal("200.00")
        assert guest.first_stay_date == datetime(2025, 1, 3, tzinfo=timezone.utc)
        assert guest.last_stay_date == datetime(2025, 1, 8, tzinfo=timezone.utc)

    async def test_repeat_guest_tag(self, db_session, test_property):
        guest = await _stays(db_session, test_property, "repeat@test.com", 3)
        assert guest.tags == [guests.REPEAT_GUEST_TAG]

    async def test_vip_tag(self, db_session, test_property):
        guest = await _stays(db_session, test_property, "vip@test.com", 5)

        assert guest.tags == [guests.REPEAT_GUEST_TAG, guests.VIP_TAG]
        await db_session.refresh(guest)
        assert guest.tags == [guests.REPEAT_GUEST_TAG, guests.VIP_TAG]


class TestGuestLookups:
    async def test_update_guest_info(self, db_session, test_booking):
        await guests.record_guest_stay(db_session, test_booking)

        guest = await guests.update_guest_info(
            db_session, test_booking.guest_email, name="Jane T. Traveller", phone_number="+1 555 0100"
        )

        assert guest.name == "Jane T. Traveller"
        assert guest.phone_number == "+1 555 0100"

    async def test_update_unknown_guest(self, db_session):
        assert await guests.update_guest_info(db_session, "nobody@test.com", name="X") is None

    async def test_blacklist(self, db_session):
        db_session.add(
            Guest(email="trouble@test.com", name="Trouble", is_blacklisted=True, blacklist_reason="Party")
        )
        await db_session.flush()

        status = await guests.check_blacklist(db_session, "trouble@test.com")
        assert status.is_blacklisted
        assert status.reason == "Party"

        clean = await guests.check_blacklist(db_session, "unknown@test.com")
        assert not clean.is_blacklisted
        assert clean.reason is None

    async def test_marketing_list(self, db_session, test_user, test_property):
        other = await make_property(db_session, test_user, name="Other Place")
        opted_in = await _stays(db_session, test_property, "yes@test.com", 1)
        opted_out = await _stays(db_session, test_property, "no@test.com", 1)
        opted_out.marketing_opt_in = False
        banned = await _stays(db_session, test_property, "banned@test.com", 1)
        banned.is_blacklisted = True
        await _stays(db_session, other, "elsewhere@test.com", 1)
        await db_session.flush()

        listed = await guests.marketing_list(db_session, [test_property.id])

        assert [g.email for g in listed] == [opted_in.email]
        assert await guests.marketing_list(db_session, []) == []

    async def test_stays_are_linked(self, db_session, test_booking):
        guest, _ = await guests.record_guest_stay(db_session, test_booking)

        result = await db_session.execute(select(GuestStay).where(GuestStay.guest_id == guest.id))
        assert [s.booking_id for s in result.scalars()] == [test_booking.id]


class TestStayRatingAndStats:
    async def test_rating_bounds(self, db_session, test_property):
        booking = await make_booking(db_session, test_property, guest_email="ana@example.com")
        _, stay = await guests.record_guest_stay(db_session, booking)

        with pytest.raises(ValueError):
            await guests.rate_guest_stay(db_session, stay, rating=6)

        stay = await guests.rate_guest_stay(db_session, stay, review="Quiet guests")
        assert stay.rating is None
        assert stay.review == "Quiet guests"

    async def test_unscoped_counts_every_guest(self, db_session, test_property, test_user):
        await _stays(db_session, test_property, "ana@example.com", 3)
        lake = await make_property(db_session, test_user, name="Lake House")
        await _stays(db_session, lake, "bo@example.com", 1)

        stats = await guests.guest_stats(db_session, None)

        assert stats.total_guests >= 2
        assert stats.repeat_guests >= 1

    async def test_csv_blank_optional_cells(self, db_session):
        guest = Guest(email="new@example.com", name="New", total_stays=0, total_spent=Decimal("0"), tags=[])

        lines = guests.guests_csv([guest]).splitlines()

        assert lines[0] == ",".join(guests.CSV_COLUMNS)
        assert lines[1] == "New,new@example.com,,0,0,,No,"
