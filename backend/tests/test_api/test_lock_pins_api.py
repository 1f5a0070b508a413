"""Tests for the lock PIN endpoints."""

import uuid

import pytest
from httpx import AsyncClient

from factories import bearer, make_booking, make_property, make_user
from rentalops.models import PropertyLockPin, UserRole

pytestmark = pytest.mark.asyncio


def _url(property_id, suffix: str = "") -> str:
    return f"/api/v1/properties/{property_id}/lock-pins{suffix}"


async def _add(client: AsyncClient, headers: dict, property_id, pin: str, **extra) -> dict:
    response = await client.post(_url(property_id), json={"pin": pin, **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


# ---------------------------------------------------------------------------
# GET / POST
# ---------------------------------------------------------------------------


class TestListAndAdd:
    async def test_empty_list(self, client, auth_headers, test_property):
        response = await client.get(_url(test_property.id), headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["pins"] == []
        assert data["current_pin_index"] == 0
        assert data["rotating_pins_enabled"] is False

    async def test_add_returns_decrypted_pin(self, client, auth_headers, test_property):
        data = await _add(client, auth_headers, test_property.id, "4321", notes="Back gate")

        assert data["pin"] == "4321"
        assert data["order_index"] == 0
        assert data["notes"] == "Back gate"
        assert data["is_active"] is True
        assert data["usage_count"] == 0

    async def test_pin_stored_encrypted(self, client, auth_headers, test_property, db_session):
        data = await _add(client, auth_headers, test_property.id, "4321")

        stored = await db_session.get(PropertyLockPin, uuid.UUID(data["id"]))
        assert stored.pin != "4321"

    async def test_list_in_order(self, client, auth_headers, test_property):
        for pin in ("1111", "2222"):
            await _add(client, auth_headers, test_property.id, pin)

        data = (await client.get(_url(test_property.id), headers=auth_headers)).json()
        assert [(p["pin"], p["order_index"]) for p in data["pins"]] == [("1111", 0), ("2222", 1)]

    async def test_short_pin_rejected(self, client, auth_headers, test_property):
        response = await client.post(_url(test_property.id), json={"pin": "12"}, headers=auth_headers)
        assert response.status_code == 422

    async def test_other_owners_property(self, client, auth_headers, db_session):
        stranger = await make_user(db_session)
        prop = await make_property(db_session, stranger)

        response = await client.get(_url(prop.id), headers=auth_headers)
        assert response.status_code == 404

    async def test_admin_sees_any_property(self, client, db_session):
        stranger = await make_user(db_session)
        prop = await make_property(db_session, stranger)
        admin = await make_user(db_session, role=UserRole.ADMIN)

        response = await client.get(_url(prop.id), headers=bearer(admin))
        assert response.status_code == 200

    async def test_cleaner_forbidden(self, client, test_property, db_session):
        cleaner = await make_user(db_session, role=UserRole.CLEANER)

        response = await client.get(_url(test_property.id), headers=bearer(cleaner))
        assert response.status_code == 403
        assert response.json()["detail"] == "Insufficient permissions"

    async def test_requires_auth(self, client, test_property):
        response = await client.get(_url(test_property.id))
        assert response.status_code == 401


# ---------------------------------------------------------------------------
# PUT / DELETE / reorder / history
# ---------------------------------------------------------------------------


class TestModify:
    async def test_update(self, client, auth_headers, test_property):
        pin = await _add(client, auth_headers, test_property.id, "1111")

        response = await client.put(
            _url(test_property.id, f"/{pin['id']}"),
            json={"pin": "9999", "is_active": False},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["pin"] == "9999"
        assert data["is_active"] is False

    async def test_update_missing(self, client, auth_headers, test_property):
        response = await client.put(
            _url(test_property.id, f"/{uuid.uuid4()}"), json={"notes": "x"}, headers=auth_headers
        )
        assert response.status_code == 404

    async def test_delete_renumbers(self, client, auth_headers, test_property):
        pins = [await _add(client, auth_headers, test_property.id, p) for p in ("1111", "2222", "3333")]

        response = await client.delete(_url(test_property.id, f"/{pins[0]['id']}"), headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Lock PIN deleted"

        data = (await client.get(_url(test_property.id), headers=auth_headers)).json()
        assert [(p["pin"], p["order_index"]) for p in data["pins"]] == [("2222", 0), ("3333", 1)]

    async def test_reorder(self, client, auth_headers, test_property):
        a, b = [await _add(client, auth_headers, test_property.id, p) for p in ("1111", "2222")]

        response = await client.put(
            _url(test_property.id, "/reorder"),
            json={"pin_order": [b["id"], a["id"]]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert [p["pin"] for p in response.json()["pins"]] == ["2222", "1111"]

    async def test_reorder_incomplete(self, client, auth_headers, test_property):
        a = await _add(client, auth_headers, test_property.id, "1111")
        await _add(client, auth_headers, test_property.id, "2222")

        response = await client.put(
            _url(test_property.id, "/reorder"), json={"pin_order": [a["id"]]}, headers=auth_headers
        )
        assert response.status_code == 400

    async def test_history(self, client, auth_headers, test_property, db_session):
        pin = await _add(client, auth_headers, test_property.id, "1111")
        booking = await make_booking(
            db_session, test_property, lock_pin_id=uuid.UUID(pin["id"]), assigned_lock_pin="1111"
        )

        response = await client.get(_url(test_property.id, "/history"), headers=auth_headers)

        assert response.status_code == 200
        [entry] = response.json()
        assert entry["booking_id"] == str(booking.id)
        assert entry["pin"] == "1111"
        assert entry["pin_order_index"] == 0
