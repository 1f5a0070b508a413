"""Tests for the property settings endpoints."""

import pytest
from sqlalchemy import func, select

from rentalops.models import PropertySettings

pytestmark = pytest.mark.asyncio


def _url(property_id, suffix: str = "") -> str:
    return f"/api/v1/properties/{property_id}/settings{suffix}"


class TestGetSettings:
    async def test_defaults_created_on_first_read(self, client, auth_headers, test_property, db_session):
        response = await client.get(_url(test_property.id), headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["property_id"] == str(test_property.id)
        assert data["rotating_pins_enabled"] is False
        assert data["pre_stay_email_days"] == 3
        assert data["post_stay_email_days"] == 1

        second = await client.get(_url(test_property.id), headers=auth_headers)
        assert second.json()["id"] == data["id"]
        count = await db_session.scalar(
            select(func.count()).select_from(PropertySettings).where(
                PropertySettings.property_id == test_property.id
            )
        )
        assert count == 1


class TestUpdateSettings:
    async def test_partial_update(self, client, auth_headers, test_property):
        response = await client.put(
            _url(test_property.id),
            json={"wifi_network": "Cottage5G", "pre_stay_email_enabled": True},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["wifi_network"] == "Cottage5G"
        assert data["pre_stay_email_enabled"] is True
        assert data["wifi_password"] is None

    async def test_cursor_not_writable(self, client, auth_headers, test_property):
        response = await client.put(
            _url(test_property.id), json={"current_pin_index": 5}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["current_pin_index"] == 0

    async def test_negative_days_rejected(self, client, auth_headers, test_property):
        response = await client.put(
            _url(test_property.id), json={"pre_stay_email_days": -1}, headers=auth_headers
        )
        assert response.status_code == 422

    @pytest.mark.parametrize("field", ["pre_stay_email_days", "rotating_pins_enabled", "post_stay_email_enabled"])
    async def test_null_for_required_field_rejected(self, client, auth_headers, test_property, field):
        response = await client.put(_url(test_property.id), json={field: None}, headers=auth_headers)

        assert response.status_code == 422
        current = (await client.get(_url(test_property.id), headers=auth_headers)).json()
        assert current["pre_stay_email_days"] == 3

    async def test_null_clears_optional_text(self, client, auth_headers, test_property):
        await client.put(_url(test_property.id), json={"wifi_password": "hunter22"}, headers=auth_headers)

        response = await client.put(_url(test_property.id), json={"wifi_password": None}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["wifi_password"] is None


class TestRotatingPinsToggle:
    async def test_enable_then_disable_resets_cursor(self, client, auth_headers, test_property, db_session):
        response = await client.put(
            _url(test_property.id, "/rotating-pins"), json={"enabled": True}, headers=auth_headers
        )
        assert response.json()["rotating_pins_enabled"] is True

        prop_settings = await db_session.scalar(
            select(PropertySettings).where(PropertySettings.property_id == test_property.id)
        )
        prop_settings.current_pin_index = 2
        await db_session.flush()

        response = await client.put(
            _url(test_property.id, "/rotating-pins"), json={"enabled": False}, headers=auth_headers
        )
        data = response.json()
        assert data["rotating_pins_enabled"] is False
        assert data["current_pin_index"] == 0
