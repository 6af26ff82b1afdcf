"""Tests for the account directory endpoints."""

from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient

BASE = "/api/v1/companies/acme/users"


def _payload(**overrides) -> dict:
    payload = {
        "username": "jdoe",
        "full_name": "Jane Doe",
        "email": "Jane.Doe@Example.com",
        "role": "Clerk",
        "department": "Sales",
        "password": "Secret123",
        "confirm_password": "Secret123",
    }
    payload.update(overrides)
    return payload


async def _invite(client: AsyncClient, **overrides) -> dict:
    response = await client.post(BASE, json=_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_invite_account(client: AsyncClient):
    body = await _invite(client)

    assert body["username"] == "jdoe"
    assert body["email"] == "jane.doe@example.com"
    assert body["role"] == "Clerk"
    assert body["role_id"] == 2
    assert body["status"] == "Active"
    assert body["two_factor_enabled"] is False
    assert body["login_count"] == 0
    assert "password" not in body
    assert "password_hash" not in body


@pytest.mark.asyncio
async def test_invite_password_mismatch_is_400(client: AsyncClient):
    response = await client.post(BASE, json=_payload(confirm_password="Secret124"))

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validation_error"
    assert body["code"] == "password_mismatch"


@pytest.mark.asyncio
async def test_invite_weak_password_lists_details(client: AsyncClient):
    response = await client.post(BASE, json=_payload(password="short", confirm_password="short"))

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "weak_password"
    assert {d["field"] for d in body["details"]} == {"password"}


@pytest.mark.asyncio
async def test_invite_unknown_role_is_400(client: AsyncClient):
    response = await client.post(BASE, json=_payload(role="Pilot"))
    assert response.status_code == 400
    assert response.json()["code"] == "unknown_role"


@pytest.mark.asyncio
async def test_invite_duplicate_username_is_409(client: AsyncClient):
    await _invite(client)

    response = await client.post(BASE, json=_payload(email="other@example.com"))

    assert response.status_code == 409
    assert response.json()["error"] == "conflict"


@pytest.mark.asyncio
async def test_invite_missing_field_is_rejected_by_schema(client: AsyncClient):
    payload = _payload()
    del payload["email"]
    response = await client.post(BASE, json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_and_get_accounts(client: AsyncClient):
    created = await _invite(client)

    listing = await client.get(BASE)
    assert listing.status_code == 200
    assert listing.json()["total"] == 1

    single = await client.get(f"{BASE}/{created['id']}")
    assert single.status_code == 200
    assert single.json()["id"] == created["id"]


@pytest.mark.asyncio
async def test_get_account_from_other_company_is_404(client: AsyncClient):
    created = await _invite(client)

    response = await client.get(f"/api/v1/companies/globex/users/{created['id']}")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_update_account(client: AsyncClient):
    created = await _invite(client)

    response = await client.patch(
        f"{BASE}/{created['id']}", json={"full_name": "Jane Smith", "role": "Accountant"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["full_name"] == "Jane Smith"
    assert body["role"] == "Accountant"
    assert body["username"] == "jdoe"


@pytest.mark.asyncio
async def test_remove_account_twice(client: AsyncClient):
    created = await _invite(client)

    first = await client.delete(f"{BASE}/{created['id']}")
    second = await client.delete(f"{BASE}/{created['id']}")

    assert first.status_code == 204
    assert second.status_code == 404


@pytest.mark.asyncio
async def test_toggle_status_and_two_factor(client: AsyncClient):
    created = await _invite(client)

    status_response = await client.post(f"{BASE}/{created['id']}/toggle-status")
    tfa_response = await client.post(f"{BASE}/{created['id']}/toggle-two-factor")

    assert status_response.json()["status"] == "Inactive"
    assert tfa_response.json()["two_factor_enabled"] is True


@pytest.mark.asyncio
async def test_reset_password(client: AsyncClient):
    created = await _invite(client)
    url = f"{BASE}/{created['id']}/reset-password"

    ok = await client.post(url, json={"new_password": "Another123"})
    weak = await client.post(url, json={"new_password": "weak"})
    missing = await client.post(f"{BASE}/nope/reset-password", json={"new_password": "Another123"})

    assert ok.status_code == 204
    assert ok.content == b""
    assert weak.status_code == 400
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_password_expiring_uses_now_and_threshold(client: AsyncClient):
    """An invite expires in 90 days; 87 days later it is due within 7 but not 2."""
    created = await _invite(client)
    expiry = created["password_expiry"]
    now = (datetime.fromisoformat(expiry.replace("Z", "+00:00")) - timedelta(days=3)).isoformat()

    within = await client.get(f"{BASE}/password-expiring", params={"now": now, "threshold_days": 7})
    outside = await client.get(f"{BASE}/password-expiring", params={"now": now, "threshold_days": 2})

    assert [a["id"] for a in within.json()["items"]] == [created["id"]]
    assert outside.json()["total"] == 0


@pytest.mark.asyncio
async def test_password_expiring_negative_threshold_is_422(client: AsyncClient):
    response = await client.get(f"{BASE}/password-expiring", params={"threshold_days": -1})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_summary(client: AsyncClient):
    await _invite(client)

    response = await client.get(f"{BASE}/summary")

    assert response.status_code == 200
    assert response.json() == {
        "total_accounts": 1,
        "active_accounts": 1,
        "two_factor_enabled": 0,
        "total_roles": 3,
        "password_reset_due": 0,
    }
