"""Invite management, public validation and invite registration."""

import re

from httpx import AsyncClient

from app.domain.enums import AccountRole

from tests.conftest import make_phone_token

MEMBER_PHONE = "+51955555555"


async def _create(client: AsyncClient, headers: dict[str, str], role: str = "employee") -> dict:
    response = await client.post("/api/v1/invites", json={"role": role}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _registration(code: str, phone: str = MEMBER_PHONE, **overrides) -> dict:
    body = {
        "code": code,
        "phoneNumber": phone,
        "name": "Luis Cajero",
        "password": "member-password",
        "pin": "4321",
        "phoneToken": make_phone_token(phone),
    }
    body.update(overrides)
    return body


async def test_create_and_list(client: AsyncClient, register_owner) -> None:
    headers = await register_owner()
    invite = await _create(client, headers, role="partner")
    assert invite["role"] == "partner"
    assert invite["used"] is False
    assert re.fullmatch(r"[A-Z0-9]{6}", invite["code"])

    listed = await client.get("/api/v1/invites", headers=headers)
    assert [i["id"] for i in listed.json()] == [invite["id"]]


async def test_owner_role_cannot_be_invited(client: AsyncClient, register_owner) -> None:
    headers = await register_owner()
    response = await client.post("/api/v1/invites", json={"role": "owner"}, headers=headers)
    assert response.status_code == 400


async def test_only_owner_manages_invites(client: AsyncClient, register_owner, make_account, login) -> None:
    await register_owner()
    await make_account("+51966666666", role=AccountRole.PARTNER, password="partner-password")
    partner = await login("+51966666666", "partner-password", "1234")
    response = await client.post("/api/v1/invites", json={"role": "employee"}, headers=partner)
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"


async def test_validate_invite(client: AsyncClient, register_owner) -> None:
    headers = await register_owner()
    invite = await _create(client, headers)
    valid = await client.post("/api/v1/validate-invite", json={"code": invite["code"].lower()})
    assert valid.json() == {"valid": True, "role": "employee"}

    unknown = await client.post("/api/v1/validate-invite", json={"code": "ZZZZZZ"})
    assert unknown.status_code == 200
    assert unknown.json()["valid"] is False
    assert "role" not in unknown.json()


async def test_validate_invite_rate_limited(client: AsyncClient) -> None:
    statuses = [
        (await client.post("/api/v1/validate-invite", json={"code": f"AAAA{i:02d}"})).status_code
        for i in range(11)
    ]
    assert statuses[:10] == [200] * 10
    assert statuses[10] == 429


async def test_register_with_invite(client: AsyncClient, register_owner, notifier) -> None:
    owner = await register_owner()
    invite = await _create(client, owner)

    response = await client.post("/api/v1/auth/register-invite", json=_registration(invite["code"]))
    assert response.status_code == 201
    member = {"Authorization": f"Bearer {response.json()['access_token']}"}

    me = await client.get("/api/v1/auth/me", headers=member)
    assert me.json()["role"] == "employee"
    assert me.json()["phoneNumber"] == MEMBER_PHONE

    reused = await client.post(
        "/api/v1/auth/register-invite", json=_registration(invite["code"], phone="+51977777777")
    )
    assert reused.status_code == 400
    assert reused.json()["error"] == "INVALID_CODE"
    assert (await client.get("/api/v1/invites", headers=owner)).json() == []


async def test_register_with_invite_rejects_taken_phone(client: AsyncClient, register_owner, make_account) -> None:
    owner = await register_owner()
    await make_account(MEMBER_PHONE)
    invite = await _create(client, owner)
    response = await client.post("/api/v1/auth/register-invite", json=_registration(invite["code"]))
    assert response.status_code == 409
    assert response.json()["error"] == "PHONE_ALREADY_REGISTERED"
    validation = await client.post("/api/v1/validate-invite", json={"code": invite["code"]})
    assert validation.json()["valid"] is True


async def test_revoke_and_regenerate(client: AsyncClient, register_owner) -> None:
    headers = await register_owner()
    first = await _create(client, headers)
    second = await _create(client, headers, role="partner")

    revoked = await client.delete(f"/api/v1/invites/{first['id']}", headers=headers)
    assert revoked.status_code == 204
    validation = await client.post("/api/v1/validate-invite", json={"code": first["code"]})
    assert validation.json()["valid"] is False

    regenerated = await client.post(f"/api/v1/invites/{second['id']}/regenerate", headers=headers)
    assert regenerated.status_code == 200
    assert regenerated.json()["role"] == "partner"
    assert regenerated.json()["code"] != second["code"]

    missing = await client.delete("/api/v1/invites/does-not-exist", headers=headers)
    assert missing.status_code == 404


async def test_send_invite(client: AsyncClient, register_owner, notifier) -> None:
    headers = await register_owner()
    invite = await _create(client, headers)
    response = await client.post(
        f"/api/v1/invites/{invite['id']}/send", json={"phoneNumber": MEMBER_PHONE}, headers=headers
    )
    assert response.json() == {"success": True}
    assert notifier.sent == [("invite", MEMBER_PHONE, {"code": invite["code"], "role": "employee"})]


async def test_send_invite_delivery_failure(client: AsyncClient, register_owner, notifier) -> None:
    headers = await register_owner()
    invite = await _create(client, headers)
    notifier.fail = True
    response = await client.post(
        f"/api/v1/invites/{invite['id']}/send", json={"phoneNumber": MEMBER_PHONE}, headers=headers
    )
    assert response.status_code == 200
    assert response.json() == {"success": False}


async def test_send_invite_to_registered_phone(client: AsyncClient, register_owner, make_account) -> None:
    headers = await register_owner()
    await make_account(MEMBER_PHONE)
    invite = await _create(client, headers)
    response = await client.post(
        f"/api/v1/invites/{invite['id']}/send", json={"phoneNumber": MEMBER_PHONE}, headers=headers
    )
    assert response.status_code == 409
