"""Setup status and owner bootstrap."""

from httpx import AsyncClient

from tests.conftest import OWNER_PHONE, make_phone_token


async def test_fresh_install(client: AsyncClient) -> None:
    response = await client.get("/api/v1/setup-status")
    assert response.status_code == 200
    assert response.json() == {"setupComplete": False, "ownerExists": False}


async def test_complete_after_owner_registers(client: AsyncClient, register_owner) -> None:
    await register_owner()
    response = await client.get("/api/v1/setup-status")
    assert response.json() == {"setupComplete": True, "ownerExists": True}


async def test_second_owner_rejected(client: AsyncClient, register_owner) -> None:
    await register_owner()
    phone = "+51911111111"
    response = await client.post(
        "/api/v1/auth/register-owner",
        json={
            "phoneNumber": phone,
            "name": "Intruder",
            "password": "password-123",
            "pin": "9999",
            "phoneToken": make_phone_token(phone),
        },
    )
    assert response.status_code == 409
    assert response.json()["error"] == "OWNER_ALREADY_EXISTS"


async def test_owner_registration_needs_matching_phone_proof(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/register-owner",
        json={
            "phoneNumber": OWNER_PHONE,
            "name": "Rosa",
            "password": "owner-password-1",
            "pin": "1234",
            "phoneToken": make_phone_token("+51900000000"),
        },
    )
    assert response.status_code == 400
    assert response.json()["error"] == "PHONE_VERIFICATION_FAILED"
    assert (await client.get("/api/v1/setup-status")).json()["ownerExists"] is False


async def test_owner_registration_rejects_bad_pin(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/register-owner",
        json={
            "phoneNumber": OWNER_PHONE,
            "name": "Rosa",
            "password": "owner-password-1",
            "pin": "12a4",
            "phoneToken": make_phone_token(OWNER_PHONE),
        },
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"
