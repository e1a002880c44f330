"""Login, PIN session and own-account changes over HTTP."""

from httpx import AsyncClient

from app.domain.enums import AccountStatus

from tests.conftest import OWNER_PASSWORD, OWNER_PHONE, OWNER_PIN, make_phone_token

DEVICE = {"X-Device-ID": "device-0001"}


async def _password_login(client: AsyncClient, phone: str = OWNER_PHONE, password: str = OWNER_PASSWORD):
    return await client.post("/api/v1/auth/login", json={"phoneNumber": phone, "password": password})


def _bearer(response) -> dict[str, str]:
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


async def test_registration_session_is_unlocked(client: AsyncClient, register_owner) -> None:
    headers = await register_owner()
    response = await client.get("/api/v1/auth/me", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["phoneNumber"] == OWNER_PHONE
    assert body["role"] == "owner"
    assert body["phoneVerified"] is True
    assert "pinHash" not in body and "email" not in body


async def test_login_requires_pin(client: AsyncClient, register_owner) -> None:
    await register_owner()
    login = await _password_login(client)
    assert login.status_code == 200
    assert login.json()["token_type"] == "bearer"
    headers = _bearer(login)

    me = await client.get("/api/v1/auth/me", headers=headers)
    assert me.status_code == 403
    assert me.json()["error"] == "PIN_REQUIRED"
    assert me.json()["details"] == {"state": "pin_required"}

    unlock = await client.post("/api/v1/auth/pin/verify", json={"pin": OWNER_PIN}, headers=headers)
    assert unlock.status_code == 200
    assert unlock.json()["state"] == "unlocked"
    assert (await client.get("/api/v1/auth/me", headers=headers)).status_code == 200


async def test_wrong_password(client: AsyncClient, register_owner) -> None:
    await register_owner()
    response = await _password_login(client, password="not-the-password")
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"
    assert response.headers["www-authenticate"] == "Bearer"


async def test_unknown_phone_same_error_as_wrong_password(client: AsyncClient, register_owner) -> None:
    await register_owner()
    unknown = await _password_login(client, phone="+51900000001")
    wrong = await _password_login(client, password="not-the-password")
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json()["message"] == wrong.json()["message"]


async def test_disabled_account_cannot_login(client: AsyncClient, register_owner, make_account) -> None:
    await register_owner()
    await make_account("+51922222222", password="member-password", status=AccountStatus.DISABLED)
    response = await _password_login(client, phone="+51922222222", password="member-password")
    assert response.status_code == 401


async def test_pin_lockout(client: AsyncClient, register_owner) -> None:
    await register_owner()
    headers = _bearer(await _password_login(client))

    first = await client.post("/api/v1/auth/pin/verify", json={"pin": "0000"}, headers=headers)
    assert first.status_code == 401
    assert first.json()["error"] == "INCORRECT_PIN"
    assert first.json()["details"] == {"attempts_remaining": 2}

    await client.post("/api/v1/auth/pin/verify", json={"pin": "0000"}, headers=headers)
    third = await client.post("/api/v1/auth/pin/verify", json={"pin": "0000"}, headers=headers)
    assert third.status_code == 423
    assert third.json()["error"] == "PIN_LOCKED_OUT"
    assert 0 < third.json()["details"]["remaining_seconds"] <= 30

    correct = await client.post("/api/v1/auth/pin/verify", json={"pin": OWNER_PIN}, headers=headers)
    assert correct.status_code == 423

    status = await client.get("/api/v1/auth/session", headers=headers)
    assert status.json()["failedAttempts"] == 3
    assert status.json()["lockoutRemaining"] > 0


async def test_malformed_pin_is_not_counted(client: AsyncClient, register_owner) -> None:
    await register_owner()
    headers = _bearer(await _password_login(client))
    response = await client.post("/api/v1/auth/pin/verify", json={"pin": "12"}, headers=headers)
    assert response.status_code == 400
    status = await client.get("/api/v1/auth/session", headers=headers)
    assert status.json()["failedAttempts"] == 0


async def test_lock_then_unlock(client: AsyncClient, register_owner) -> None:
    headers = await register_owner()
    locked = await client.post("/api/v1/auth/lock", headers=headers)
    assert locked.json() == {"state": "locked"}

    me = await client.get("/api/v1/auth/me", headers=headers)
    assert me.status_code == 403
    assert me.json()["details"] == {"state": "locked"}

    await client.post("/api/v1/auth/pin/verify", json={"pin": OWNER_PIN}, headers=headers)
    assert (await client.get("/api/v1/auth/me", headers=headers)).status_code == 200


async def test_missing_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"
    assert response.headers["www-authenticate"] == "Bearer"


async def test_garbage_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
    assert response.status_code == 401


async def test_validation_error_does_not_echo_input(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/login", json={"password": "s3cret-value"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert body["details"] == {"fields": ["phoneNumber"]}
    assert "s3cret-value" not in response.text


async def test_remembered_identity_and_logout(client: AsyncClient, register_owner) -> None:
    await register_owner()
    headers = _bearer(await _password_login(client))

    unlock = await client.post(
        "/api/v1/auth/pin/verify", json={"pin": OWNER_PIN}, headers={**headers, **DEVICE}
    )
    assert unlock.json()["remembered"] == {"name": "Rosa Owner", "phoneHint": "+51*****4321"}

    remembered = await client.get("/api/v1/auth/remembered", headers=DEVICE)
    assert remembered.json() == {"name": "Rosa Owner", "phoneHint": "+51*****4321"}

    logout = await client.post("/api/v1/auth/logout", headers={**headers, **DEVICE})
    assert logout.status_code == 204
    assert (await client.get("/api/v1/auth/me", headers=headers)).status_code == 401
    forgotten = await client.get("/api/v1/auth/remembered", headers=DEVICE)
    assert forgotten.json() == {"name": None, "phoneHint": None}


async def test_remembered_without_device_header(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/remembered", headers={"X-Device-ID": "bad"})
    assert response.status_code == 200
    assert response.json() == {"name": None, "phoneHint": None}


async def test_remembered_is_rate_limited(client: AsyncClient) -> None:
    statuses = [
        (await client.get("/api/v1/auth/remembered", headers={"X-Device-ID": f"device-{i:04d}"})).status_code
        for i in range(11)
    ]
    assert statuses[:10] == [200] * 10
    assert statuses[10] == 429


async def test_new_login_gets_fresh_pin_state(client: AsyncClient, register_owner) -> None:
    unlocked = await register_owner()
    fresh = _bearer(await _password_login(client))
    assert (await client.get("/api/v1/auth/me", headers=unlocked)).status_code == 200
    assert (await client.get("/api/v1/auth/me", headers=fresh)).status_code == 403


async def test_change_pin(client: AsyncClient, register_owner, login) -> None:
    headers = await register_owner()
    wrong = await client.post(
        "/api/v1/auth/pin/change", json={"currentPin": "9999", "newPin": "5678"}, headers=headers
    )
    assert wrong.status_code == 401

    changed = await client.post(
        "/api/v1/auth/pin/change", json={"currentPin": OWNER_PIN, "newPin": "5678"}, headers=headers
    )
    assert changed.status_code == 200
    assert changed.json() == {"success": True}
    await login(OWNER_PHONE, OWNER_PASSWORD, "5678")


async def test_change_own_phone(client: AsyncClient, register_owner) -> None:
    headers = await register_owner()
    new_phone = "+51933333333"
    response = await client.post(
        "/api/v1/auth/phone/change",
        json={"newPhoneNumber": new_phone, "phoneToken": make_phone_token(new_phone)},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["phoneNumber"] == new_phone


async def test_change_own_phone_requires_proof_of_new_number(client: AsyncClient, register_owner) -> None:
    headers = await register_owner()
    response = await client.post(
        "/api/v1/auth/phone/change",
        json={"newPhoneNumber": "+51933333333", "phoneToken": make_phone_token(OWNER_PHONE)},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "PHONE_VERIFICATION_FAILED"


async def test_change_own_phone_to_taken_number(client: AsyncClient, register_owner, make_account) -> None:
    headers = await register_owner()
    await make_account("+51944444444")
    response = await client.post(
        "/api/v1/auth/phone/change",
        json={"newPhoneNumber": "+51944444444", "phoneToken": make_phone_token("+51944444444")},
        headers=headers,
    )
    assert response.status_code == 409
    assert response.json()["error"] == "PHONE_ALREADY_REGISTERED"
