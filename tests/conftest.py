"""Pytest configuration and fixtures for the identity service.

Environment is fixed before app.main is imported: in-memory record store,
in-memory session state and a recording notification dispatcher, so the
suite runs without PocketBase, Redis or Twilio.
"""

import os
import time

os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789abcdef0123456789abcdef")
os.environ["RECORD_STORE_BACKEND"] = "memory"
os.environ["SESSION_STORE_BACKEND"] = "memory"
os.environ["NOTIFICATION_BACKEND"] = "log"
os.environ["PHONE_AUTH_PROJECT_ID"] = "test-project"
os.environ["APP_LOCALE"] = "en"
os.environ["TELEMETRY_ENABLED"] = "false"
os.environ["PIN_HASH_PREFIX"] = "test_pin_v1_"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from jose import jwt  # noqa: E402

from app.application.dtos.account import AccountCreate  # noqa: E402
from app.application.services.pin_guard import PinGuard  # noqa: E402
from app.application.services.pin_hasher import PinHasher  # noqa: E402
from app.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.core.limiter import get_code_validation_window, limiter  # noqa: E402
from app.domain.entities import AccountEntity  # noqa: E402
from app.domain.enums import AccountRole, AccountStatus  # noqa: E402
from app.domain.value_objects.phone import PhoneNumber  # noqa: E402
from app.infrastructure.notifications import set_notification_dispatcher  # noqa: E402
from app.infrastructure.session import MemorySessionStateStore, set_session_store  # noqa: E402
from app.infrastructure.store import InMemoryRecordStore, set_record_store  # noqa: E402
from app.infrastructure.store.repositories import (  # noqa: E402
    AccountRepository,
    AppConfigRepository,
    InviteCodeRepository,
    OwnershipTransferRepository,
)
from app.main import app  # noqa: E402

PHONE_PROJECT = "test-project"
PHONE_ISSUER = f"https://securetoken.google.com/{PHONE_PROJECT}"
OWNER_PHONE = "+51987654321"
OWNER_PASSWORD = "owner-password-1"
OWNER_PIN = "1234"


class RecordingNotifier:
    """Notification dispatcher that keeps every message it was asked to send."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, dict]] = []
        self.fail = False

    async def _record(self, kind: str, phone_number: str, **fields) -> None:
        if self.fail:
            raise RuntimeError("delivery failed")
        self.sent.append((kind, phone_number, fields))

    async def send_invite(self, phone_number: str, code: str, role: str) -> None:
        await self._record("invite", phone_number, code=code, role=role)

    async def send_transfer_request(self, phone_number: str, owner_name: str, code: str) -> None:
        await self._record("transfer_request", phone_number, owner_name=owner_name, code=code)

    async def send_transfer_accepted(self, phone_number: str, recipient_name: str) -> None:
        await self._record("transfer_accepted", phone_number, recipient_name=recipient_name)

    async def aclose(self) -> None:
        return None


def make_phone_token(phone_number: str | None, **overrides) -> str:
    """Build a phone-proof ID token; pass a claim as None to drop it."""
    now = int(time.time())
    claims = {
        "iss": PHONE_ISSUER,
        "aud": PHONE_PROJECT,
        "sub": "phone-auth-uid",
        "iat": now,
        "exp": now + 3600,
        "phone_number": phone_number,
    }
    claims.update(overrides)
    claims = {k: v for k, v in claims.items() if v is not None}
    return jwt.encode(claims, "phone-provider-key", algorithm="HS256")


@pytest.fixture(autouse=True)
def record_store() -> InMemoryRecordStore:
    """Fresh process-wide record store per test."""
    store = InMemoryRecordStore()
    set_record_store(store)
    yield store
    set_record_store(None)


@pytest.fixture(autouse=True)
def session_store() -> MemorySessionStateStore:
    store = MemorySessionStateStore()
    set_session_store(store)
    yield store
    set_session_store(None)


@pytest.fixture(autouse=True)
def notifier() -> RecordingNotifier:
    recording = RecordingNotifier()
    set_notification_dispatcher(recording)
    yield recording
    set_notification_dispatcher(None)


@pytest.fixture(autouse=True)
def _reset_rate_limits() -> None:
    limiter.reset()
    get_code_validation_window().reset()


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def phone_token():
    return make_phone_token


@pytest.fixture
def hasher() -> PinHasher:
    return PinHasher("test_pin_v1_")


@pytest.fixture
def pin_guard(session_store: MemorySessionStateStore, hasher: PinHasher) -> PinGuard:
    return PinGuard(session_store, hasher)


@pytest.fixture
def account_repo(record_store: InMemoryRecordStore) -> AccountRepository:
    return AccountRepository(record_store)


@pytest.fixture
def invite_repo(record_store: InMemoryRecordStore) -> InviteCodeRepository:
    return InviteCodeRepository(record_store)


@pytest.fixture
def transfer_repo(record_store: InMemoryRecordStore) -> OwnershipTransferRepository:
    return OwnershipTransferRepository(record_store)


@pytest.fixture
def app_config_repo(record_store: InMemoryRecordStore) -> AppConfigRepository:
    return AppConfigRepository(record_store)


@pytest.fixture
def make_account(account_repo: AccountRepository, hasher: PinHasher):
    """Create an account directly through the repository (bypasses registration)."""

    async def _make(
        phone_number: str,
        role: AccountRole = AccountRole.EMPLOYEE,
        name: str = "Member",
        password: str = "member-password",
        pin: str = "1234",
        status: AccountStatus = AccountStatus.ACTIVE,
    ) -> AccountEntity:
        return await account_repo.create(
            AccountCreate(
                phone_number=phone_number,
                email=PhoneNumber(phone_number).auth_email,
                name=name,
                password=password,
                pin_hash=hasher.hash(pin),
                role=role,
                status=status,
            )
        )

    return _make


@pytest.fixture
def register_owner(client: AsyncClient):
    """Register the owner through the API; returns bearer headers for an unlocked session."""

    async def _register(
        phone_number: str = OWNER_PHONE,
        name: str = "Rosa Owner",
        password: str = OWNER_PASSWORD,
        pin: str = OWNER_PIN,
    ) -> dict[str, str]:
        response = await client.post(
            "/api/v1/auth/register-owner",
            json={
                "phoneNumber": phone_number,
                "name": name,
                "password": password,
                "pin": pin,
                "phoneToken": make_phone_token(phone_number),
            },
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _register


@pytest.fixture
def login(client: AsyncClient):
    """Log in with phone and password, then unlock with the PIN. Returns bearer headers."""

    async def _login(phone_number: str, password: str, pin: str) -> dict[str, str]:
        response = await client.post(
            "/api/v1/auth/login", json={"phoneNumber": phone_number, "password": password}
        )
        assert response.status_code == 200, response.text
        headers = {"Authorization": f"Bearer {response.json()['access_token']}"}
        unlock = await client.post("/api/v1/auth/pin/verify", json={"pin": pin}, headers=headers)
        assert unlock.status_code == 200, unlock.text
        return headers

    return _login
