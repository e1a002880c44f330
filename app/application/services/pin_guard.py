"""Session/PIN guard: per-login-session PIN state machine.

States: NO_PIN_REQUIRED -> PIN_REQUIRED -> UNLOCKED <-> LOCKED.
Password login enters PIN_REQUIRED; a correct PIN unlocks; backgrounding
or idle time locks again without discarding the login; logout clears
everything. Wrong PINs are counted per session and lock PIN entry out for
a fixed window once the threshold is reached. State lives in the
session-state store, never in the record store.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta

from app.application.dtos.session import (
    PinSessionData,
    PinVerifyResult,
    RememberedIdentity,
    SessionStatus,
)
from app.application.interfaces.services import ISessionStateStore
from app.application.services.pin_hasher import PinHasher, is_valid_pin
from app.application.services.session_keys import pin_session_key, remembered_identity_key
from app.core.constants import REMEMBERED_TTL_SECONDS
from app.core.messages import translate
from app.domain.entities import AccountEntity
from app.domain.enums import PinSessionState
from app.domain.exceptions import (
    AuthenticationException,
    IncorrectPinException,
    PinLockedOutException,
    PinRequiredException,
    ValidationException,
)
from app.domain.value_objects.phone import PhoneNumber, is_valid_e164
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def _remaining_seconds(until: datetime, now: datetime) -> int:
    return max(1, math.ceil((until - now).total_seconds()))


class PinGuard:
    """PIN state machine over an ISessionStateStore.

    Args:
        store: Session-state store (memory or Redis).
        hasher: PIN digest verifier.
        max_attempts: Wrong submissions that trigger a lockout.
        lockout: Lockout window.
        idle_timeout: Inactivity after which UNLOCKED becomes LOCKED.
        session_ttl_seconds: Lifetime of session state (matches the bearer token).
    """

    def __init__(
        self,
        store: ISessionStateStore,
        hasher: PinHasher,
        max_attempts: int = 3,
        lockout: timedelta = timedelta(seconds=30),
        idle_timeout: timedelta = timedelta(minutes=5),
        session_ttl_seconds: int = 12 * 3600,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.max_attempts = max_attempts
        self.lockout = lockout
        self.idle_timeout = idle_timeout
        self.session_ttl_seconds = session_ttl_seconds

    async def _load(self, sid: str) -> PinSessionData:
        raw = await self.store.get(pin_session_key(sid))
        if raw is None:
            raise AuthenticationException(translate("invalid_session"))
        return PinSessionData.from_dict(raw)

    async def _save(self, sid: str, data: PinSessionData) -> None:
        await self.store.set(pin_session_key(sid), data.to_dict(), self.session_ttl_seconds)

    def _apply_idle_lock(self, data: PinSessionData, now: datetime) -> bool:
        """Flip UNLOCKED to LOCKED when idle too long. Returns True when changed."""
        if (
            data.state == PinSessionState.UNLOCKED
            and data.last_activity is not None
            and now - data.last_activity >= self.idle_timeout
        ):
            data.state = PinSessionState.LOCKED
            return True
        return False

    async def _check_pin(
        self, sid: str, data: PinSessionData, account: AccountEntity, pin: str, now: datetime
    ) -> None:
        """Lockout-counted PIN check shared by unlock and sensitive actions.

        Saves the updated counter before raising. A lockout in force rejects
        without counting and without consulting the digest.
        """
        if data.lockout_until is not None:
            if data.lockout_until > now:
                raise PinLockedOutException(_remaining_seconds(data.lockout_until, now))
            data.failed_attempts = 0
            data.lockout_until = None
        if not is_valid_pin(pin):
            raise ValidationException(translate("invalid_pin_format"), field="pin")
        if not account.pin_hash:
            raise ValidationException(translate("pin_not_set"), field="pin")

        if self.hasher.verify(pin, account.pin_hash):
            data.failed_attempts = 0
            data.lockout_until = None
            return

        data.failed_attempts += 1
        if data.failed_attempts >= self.max_attempts:
            data.lockout_until = now + self.lockout
            await self._save(sid, data)
            logger.warning(
                "PIN lockout for account %s after %s failed attempts",
                account.id,
                data.failed_attempts,
            )
            raise PinLockedOutException(_remaining_seconds(data.lockout_until, now))
        await self._save(sid, data)
        logger.info("Incorrect PIN for account %s (%s/%s)", account.id, data.failed_attempts, self.max_attempts)
        raise IncorrectPinException(self.max_attempts - data.failed_attempts)

    async def _remember(self, device_id: str | None, account: AccountEntity) -> RememberedIdentity | None:
        if not device_id:
            return None
        phone_hint = (
            PhoneNumber(account.phone_number).masked
            if is_valid_e164(account.phone_number)
            else ""
        )
        remembered = RememberedIdentity(account_id=account.id, name=account.name, phone_hint=phone_hint)
        await self.store.set(remembered_identity_key(device_id), remembered.to_dict(), REMEMBERED_TTL_SECONDS)
        return remembered

    async def start_session(self, sid: str, now: datetime | None = None) -> PinSessionData:
        """Password login succeeded: enter PIN_REQUIRED with a clean counter."""
        data = PinSessionData(state=PinSessionState.PIN_REQUIRED, last_activity=now or utc_now())
        await self._save(sid, data)
        return data

    async def start_unlocked_session(
        self,
        sid: str,
        account: AccountEntity,
        device_id: str | None = None,
        now: datetime | None = None,
    ) -> PinSessionData:
        """Registration just set the PIN: start UNLOCKED and remember the device."""
        data = PinSessionData(state=PinSessionState.UNLOCKED, last_activity=now or utc_now())
        await self._save(sid, data)
        await self._remember(device_id, account)
        return data

    async def submit_pin(
        self,
        sid: str,
        account: AccountEntity,
        pin: str,
        device_id: str | None = None,
        now: datetime | None = None,
    ) -> PinVerifyResult:
        """Verify pin for the session; on success UNLOCKED and identity remembered.

        Raises:
            PinLockedOutException: Lockout in force, or this failure reached the threshold.
            IncorrectPinException: Wrong PIN below the threshold.
            AuthenticationException: Session state missing (logged out or expired).
        """
        now = now or utc_now()
        data = await self._load(sid)
        await self._check_pin(sid, data, account, pin, now)
        data.state = PinSessionState.UNLOCKED
        data.last_activity = now
        await self._save(sid, data)
        remembered = await self._remember(device_id, account)
        logger.info("Session unlocked for account %s", account.id)
        return PinVerifyResult(state=data.state, remembered=remembered)

    async def verify_for_sensitive_action(
        self,
        sid: str,
        account: AccountEntity,
        pin: str,
        now: datetime | None = None,
    ) -> None:
        """Re-verify the PIN for an irreversible action; counted, state unchanged."""
        now = now or utc_now()
        data = await self._load(sid)
        await self._check_pin(sid, data, account, pin, now)
        await self._save(sid, data)

    async def lock(self, sid: str) -> PinSessionState:
        """Backgrounding: UNLOCKED -> LOCKED. Other states are unchanged."""
        data = await self._load(sid)
        if data.state == PinSessionState.UNLOCKED:
            data.state = PinSessionState.LOCKED
            await self._save(sid, data)
        return data.state

    async def require_unlocked(self, sid: str, now: datetime | None = None) -> None:
        """Gate for protected operations; applies idle auto-lock and refreshes activity.

        Raises:
            PinRequiredException: Session is PIN_REQUIRED or LOCKED.
            AuthenticationException: Session state missing.
        """
        now = now or utc_now()
        data = await self._load(sid)
        if self._apply_idle_lock(data, now):
            await self._save(sid, data)
            logger.info("Session %s auto-locked after inactivity", sid)
        if data.state != PinSessionState.UNLOCKED:
            raise PinRequiredException(data.state.value)
        data.last_activity = now
        await self._save(sid, data)

    async def status(self, sid: str, now: datetime | None = None) -> SessionStatus:
        now = now or utc_now()
        try:
            data = await self._load(sid)
        except AuthenticationException:
            return SessionStatus(state=PinSessionState.NO_PIN_REQUIRED, failed_attempts=0, lockout_remaining=0)
        if self._apply_idle_lock(data, now):
            await self._save(sid, data)
        lockout_remaining = (
            _remaining_seconds(data.lockout_until, now)
            if data.lockout_until is not None and data.lockout_until > now
            else 0
        )
        return SessionStatus(
            state=data.state,
            failed_attempts=data.failed_attempts if lockout_remaining or data.lockout_until is None else 0,
            lockout_remaining=lockout_remaining,
        )

    async def end_session(self, sid: str, device_id: str | None = None) -> None:
        """Logout: clear session state and the device's remembered identity."""
        await self.store.delete(pin_session_key(sid))
        if device_id:
            await self.store.delete(remembered_identity_key(device_id))

    async def get_remembered(self, device_id: str | None) -> RememberedIdentity | None:
        if not device_id:
            return None
        raw = await self.store.get(remembered_identity_key(device_id))
        return RememberedIdentity.from_dict(raw) if raw else None
