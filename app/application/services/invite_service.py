"""Invite lifecycle: create, validate, redeem, revoke, regenerate.

Invites are 6-character, single-use, role-scoped codes valid for 7 days.
Only the current owner issues them. Validation is public but rate limited
at the HTTP boundary and never reveals why a code is unusable.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from app.application.dtos.invite import InviteValidation
from app.application.interfaces.repositories import IAccountRepository, IInviteCodeRepository
from app.application.interfaces.services import INotificationDispatcher
from app.application.services.authorization_service import AuthorizationService
from app.application.services.notify import dispatch_safely
from app.application.services.token_generator import (
    DEFAULT_ALPHABET,
    INVITE_CODE_LENGTH,
    INVITE_TTL,
    generate_code,
    get_expiration,
    is_valid_code,
    normalize_code,
)
from app.core.messages import translate
from app.domain.entities import AccountEntity, InviteCodeEntity
from app.domain.enums import AccountStatus, InviteRole
from app.domain.exceptions import (
    DuplicateValueException,
    IdentityException,
    InvalidCodeException,
    PhoneAlreadyRegisteredException,
    ResourceNotFoundException,
    UpstreamUnavailableException,
    ValidationException,
)
from app.domain.value_objects.phone import is_valid_e164
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class InviteService:
    """Invite code lifecycle over the account and invite repositories."""

    def __init__(
        self,
        invite_repo: IInviteCodeRepository,
        account_repo: IAccountRepository,
        notifier: INotificationDispatcher,
        alphabet: str = DEFAULT_ALPHABET,
    ) -> None:
        self.invite_repo = invite_repo
        self.account_repo = account_repo
        self.notifier = notifier
        self.alphabet = alphabet
        self.authz = AuthorizationService(account_repo)

    async def _create_with_fresh_code(self, role: InviteRole, issuer_id: str) -> InviteCodeEntity:
        """Create an invite; on a code collision regenerate exactly once."""
        expires_at = get_expiration(INVITE_TTL)
        for attempt in (1, 2):
            code = generate_code(INVITE_CODE_LENGTH, self.alphabet)
            try:
                return await self.invite_repo.create(code, role, issuer_id, expires_at)
            except DuplicateValueException:
                logger.warning("Invite code collision (attempt %s)", attempt)
        raise UpstreamUnavailableException("create_invite")

    async def _get_owned_invite(self, invite_id: str) -> InviteCodeEntity:
        invite = await self.invite_repo.get_by_id(invite_id)
        if invite is None:
            raise ResourceNotFoundException("invite", invite_id)
        return invite

    @traced("invite.create")
    async def create_invite(self, role: InviteRole, issuer_id: str) -> InviteCodeEntity:
        """Issue a new invite. The issuer is re-read and must be the active owner."""
        await self.authz.require_owner(issuer_id, "create_invite")
        invite = await self._create_with_fresh_code(role, issuer_id)
        logger.info("Invite %s created for role %s by %s", invite.id, role.value, issuer_id)
        return invite

    async def _lookup_valid(self, code: str) -> InviteCodeEntity | None:
        """Return the invite when code is redeemable now; log the reason otherwise."""
        normalized = normalize_code(code)
        if not is_valid_code(normalized, INVITE_CODE_LENGTH):
            logger.info("Invite validation failed: malformed code")
            return None
        invite = await self.invite_repo.get_by_code(normalized)
        if invite is None:
            logger.info("Invite validation failed: not found")
            return None
        reason = invite.invalid_reason(utc_now())
        if reason is not None:
            logger.info("Invite %s validation failed: %s", invite.id, reason)
            return None
        return invite

    @traced("invite.validate")
    async def validate_invite(self, code: str) -> InviteValidation:
        """Public check: valid iff the code exists, is unused and unexpired. Returns role only."""
        invite = await self._lookup_valid(code)
        if invite is None:
            return InviteValidation(valid=False)
        return InviteValidation(valid=True, role=invite.role)

    @traced("invite.redeem")
    async def redeem_invite(
        self,
        code: str,
        create_account: Callable[[InviteCodeEntity], Awaitable[AccountEntity]],
    ) -> AccountEntity:
        """Consume an invite by creating the account it admits.

        Steps: re-validate, create the account (create_account receives the
        invite for role and invitedBy), re-read the invite and mark it used.
        If another redemption consumed it in between, the new account is
        disabled and the code is reported invalid. A failed mark-used write is
        logged; the account stands and the invite stays redeemable.

        Raises:
            InvalidCodeException: Code not redeemable (reason logged only).
        """
        invite = await self._lookup_valid(code)
        if invite is None:
            raise InvalidCodeException()

        account = await create_account(invite)

        current = await self.invite_repo.get_by_id(invite.id)
        if current is None or current.used:
            logger.warning(
                "Invite %s consumed concurrently; disabling account %s", invite.id, account.id
            )
            try:
                await self.account_repo.update_status(account.id, AccountStatus.DISABLED)
            except IdentityException:
                logger.error("Could not disable account %s after lost invite race", account.id)
            raise InvalidCodeException()

        try:
            await self.invite_repo.mark_used(invite.id, account.id)
        except IdentityException:
            logger.error(
                "Invite %s not marked used after creating account %s; invite remains redeemable",
                invite.id,
                account.id,
            )
        logger.info("Invite %s redeemed by account %s", invite.id, account.id)
        return account

    @traced("invite.revoke")
    async def revoke_invite(self, invite_id: str, issuer_id: str) -> None:
        """Delete an unused invite. Used invites are left untouched.

        Raises:
            ValidationException: The invite was already used.
        """
        await self.authz.require_owner(issuer_id, "revoke_invite")
        invite = await self._get_owned_invite(invite_id)
        if invite.used:
            raise ValidationException(translate("invite_already_used"), field="invite_id")
        await self.invite_repo.delete(invite.id)
        logger.info("Invite %s revoked by %s", invite.id, issuer_id)

    @traced("invite.regenerate")
    async def regenerate_invite(self, invite_id: str, issuer_id: str) -> InviteCodeEntity:
        """Replace an unused invite with a fresh code of the same role."""
        await self.authz.require_owner(issuer_id, "regenerate_invite")
        invite = await self._get_owned_invite(invite_id)
        if invite.used:
            raise ValidationException(translate("invite_already_used"), field="invite_id")
        await self.invite_repo.delete(invite.id)
        replacement = await self._create_with_fresh_code(invite.role, issuer_id)
        logger.info("Invite %s regenerated as %s", invite.id, replacement.id)
        return replacement

    @traced("invite.list")
    async def list_invites(self, issuer_id: str) -> list[InviteCodeEntity]:
        """Pending (unused, unexpired) invites, newest first. Owner only."""
        await self.authz.require_owner(issuer_id, "list_invites")
        return await self.invite_repo.list_pending(utc_now())

    @traced("invite.send")
    async def send_invite(self, invite_id: str, issuer_id: str, phone_number: str) -> bool:
        """Send a pending invite to phone_number. Returns whether the dispatch succeeded."""
        await self.authz.require_owner(issuer_id, "send_invite")
        if not is_valid_e164(phone_number):
            raise ValidationException(translate("invalid_phone"), field="phone_number")
        if await self.account_repo.get_by_phone(phone_number) is not None:
            raise PhoneAlreadyRegisteredException()
        invite = await self._get_owned_invite(invite_id)
        if not invite.is_valid(utc_now()):
            raise InvalidCodeException()
        return await dispatch_safely(
            "send_invite",
            self.notifier.send_invite(phone_number, invite.code, invite.role.value),
        )
