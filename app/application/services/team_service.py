"""Team management: member listing, access toggles, phone and PIN changes."""

from __future__ import annotations

import logging

from app.application.interfaces.repositories import IAccountRepository
from app.application.services.authorization_service import AuthorizationService
from app.application.services.phone_identity_verifier import PhoneIdentityVerifier
from app.application.services.pin_guard import PinGuard
from app.application.services.pin_hasher import PinHasher, is_valid_pin
from app.core.messages import translate
from app.domain.entities import AccountEntity
from app.domain.enums import AccountStatus
from app.domain.exceptions import (
    AuthorizationException,
    DuplicateValueException,
    PhoneAlreadyRegisteredException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects.phone import is_valid_e164
from app.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


class TeamService:
    """Owner/partner team administration and self-service credential changes."""

    def __init__(
        self,
        account_repo: IAccountRepository,
        pin_guard: PinGuard,
        verifier: PhoneIdentityVerifier,
        hasher: PinHasher,
    ) -> None:
        self.account_repo = account_repo
        self.pin_guard = pin_guard
        self.verifier = verifier
        self.hasher = hasher
        self.authz = AuthorizationService(account_repo)

    async def _get_member(self, member_id: str) -> AccountEntity:
        member = await self.account_repo.get_by_id(member_id)
        if member is None:
            raise ResourceNotFoundException("account", member_id)
        return member

    async def _ensure_phone_free(self, phone_number: str) -> None:
        if await self.account_repo.get_by_phone(phone_number) is not None:
            raise PhoneAlreadyRegisteredException()

    @traced("team.list")
    async def list_members(self, actor_id: str) -> list[AccountEntity]:
        """All accounts, for owner and partners."""
        await self.authz.require_team_manager(actor_id, "list_members")
        return await self.account_repo.list_all()

    @traced("team.set_status")
    async def set_member_status(
        self, actor_id: str, member_id: str, status: AccountStatus
    ) -> AccountEntity:
        """Enable or disable a member.

        Owner and partners toggle employees; the owner also toggles partners.
        Nobody toggles the owner or themselves.
        """
        actor = await self.authz.require_team_manager(actor_id, "set_member_status")
        if status not in (AccountStatus.ACTIVE, AccountStatus.DISABLED):
            raise ValidationException(translate("request_invalid"), field="status")
        member = await self._get_member(member_id)
        if not actor.can_toggle(member):
            raise AuthorizationException(action="set_member_status")
        updated = await self.account_repo.update_status(member.id, status)
        logger.info("Account %s set %s by %s", member.id, status.value, actor.id)
        return updated

    @traced("team.change_member_phone")
    async def change_member_phone(
        self, actor_id: str, member_id: str, new_phone: str
    ) -> AccountEntity:
        """Owner reassigns a member's phone (elevated path, no phone proof)."""
        actor = await self.authz.require_owner(actor_id, "change_member_phone")
        if not is_valid_e164(new_phone):
            raise ValidationException(translate("invalid_phone"), field="new_phone_number")
        member = await self._get_member(member_id)
        if member.id == actor.id or member.is_owner:
            raise AuthorizationException(action="change_member_phone")
        if member.phone_number == new_phone:
            raise ValidationException(translate("same_phone"), field="new_phone_number")
        await self._ensure_phone_free(new_phone)
        try:
            updated = await self.account_repo.update_phone(member.id, new_phone, phone_verified=True)
        except DuplicateValueException:
            raise PhoneAlreadyRegisteredException() from None
        logger.info("Owner %s changed phone of account %s", actor.id, member.id)
        return updated

    @traced("team.change_own_phone")
    async def change_own_phone(
        self, actor_id: str, new_phone: str, phone_token: str
    ) -> AccountEntity:
        """Move the caller's account to a new, proven phone number."""
        actor = await self.authz.require_active(actor_id)
        if not is_valid_e164(new_phone):
            raise ValidationException(translate("invalid_phone"), field="new_phone_number")
        if actor.phone_number == new_phone:
            raise ValidationException(translate("same_phone"), field="new_phone_number")
        self.verifier.require(phone_token, new_phone)
        await self._ensure_phone_free(new_phone)
        try:
            updated = await self.account_repo.update_phone(actor.id, new_phone, phone_verified=True)
        except DuplicateValueException:
            raise PhoneAlreadyRegisteredException() from None
        logger.info("Account %s changed its phone number", actor.id)
        return updated

    @traced("team.change_pin")
    async def change_pin(self, actor_id: str, sid: str, current_pin: str, new_pin: str) -> None:
        """Replace the caller's PIN after re-verifying the current one (lockout counted)."""
        actor = await self.authz.require_active(actor_id)
        if not is_valid_pin(new_pin):
            raise ValidationException(translate("invalid_pin_format"), field="new_pin")
        await self.pin_guard.verify_for_sensitive_action(sid, actor, current_pin)
        await self.account_repo.update_pin(actor.id, self.hasher.hash(new_pin))
        logger.info("Account %s changed its PIN", actor.id)
