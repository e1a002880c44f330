"""Account registration: owner bootstrap, invite redemption, transfer recipient.

Every path verifies the phone-proof token for the number being registered
and stores the PIN digest; the record store hashes and owns the password.
"""

from __future__ import annotations

import logging

from app.application.dtos.account import AccountCreate, AccountDraft
from app.application.interfaces.repositories import IAccountRepository, IAppConfigRepository
from app.application.services.invite_service import InviteService
from app.application.services.ownership_transfer_service import OwnershipTransferService
from app.application.services.phone_identity_verifier import PhoneIdentityVerifier
from app.application.services.pin_hasher import PinHasher, is_valid_pin
from app.core.messages import translate
from app.domain.entities import AccountEntity, InviteCodeEntity
from app.domain.enums import AccountRole, AccountStatus, TransferStatus
from app.domain.exceptions import (
    DuplicateValueException,
    IdentityException,
    InvalidCodeException,
    OwnerAlreadyExistsException,
    PhoneAlreadyRegisteredException,
    PhoneMismatchException,
    ValidationException,
)
from app.domain.value_objects.phone import PhoneNumber, is_valid_e164
from app.shared.telemetry.tracing import traced
from app.shared.utils.sanitization import sanitize_display_text

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8


def validate_draft(draft: AccountDraft) -> str:
    """Check draft shape before touching the store. Returns the cleaned display name.

    Raises:
        ValidationException: Field-level failure.
    """
    if not is_valid_e164(draft.phone_number):
        raise ValidationException(translate("invalid_phone"), field="phone_number")
    name = sanitize_display_text(draft.name or "")
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise ValidationException(translate("invalid_name"), field="name")
    if len(draft.password or "") < PASSWORD_MIN_LENGTH:
        raise ValidationException(translate("invalid_password"), field="password")
    if not is_valid_pin(draft.pin):
        raise ValidationException(translate("invalid_pin_format"), field="pin")
    return name


class RegistrationService:
    """Creates accounts through the three registration paths."""

    def __init__(
        self,
        account_repo: IAccountRepository,
        app_config_repo: IAppConfigRepository,
        invite_service: InviteService,
        transfer_service: OwnershipTransferService,
        verifier: PhoneIdentityVerifier,
        hasher: PinHasher,
    ) -> None:
        self.account_repo = account_repo
        self.app_config_repo = app_config_repo
        self.invite_service = invite_service
        self.transfer_service = transfer_service
        self.verifier = verifier
        self.hasher = hasher

    def _account_fields(
        self,
        draft: AccountDraft,
        name: str,
        role: AccountRole,
        invited_by: str | None = None,
    ) -> AccountCreate:
        return AccountCreate(
            phone_number=draft.phone_number,
            email=PhoneNumber(draft.phone_number).auth_email,
            name=name,
            password=draft.password,
            pin_hash=self.hasher.hash(draft.pin),
            role=role,
            status=AccountStatus.ACTIVE,
            invited_by=invited_by,
            phone_verified=True,
        )

    async def _ensure_phone_free(self, phone_number: str) -> None:
        if await self.account_repo.get_by_phone(phone_number) is not None:
            raise PhoneAlreadyRegisteredException()

    @traced("registration.owner")
    async def register_owner(self, draft: AccountDraft) -> AccountEntity:
        """Bootstrap the first owner.

        Refuses when setup is recorded complete or any owner exists (checked
        right before creation). A unique violation on create, including the
        owner-role constraint, is reported as the same conflict.

        Raises:
            OwnerAlreadyExistsException: An owner already exists.
        """
        name = validate_draft(draft)
        self.verifier.require(draft.phone_token, draft.phone_number)

        config = await self.app_config_repo.get()
        if config is not None and config.setup_complete:
            raise OwnerAlreadyExistsException()
        if await self.account_repo.get_owner() is not None:
            raise OwnerAlreadyExistsException()
        await self._ensure_phone_free(draft.phone_number)

        try:
            owner = await self.account_repo.create(self._account_fields(draft, name, AccountRole.OWNER))
        except DuplicateValueException:
            logger.warning("Owner bootstrap lost a race to another registration")
            raise OwnerAlreadyExistsException() from None

        try:
            await self.app_config_repo.mark_setup_complete()
        except IdentityException:
            logger.error("Owner %s created but setupComplete flag not written", owner.id)
        logger.info("Owner account %s registered", owner.id)
        return owner

    @traced("registration.invite")
    async def register_with_invite(self, code: str, draft: AccountDraft) -> AccountEntity:
        """Register through an invite: role and invitedBy come from the invite."""
        name = validate_draft(draft)
        self.verifier.require(draft.phone_token, draft.phone_number)
        await self._ensure_phone_free(draft.phone_number)

        async def create_account(invite: InviteCodeEntity) -> AccountEntity:
            fields = self._account_fields(
                draft, name, invite.role.to_account_role(), invited_by=invite.created_by
            )
            try:
                return await self.account_repo.create(fields)
            except DuplicateValueException:
                raise PhoneAlreadyRegisteredException() from None

        account = await self.invite_service.redeem_invite(code, create_account)
        logger.info("Account %s registered via invite", account.id)
        return account

    @traced("registration.transfer_recipient")
    async def register_transfer_recipient(self, code: str, draft: AccountDraft) -> AccountEntity:
        """Create the recipient of a pending transfer as a partner, then accept the transfer.

        Ownership moves only when the owner confirms.

        Raises:
            InvalidCodeException: Transfer unknown or not pending.
            PhoneMismatchException: Draft phone is not the transfer's destination.
        """
        name = validate_draft(draft)
        transfer = await self.transfer_service.get(code)
        if transfer is None or transfer.status != TransferStatus.PENDING:
            raise InvalidCodeException()
        if draft.phone_number != transfer.to_phone:
            raise PhoneMismatchException()
        self.verifier.require(draft.phone_token, draft.phone_number)
        await self._ensure_phone_free(draft.phone_number)

        try:
            account = await self.account_repo.create(
                self._account_fields(draft, name, AccountRole.PARTNER, invited_by=transfer.from_user)
            )
        except DuplicateValueException:
            raise PhoneAlreadyRegisteredException() from None
        await self.transfer_service.accept(transfer.code, account.id)
        logger.info("Transfer recipient %s registered and accepted", account.id)
        return account
