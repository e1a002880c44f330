"""Ownership transfer protocol.

pending -> accepted -> completed, with cancel from pending/accepted and
lazy expiry 24 hours after creation. The recipient accepts (their phone
must match the destination), then the owner confirms with their PIN and
roles swap: owner becomes partner, recipient becomes owner. Every step
re-reads the transfer and the accounts involved before acting.
"""

from __future__ import annotations

import logging

from app.application.dtos.transfer import TransferValidation
from app.application.interfaces.repositories import (
    IAccountRepository,
    IOwnershipTransferRepository,
)
from app.application.interfaces.services import INotificationDispatcher
from app.application.services.authorization_service import AuthorizationService
from app.application.services.notify import dispatch_safely
from app.application.services.pin_guard import PinGuard
from app.application.services.token_generator import (
    DEFAULT_ALPHABET,
    TRANSFER_CODE_LENGTH,
    TRANSFER_TTL,
    generate_code,
    get_expiration,
    is_valid_code,
    normalize_code,
)
from app.core.messages import translate
from app.domain.entities import OwnershipTransferEntity
from app.domain.enums import AccountRole, TransferStatus
from app.domain.exceptions import (
    ActiveTransferExistsException,
    AuthorizationException,
    DuplicateValueException,
    IdentityException,
    InvalidCodeException,
    PhoneMismatchException,
    TransferNotActiveException,
    UpstreamUnavailableException,
    ValidationException,
)
from app.domain.value_objects.phone import is_valid_e164
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class OwnershipTransferService:
    """Ownership transfer state machine over the transfer and account repositories."""

    def __init__(
        self,
        transfer_repo: IOwnershipTransferRepository,
        account_repo: IAccountRepository,
        notifier: INotificationDispatcher,
        pin_guard: PinGuard,
        alphabet: str = DEFAULT_ALPHABET,
    ) -> None:
        self.transfer_repo = transfer_repo
        self.account_repo = account_repo
        self.notifier = notifier
        self.pin_guard = pin_guard
        self.alphabet = alphabet
        self.authz = AuthorizationService(account_repo)

    async def _apply_expiry(self, transfer: OwnershipTransferEntity) -> OwnershipTransferEntity:
        """Rewrite a stale live status as expired; a failed write is logged, the read still reports expired."""
        if transfer.is_stale(utc_now()):
            transfer.status = TransferStatus.EXPIRED
            try:
                await self.transfer_repo.save_state(transfer)
                logger.info("Transfer %s expired", transfer.id)
            except IdentityException:
                logger.warning("Could not persist expiry of transfer %s", transfer.id)
        return transfer

    async def get(self, code: str) -> OwnershipTransferEntity | None:
        """Effective read: lazy expiry applied. None for malformed or unknown codes."""
        normalized = normalize_code(code)
        if not is_valid_code(normalized, TRANSFER_CODE_LENGTH):
            return None
        transfer = await self.transfer_repo.get_by_code(normalized)
        if transfer is None:
            return None
        return await self._apply_expiry(transfer)

    async def _get_or_invalid(self, code: str) -> OwnershipTransferEntity:
        transfer = await self.get(code)
        if transfer is None:
            logger.info("Transfer lookup failed: unknown or malformed code")
            raise InvalidCodeException()
        return transfer

    async def _create_with_fresh_code(self, owner_id: str, to_phone: str) -> OwnershipTransferEntity:
        expires_at = get_expiration(TRANSFER_TTL)
        for attempt in (1, 2):
            code = generate_code(TRANSFER_CODE_LENGTH, self.alphabet)
            try:
                return await self.transfer_repo.create(code, owner_id, to_phone, expires_at)
            except DuplicateValueException:
                logger.warning("Transfer code collision (attempt %s)", attempt)
        raise UpstreamUnavailableException("initiate_transfer")

    @traced("transfer.initiate")
    async def initiate(self, owner_id: str, to_phone: str) -> OwnershipTransferEntity:
        """Start a transfer to to_phone and notify the recipient.

        Raises:
            AuthorizationException: Caller is not the current owner.
            ValidationException: to_phone is not E.164 or is the owner's own number.
            ActiveTransferExistsException: A live transfer from this owner exists.
        """
        owner = await self.authz.require_owner(owner_id, "initiate_transfer")
        if not is_valid_e164(to_phone):
            raise ValidationException(translate("invalid_phone"), field="to_phone")
        if to_phone == owner.phone_number:
            raise ValidationException(translate("transfer_to_self"), field="to_phone")

        for existing in await self.transfer_repo.list_live_for_owner(owner.id):
            await self._apply_expiry(existing)
            if existing.is_live(utc_now()):
                raise ActiveTransferExistsException()

        transfer = await self._create_with_fresh_code(owner.id, to_phone)
        logger.info("Transfer %s initiated by owner %s", transfer.id, owner.id)
        await dispatch_safely(
            "send_transfer_request",
            self.notifier.send_transfer_request(to_phone, owner.name, transfer.code),
        )
        return transfer

    @traced("transfer.validate")
    async def validate(self, code: str) -> TransferValidation:
        """Public check for the recipient page: pending and unexpired only."""
        transfer = await self.get(code)
        if transfer is None or transfer.status != TransferStatus.PENDING:
            logger.info(
                "Transfer validation failed: %s",
                transfer.status.value if transfer else "not_found",
            )
            return TransferValidation(valid=False)
        owner = await self.account_repo.get_by_id(transfer.from_user)
        recipient = await self.account_repo.get_by_phone(transfer.to_phone)
        return TransferValidation(
            valid=True,
            owner_name=owner.name if owner else None,
            to_phone=transfer.to_phone,
            existing_user=recipient is not None,
        )

    @traced("transfer.accept")
    async def accept(self, code: str, recipient_id: str) -> OwnershipTransferEntity:
        """Recipient accepts a pending transfer addressed to their phone.

        Raises:
            InvalidCodeException: Unknown code.
            TransferNotActiveException: Not pending (accepted, terminal or expired).
            PhoneMismatchException: Recipient phone differs from the destination.
        """
        recipient = await self.authz.require_active(recipient_id)
        transfer = await self._get_or_invalid(code)
        now = utc_now()
        current = transfer.effective_status(now)
        if current != TransferStatus.PENDING:
            raise TransferNotActiveException(current.value)
        if recipient.id == transfer.from_user:
            raise AuthorizationException(action="accept_transfer")
        if recipient.phone_number != transfer.to_phone:
            logger.warning("Transfer %s accept rejected: phone mismatch", transfer.id)
            raise PhoneMismatchException()

        transfer.accept(recipient.id, now)
        transfer = await self.transfer_repo.save_state(transfer)
        logger.info("Transfer %s accepted by %s", transfer.id, recipient.id)

        owner = await self.account_repo.get_by_id(transfer.from_user)
        if owner is not None and owner.phone_number:
            await dispatch_safely(
                "send_transfer_accepted",
                self.notifier.send_transfer_accepted(owner.phone_number, recipient.name),
            )
        return transfer

    @traced("transfer.confirm")
    async def confirm(self, code: str, owner_id: str, pin: str, sid: str) -> OwnershipTransferEntity:
        """Owner confirms with PIN; roles swap and the transfer completes.

        Ordering: demote owner to partner, promote recipient to owner (the
        owner is restored if promotion fails), then mark completed. If the
        recipient already holds owner, an earlier confirm swapped roles but
        failed to record completion, so only completion is written.

        Raises:
            AuthorizationException: Caller is not the transfer's owner.
            TransferNotActiveException: Not accepted, or expired.
            IncorrectPinException / PinLockedOutException: PIN check failed (counted).
            UpstreamUnavailableException: A role write failed.
        """
        transfer = await self._get_or_invalid(code)
        if transfer.from_user != owner_id:
            raise AuthorizationException(action="confirm_transfer")
        transfer.require_confirmable(utc_now())

        caller = await self.authz.require_active(owner_id)
        await self.pin_guard.verify_for_sensitive_action(sid, caller, pin)

        recipient = await self.account_repo.get_by_id(transfer.to_user) if transfer.to_user else None
        if recipient is None:
            logger.error("Transfer %s has no resolvable recipient", transfer.id)
            raise InvalidCodeException()

        if recipient.is_owner:
            logger.warning("Transfer %s resuming: recipient already owner", transfer.id)
        else:
            if not caller.is_owner:
                raise AuthorizationException(action="confirm_transfer", message=translate("owner_only"))
            if not recipient.is_active:
                logger.warning("Transfer %s refused: recipient %s is disabled", transfer.id, recipient.id)
                raise AuthorizationException(
                    action="confirm_transfer", message=translate("transfer_recipient_disabled")
                )
            await self.account_repo.update_role(caller.id, AccountRole.PARTNER)
            try:
                await self.account_repo.update_role(recipient.id, AccountRole.OWNER)
            except IdentityException:
                logger.error("Transfer %s: promoting recipient failed; restoring owner", transfer.id)
                try:
                    await self.account_repo.update_role(caller.id, AccountRole.OWNER)
                except IdentityException:
                    logger.critical(
                        "Transfer %s: owner %s could not be restored; no owner until resolved",
                        transfer.id,
                        caller.id,
                    )
                raise UpstreamUnavailableException("confirm_transfer") from None

        transfer.complete(utc_now())
        transfer = await self.transfer_repo.save_state(transfer)
        logger.info("Transfer %s completed: %s -> %s", transfer.id, caller.id, recipient.id)
        return transfer

    @traced("transfer.cancel")
    async def cancel(self, code: str, owner_id: str) -> OwnershipTransferEntity:
        """Owner cancels a live transfer. Terminal or expired transfers raise TransferNotActiveException."""
        transfer = await self._get_or_invalid(code)
        if transfer.from_user != owner_id:
            raise AuthorizationException(action="cancel_transfer")
        transfer.cancel(utc_now())
        transfer = await self.transfer_repo.save_state(transfer)
        logger.info("Transfer %s cancelled by %s", transfer.id, owner_id)
        return transfer

    @traced("transfer.get_active")
    async def get_active(self, owner_id: str) -> OwnershipTransferEntity | None:
        """The owner's live transfer, if any (drives the pending-transfer banner)."""
        await self.authz.require_active(owner_id)
        for transfer in await self.transfer_repo.list_live_for_owner(owner_id):
            await self._apply_expiry(transfer)
            if transfer.is_live(utc_now()):
                return transfer
        return None
