"""Notification dispatcher that logs instead of sending."""

from __future__ import annotations

import logging

from app.domain.value_objects.phone import PhoneNumber, is_valid_e164
from app.infrastructure.notifications.messages import (
    invite_body,
    transfer_accepted_body,
    transfer_request_body,
)
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _mask(phone_number: str) -> str:
    return PhoneNumber(phone_number).masked if is_valid_e164(phone_number) else "***"


class LogOnlyNotificationDispatcher:
    """INotificationDispatcher for development: nothing leaves the process.

    Message bodies carry codes, so they are logged at DEBUG only.
    """

    def __init__(self, app_url: str = "") -> None:
        self._app_url = app_url.rstrip("/")

    def _log(self, kind: str, phone_number: str, body: str) -> None:
        logger.info("Notify %s: would send WhatsApp to %s", kind, _mask(phone_number))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Notify %s body: %s", kind, body)

    async def send_invite(self, phone_number: str, code: str, role: str) -> None:
        self._log("invite", phone_number, invite_body(self._app_url, code, role))

    async def send_transfer_request(self, phone_number: str, owner_name: str, code: str) -> None:
        self._log(
            "transfer_request", phone_number, transfer_request_body(self._app_url, owner_name, code)
        )

    async def send_transfer_accepted(self, phone_number: str, recipient_name: str) -> None:
        self._log(
            "transfer_accepted", phone_number, transfer_accepted_body(self._app_url, recipient_name)
        )

    async def aclose(self) -> None:
        return None
