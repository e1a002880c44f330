"""WhatsApp notifications through the Twilio Messages REST API."""

from __future__ import annotations

import logging

import httpx

from app.infrastructure.notifications.messages import (
    invite_body,
    transfer_accepted_body,
    transfer_request_body,
)

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class NotificationDeliveryError(Exception):
    """Twilio rejected the message or could not be reached."""


class WhatsAppNotificationDispatcher:
    """INotificationDispatcher sending WhatsApp messages via Twilio.

    Raises NotificationDeliveryError on any failure; callers dispatch
    through dispatch_safely so a failed message never undoes the state
    change that triggered it.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        app_url: str,
        *,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = f"{TWILIO_API_BASE}/Accounts/{account_sid}/Messages.json"
        self._auth = (account_sid, auth_token)
        self._from = from_number
        self._app_url = app_url.rstrip("/")
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _send(self, phone_number: str, body: str, kind: str) -> None:
        data = {"From": self._from, "To": f"whatsapp:{phone_number}", "Body": body}
        try:
            resp = await self._http.post(self._url, data=data, auth=self._auth)
        except httpx.HTTPError as e:
            raise NotificationDeliveryError(f"Twilio transport error: {type(e).__name__}") from e
        if resp.status_code >= 300:
            raise NotificationDeliveryError(f"Twilio returned {resp.status_code} for {kind}")
        logger.info("WhatsApp %s sent (sid=%s)", kind, resp.json().get("sid"))

    async def send_invite(self, phone_number: str, code: str, role: str) -> None:
        await self._send(phone_number, invite_body(self._app_url, code, role), "invite")

    async def send_transfer_request(self, phone_number: str, owner_name: str, code: str) -> None:
        await self._send(
            phone_number, transfer_request_body(self._app_url, owner_name, code), "transfer_request"
        )

    async def send_transfer_accepted(self, phone_number: str, recipient_name: str) -> None:
        await self._send(
            phone_number, transfer_accepted_body(self._app_url, recipient_name), "transfer_accepted"
        )
