"""Outbound notifications (WhatsApp via Twilio, or log-only)."""

import logging

from app.core.config import get_settings
from app.infrastructure.notifications.log_only import LogOnlyNotificationDispatcher
from app.infrastructure.notifications.whatsapp import (
    NotificationDeliveryError,
    WhatsAppNotificationDispatcher,
)

logger = logging.getLogger(__name__)

_dispatcher: LogOnlyNotificationDispatcher | WhatsAppNotificationDispatcher | None = None


def init_notification_dispatcher() -> LogOnlyNotificationDispatcher | WhatsAppNotificationDispatcher:
    """Create the dispatcher selected by settings.notification_backend. Idempotent."""
    global _dispatcher
    if _dispatcher is not None:
        return _dispatcher
    settings = get_settings()
    if settings.notification_backend == "whatsapp":
        _dispatcher = WhatsAppNotificationDispatcher(
            settings.twilio_account_sid,
            settings.twilio_auth_token.get_secret_value(),
            settings.twilio_whatsapp_number,
            settings.public_app_url,
            timeout=settings.notification_timeout_seconds,
        )
        logger.info("WhatsApp notifications enabled")
    else:
        _dispatcher = LogOnlyNotificationDispatcher(settings.public_app_url)
        logger.info("Notifications are log-only")
    return _dispatcher


def get_notification_dispatcher() -> LogOnlyNotificationDispatcher | WhatsAppNotificationDispatcher:
    return _dispatcher if _dispatcher is not None else init_notification_dispatcher()


def set_notification_dispatcher(dispatcher) -> None:
    """Replace the process-wide dispatcher (tests inject a mock)."""
    global _dispatcher
    _dispatcher = dispatcher


async def close_notification_dispatcher() -> None:
    global _dispatcher
    if _dispatcher is not None:
        await _dispatcher.aclose()
        _dispatcher = None


__all__ = [
    "LogOnlyNotificationDispatcher",
    "NotificationDeliveryError",
    "WhatsAppNotificationDispatcher",
    "close_notification_dispatcher",
    "get_notification_dispatcher",
    "init_notification_dispatcher",
    "set_notification_dispatcher",
]
