"""Request timeout middleware.

Bounds every request so a slow record store or Twilio call cannot hold a
worker indefinitely. On timeout the client gets 504 with the localized
"try again" message, unless the response had already started. Raw ASGI.
"""

import asyncio
import logging
from typing import Callable

from app.core.messages import translate
from app.middleware._asgi import send_json_error

logger = logging.getLogger(__name__)


def TimeoutMiddleware(app: Callable, timeout_seconds: int) -> Callable:
    """Cancel the request after timeout_seconds."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        started = False

        async def tracking_send(message: dict) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await asyncio.wait_for(app(scope, receive, tracking_send), timeout=float(timeout_seconds))
        except asyncio.TimeoutError:
            logger.warning(
                "Request timed out after %ss: %s %s",
                timeout_seconds,
                scope.get("method", ""),
                scope.get("path", ""),
            )
            if not started:
                await send_json_error(
                    send,
                    504,
                    "GATEWAY_TIMEOUT",
                    translate("try_again"),
                    {"timeout_seconds": timeout_seconds},
                )

    return asgi_app
