"""Fire-and-forget notification dispatch.

Notifications never roll back the state change that triggered them:
failures are logged and swallowed here and nowhere else.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable

logger = logging.getLogger(__name__)


async def dispatch_safely(operation: str, send: Awaitable[None]) -> bool:
    """Await send; log and swallow any failure. Returns True when sent."""
    try:
        await send
    except Exception:
        logger.warning("Notification %s failed; state change kept", operation, exc_info=True)
        return False
    return True
