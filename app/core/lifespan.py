"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (record store, session-state
store, notification dispatcher, tracing).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.notifications import (
    close_notification_dispatcher,
    init_notification_dispatcher,
)
from app.infrastructure.session import close_session_store, init_session_store
from app.infrastructure.store import close_record_store, init_record_store
from app.shared.telemetry.telemetry import init_tracing, shutdown_tracing

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: record store, session-state store, notification
    dispatcher, tracing. Shutdown runs in reverse.
    """
    settings = get_settings()

    # ---- Startup ----
    init_record_store()
    await init_session_store()
    init_notification_dispatcher()
    logger.info(
        "Backends ready: store=%s session=%s notifications=%s",
        settings.record_store_backend,
        settings.session_store_backend,
        settings.notification_backend,
    )
    init_tracing(app, settings)

    yield

    # ---- Shutdown ----
    shutdown_tracing()
    await close_notification_dispatcher()
    await close_session_store()
    await close_record_store()
