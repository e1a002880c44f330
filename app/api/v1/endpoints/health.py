"""Health check endpoints for liveness and readiness probes."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.v1.dependencies import get_store
from app.infrastructure.store import IRecordStore, RecordStoreError
from app.infrastructure.store.collections import COLLECTION_APP_CONFIG
from app.schemas.health import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Record store unreachable", "model": ReadinessResponse}},
)
async def readiness_check(store: IRecordStore = Depends(get_store)) -> ReadinessResponse | JSONResponse:
    """Return 200 when the record store answers; 503 otherwise."""
    try:
        await store.first(COLLECTION_APP_CONFIG)
    except RecordStoreError as e:
        logger.warning("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content=ReadinessResponse(status="not_ready", store="unreachable").model_dump(),
        )
    return ReadinessResponse()
