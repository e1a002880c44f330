"""Setup status endpoint: drives the first-run owner bootstrap screen."""

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_setup_service
from app.application.services.setup_service import SetupService
from app.schemas.setup import SetupStatusResponse

router = APIRouter()


@router.get("/setup-status", response_model=SetupStatusResponse)
async def setup_status(setup: SetupService = Depends(get_setup_service)):
    status = await setup.get_status()
    return SetupStatusResponse(setup_complete=status.setup_complete, owner_exists=status.owner_exists)
