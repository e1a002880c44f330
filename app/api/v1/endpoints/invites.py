"""Invite API: public code validation and owner invite management."""

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import UnlockedSession, get_invite_service
from app.application.services.invite_service import InviteService
from app.core.limiter import check_code_validation_rate, limit_code_validation, limit_writes
from app.core.messages import translate
from app.schemas.base import SuccessResponse
from app.schemas.invite import (
    CodeRequest,
    InviteCreateRequest,
    InviteResponse,
    InviteSendRequest,
    InviteValidationResponse,
)

router = APIRouter()


@router.post(
    "/validate-invite",
    response_model=InviteValidationResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(check_code_validation_rate)],
)
@limit_code_validation
async def validate_invite(
    request: Request,
    body: CodeRequest,
    invites: InviteService = Depends(get_invite_service),
):
    """Public check used by the registration page. Never says why a code is unusable."""
    result = await invites.validate_invite(body.code)
    if not result.valid:
        return InviteValidationResponse(valid=False, error=translate("invalid_code"))
    return InviteValidationResponse(valid=True, role=result.role)


@router.get("/invites", response_model=list[InviteResponse])
async def list_invites(session: UnlockedSession, invites: InviteService = Depends(get_invite_service)):
    """Pending invites, newest first (owner only)."""
    return [InviteResponse.from_entity(i) for i in await invites.list_invites(session.account_id)]


@router.post("/invites", response_model=InviteResponse, status_code=201)
@limit_writes
async def create_invite(
    request: Request,
    body: InviteCreateRequest,
    session: UnlockedSession,
    invites: InviteService = Depends(get_invite_service),
):
    invite = await invites.create_invite(body.role, session.account_id)
    return InviteResponse.from_entity(invite)


@router.delete("/invites/{invite_id}", status_code=204)
@limit_writes
async def revoke_invite(
    request: Request,
    invite_id: str,
    session: UnlockedSession,
    invites: InviteService = Depends(get_invite_service),
) -> Response:
    await invites.revoke_invite(invite_id, session.account_id)
    return Response(status_code=204)


@router.post("/invites/{invite_id}/regenerate", response_model=InviteResponse)
@limit_writes
async def regenerate_invite(
    request: Request,
    invite_id: str,
    session: UnlockedSession,
    invites: InviteService = Depends(get_invite_service),
):
    """Replace an unused invite with a fresh code of the same role."""
    invite = await invites.regenerate_invite(invite_id, session.account_id)
    return InviteResponse.from_entity(invite)


@router.post("/invites/{invite_id}/send", response_model=SuccessResponse)
@limit_writes
async def send_invite(
    request: Request,
    invite_id: str,
    body: InviteSendRequest,
    session: UnlockedSession,
    invites: InviteService = Depends(get_invite_service),
):
    """Send the invite over WhatsApp. success=false when delivery failed."""
    sent = await invites.send_invite(invite_id, session.account_id, body.phone_number.strip())
    return SuccessResponse(success=sent)
