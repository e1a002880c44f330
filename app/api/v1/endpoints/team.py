"""Team management API (owner and partners)."""

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import UnlockedSession, get_team_service
from app.application.services.team_service import TeamService
from app.core.limiter import limit_writes
from app.schemas.auth import AccountResponse
from app.schemas.team import MemberPhoneRequest, MemberStatusRequest

router = APIRouter()


@router.get("", response_model=list[AccountResponse])
async def list_members(session: UnlockedSession, team: TeamService = Depends(get_team_service)):
    return [AccountResponse.from_entity(m) for m in await team.list_members(session.account_id)]


@router.patch("/{member_id}/status", response_model=AccountResponse)
@limit_writes
async def set_member_status(
    request: Request,
    member_id: str,
    body: MemberStatusRequest,
    session: UnlockedSession,
    team: TeamService = Depends(get_team_service),
):
    """Enable or disable a member's access."""
    member = await team.set_member_status(session.account_id, member_id, body.status)
    return AccountResponse.from_entity(member)


@router.post("/{member_id}/phone", response_model=AccountResponse)
@limit_writes
async def change_member_phone(
    request: Request,
    member_id: str,
    body: MemberPhoneRequest,
    session: UnlockedSession,
    team: TeamService = Depends(get_team_service),
):
    """Owner reassigns a member's phone number."""
    member = await team.change_member_phone(
        session.account_id, member_id, body.new_phone_number.strip()
    )
    return AccountResponse.from_entity(member)
