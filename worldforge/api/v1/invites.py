# worldforge/api/v1/invites.py
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from worldforge.api.auth import CurrentUser, get_current_user
from worldforge.api.dependencies import WorldAccess, get_app_settings, get_service, require_world_role
from worldforge.config import Settings
from worldforge.models.enums import MemberRole
from worldforge.schemas import (
    InviteAccept, InviteAcceptResult, InviteCreate, InviteEnvelope, InviteList, OkResponse,
)
from worldforge.services.activity_service import ActivityService
from worldforge.services.invite_service import InviteService
from worldforge.services.rate_limit_service import RateLimitService

# Mounted under /worlds
world_router = APIRouter()
# Mounted under /invites
router = APIRouter()


@world_router.get("/{world_id}/invites", response_model=InviteList)
async def list_invites(
    access: WorldAccess = Depends(require_world_role(MemberRole.ADMIN)),
    invite_service: InviteService = Depends(get_service(InviteService)),
):
    """Open invites of a world."""
    return {"invites": invite_service.list_invites(access.world.id)}


@world_router.post("/{world_id}/invites", response_model=InviteEnvelope, status_code=status.HTTP_201_CREATED)
async def create_invite(
    payload: InviteCreate,
    access: WorldAccess = Depends(require_world_role(MemberRole.ADMIN)),
    invite_service: InviteService = Depends(get_service(InviteService)),
    rate_limits: RateLimitService = Depends(get_service(RateLimitService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
    settings: Settings = Depends(get_app_settings),
):
    """Invite someone by email. The token in the response goes into the invite link."""
    rate_limits.enforce("invites.create", access.user.id)

    invite = invite_service.create_invite(
        access.world.id,
        payload.email,
        payload.role,
        invited_by=access.user.id,
        expires_in_days=payload.expires_in_days or settings.INVITE_TTL_DAYS,
    )
    activity.member_invited(access.user.id, access.world.id, invite.id, invite.email, invite.role)
    return {"invite": invite}


@world_router.delete("/{world_id}/invites/{invite_id}", response_model=OkResponse)
async def revoke_invite(
    invite_id: str,
    access: WorldAccess = Depends(require_world_role(MemberRole.ADMIN)),
    invite_service: InviteService = Depends(get_service(InviteService)),
):
    invite_service.revoke_invite(access.world.id, invite_id)
    return {"ok": True}


@router.post("/accept", response_model=InviteAcceptResult)
async def accept_invite(
    payload: InviteAccept,
    current_user: CurrentUser = Depends(get_current_user),
    invite_service: InviteService = Depends(get_service(InviteService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    """
    Redeem an invite token for the signed-in user.

    Invalid, expired, revoked, already used, or addressed to another email:
    400 with ``{"ok": false, "accepted": false}`` and no membership change.
    """
    world_id = invite_service.accept_invite(payload.token, current_user.id, current_user.email)
    if not world_id:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"ok": False, "accepted": False})

    activity.invite_accepted(current_user.id, world_id)
    return {"ok": True, "accepted": True, "world_id": world_id}
