# worldforge/api/v1/members.py
from fastapi import APIRouter, Depends, Query

from worldforge.api.dependencies import WorldAccess, get_service, require_world_role
from worldforge.models.enums import MemberRole
from worldforge.models.world import WorldMember
from worldforge.schemas import MemberEnvelope, MemberList, MemberResponse, MemberRoleUpdate, OkResponse
from worldforge.services.activity_service import ActivityService
from worldforge.services.member_service import MemberService

router = APIRouter()


def to_member_response(member: WorldMember) -> MemberResponse:
    profile = member.profile
    return MemberResponse(
        id=member.id,
        world_id=member.world_id,
        user_id=member.user_id,
        role=MemberRole(member.role),
        joined_at=member.joined_at,
        invited_by=member.invited_by,
        name=profile.display_name if profile else None,
        email=profile.email if profile else None,
        avatar=profile.avatar_url if profile else None,
    )


@router.get("/{world_id}/members", response_model=MemberList)
async def list_members(
    access: WorldAccess = Depends(require_world_role(MemberRole.VIEWER)),
    member_service: MemberService = Depends(get_service(MemberService)),
):
    members = member_service.list_members(access.world.id)
    return {"members": [to_member_response(member) for member in members]}


@router.put("/{world_id}/members", response_model=MemberEnvelope)
async def update_member_role(
    payload: MemberRoleUpdate,
    access: WorldAccess = Depends(require_world_role(MemberRole.ADMIN)),
    member_service: MemberService = Depends(get_service(MemberService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    """
    Change a member's role.

    Admins manage editors, viewers and other admins; only owners can touch
    owners or hand out ownership, and the last owner always stays one.
    """
    member = member_service.update_member_role(
        access.world.id, str(payload.member_id), payload.role, access.user.id
    )
    activity.member_role_updated(access.user.id, access.world.id, member.user_id, payload.role.value)
    return {"member": to_member_response(member)}


@router.delete("/{world_id}/members", response_model=OkResponse)
async def remove_member(
    member_id: str = Query(..., alias="memberId"),
    access: WorldAccess = Depends(require_world_role(MemberRole.VIEWER)),
    member_service: MemberService = Depends(get_service(MemberService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    """Remove a member, or leave the world when ``memberId`` is the caller."""
    removed_user_id = member_service.remove_member(access.world.id, member_id, access.user.id)
    activity.member_removed(access.user.id, access.world.id, removed_user_id)
    return {"ok": True}
