from typing import List, Optional
from uuid import UUID
from datetime import datetime
from worldforge.schemas.base import ApiModel
from worldforge.models.enums import MemberRole


class MemberRoleUpdate(ApiModel):
    member_id: UUID
    role: MemberRole


class MemberResponse(ApiModel):
    id: str
    world_id: str
    user_id: str
    role: MemberRole
    joined_at: Optional[datetime] = None
    invited_by: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None


class MemberList(ApiModel):
    members: List[MemberResponse]


class MemberEnvelope(ApiModel):
    member: MemberResponse
