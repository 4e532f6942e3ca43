from typing import List, Literal, Optional
from datetime import datetime
from pydantic import EmailStr, Field
from worldforge.schemas.base import ApiModel


class InviteCreate(ApiModel):
    email: EmailStr
    # Ownership is never granted by invite
    role: Literal["admin", "editor", "viewer"] = "viewer"
    expires_in_days: Optional[int] = Field(None, ge=1, le=30)


class InviteAccept(ApiModel):
    token: str = Field(..., min_length=1)


class InviteResponse(ApiModel):
    id: str
    world_id: str
    email: str
    role: str
    invited_by: str
    expires_at: datetime
    accepted_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class InviteCreated(InviteResponse):
    token: str


class InviteList(ApiModel):
    invites: List[InviteResponse]


class InviteEnvelope(ApiModel):
    invite: InviteCreated


class InviteAcceptResult(ApiModel):
    ok: bool
    accepted: bool
    world_id: Optional[str] = None
