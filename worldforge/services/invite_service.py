# worldforge/services/invite_service.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional
from datetime import datetime, timedelta, timezone
import logging

from worldforge.errors import NotFound
from worldforge.models.enums import MemberRole
from worldforge.models.invite import WorldInvite
from worldforge.models.world import WorldMember

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class InviteService:
    """Email invitations into a world."""

    def __init__(self, db: Session):
        self.db = db

    def create_invite(
        self,
        world_id: str,
        email: str,
        role: str,
        invited_by: str,
        expires_in_days: int = 7,
    ) -> WorldInvite:
        invite = WorldInvite(
            world_id=world_id,
            email=email.strip().lower(),
            role=role,
            invited_by=invited_by,
            expires_at=_utcnow() + timedelta(days=expires_in_days),
        )
        self.db.add(invite)
        self.db.commit()
        self.db.refresh(invite)
        logger.info(f"Invite {invite.id} created for world {world_id} ({role})")
        return invite

    def list_invites(self, world_id: str) -> List[WorldInvite]:
        """Invites that are still open."""
        return (
            self.db.query(WorldInvite)
            .filter(
                WorldInvite.world_id == world_id,
                WorldInvite.accepted_at.is_(None),
                WorldInvite.revoked_at.is_(None),
            )
            .order_by(WorldInvite.created_at.desc())
            .all()
        )

    def revoke_invite(self, world_id: str, invite_id: str) -> None:
        """Revoke an open invite; the row is kept with ``revoked_at`` set."""
        invite = self.db.query(WorldInvite).filter(
            WorldInvite.id == invite_id,
            WorldInvite.world_id == world_id,
            WorldInvite.accepted_at.is_(None),
            WorldInvite.revoked_at.is_(None),
        ).first()
        if not invite:
            raise NotFound("Invite", invite_id)
        invite.revoked_at = _utcnow()
        self.db.commit()
        logger.info(f"Invite {invite_id} revoked in world {world_id}")

    def accept_invite(self, token: str, user_id: str, email: Optional[str]) -> Optional[str]:
        """
        Redeem an invite for the signed-in user.

        The invite must match the token and the user's email, and be neither
        accepted, revoked nor expired. On success the user becomes a member
        with the invited role (existing owners keep their role).

        Returns:
            The world id, or None when the invite cannot be used.
        """
        if not token or not email:
            return None

        invite = self.db.query(WorldInvite).filter(
            WorldInvite.token == token,
            func.lower(WorldInvite.email) == email.strip().lower(),
            WorldInvite.accepted_at.is_(None),
            WorldInvite.revoked_at.is_(None),
        ).first()
        if not invite or _aware(invite.expires_at) <= _utcnow():
            logger.info(f"Rejected invite token for user {user_id}")
            return None

        member = self.db.query(WorldMember).filter(
            WorldMember.world_id == invite.world_id,
            WorldMember.user_id == user_id,
        ).first()
        if member is None:
            self.db.add(WorldMember(
                world_id=invite.world_id,
                user_id=user_id,
                role=invite.role,
                invited_by=invite.invited_by,
            ))
        elif member.role != MemberRole.OWNER.value:
            member.role = invite.role

        invite.accepted_at = _utcnow()
        self.db.commit()
        logger.info(f"User {user_id} joined world {invite.world_id} as {invite.role}")
        return invite.world_id
