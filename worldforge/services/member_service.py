# worldforge/services/member_service.py
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
import logging

from worldforge.errors import AuthorizationDenied, NotFound
from worldforge.models.enums import MemberRole
from worldforge.models.world import World, WorldMember
from worldforge.services.permission_service import PermissionService

logger = logging.getLogger(__name__)


class MemberService:
    """Membership listing and management for a world."""

    def __init__(self, db: Session):
        self.db = db
        self.permissions = PermissionService(db)

    def list_members(self, world_id: str) -> List[WorldMember]:
        return (
            self.db.query(WorldMember)
            .options(joinedload(WorldMember.profile))
            .filter(WorldMember.world_id == world_id)
            .order_by(WorldMember.joined_at)
            .all()
        )

    def get_member(self, world_id: str, member_id: str) -> WorldMember:
        """
        Look up a member by membership id, falling back to user id so either
        identifier can be used by callers.
        """
        member = self.db.query(WorldMember).filter(
            WorldMember.world_id == world_id,
            (WorldMember.id == member_id) | (WorldMember.user_id == member_id),
        ).first()
        if not member:
            raise NotFound("Member", member_id)
        return member

    def update_member_role(self, world_id: str, member_id: str, new_role: MemberRole, actor_id: str) -> WorldMember:
        member = self.get_member(world_id, member_id)
        target_role = MemberRole(member.role)
        self._authorize(world_id, actor_id, target_role, new_role)

        member.role = new_role.value
        if target_role == MemberRole.OWNER and new_role != MemberRole.OWNER:
            self._hand_over_ownership(world_id, member.user_id)

        self.db.commit()
        self.db.refresh(member)
        logger.info(f"Member {member.user_id} in world {world_id} changed {target_role.value} -> {new_role.value}")
        return member

    def remove_member(self, world_id: str, member_id: str, actor_id: str) -> str:
        """
        Remove a member. Anyone may leave a world themselves, except its sole
        owner; removing someone else needs admin rights.

        Returns:
            The removed user's id.
        """
        member = self.get_member(world_id, member_id)
        target_role = MemberRole(member.role)

        if member.user_id == actor_id:
            if target_role == MemberRole.OWNER and self.permissions.count_owners(world_id) <= 1:
                raise AuthorizationDenied("The world's sole owner cannot be removed or demoted")
        else:
            self._authorize(world_id, actor_id, target_role, None)

        if target_role == MemberRole.OWNER:
            self._hand_over_ownership(world_id, member.user_id)

        user_id = member.user_id
        self.db.delete(member)
        self.db.commit()
        logger.info(f"Member {user_id} removed from world {world_id} by {actor_id}")
        return user_id

    def _authorize(
        self,
        world_id: str,
        actor_id: str,
        target_role: MemberRole,
        new_role: Optional[MemberRole],
    ) -> None:
        actor_role = self.permissions.get_role(world_id, actor_id)
        allowed, reason = PermissionService.can_change_member(
            actor_role,
            target_role,
            new_role,
            self.permissions.count_owners(world_id),
        )
        if not allowed:
            raise AuthorizationDenied(reason)

    def _hand_over_ownership(self, world_id: str, leaving_user_id: str) -> None:
        # Keep worlds.owner_id pointing at a remaining owner
        world = self.db.query(World).filter(World.id == world_id).first()
        if not world or world.owner_id != leaving_user_id:
            return
        successor = self.db.query(WorldMember).filter(
            WorldMember.world_id == world_id,
            WorldMember.role == MemberRole.OWNER.value,
            WorldMember.user_id != leaving_user_id,
        ).first()
        if successor:
            world.owner_id = successor.user_id
