# worldforge/services/permission_service.py
from sqlalchemy.orm import Session
from typing import Optional, Tuple
import logging

from worldforge.errors import AuthorizationDenied, NotFound
from worldforge.models.enums import MemberRole
from worldforge.models.world import World, WorldMember

logger = logging.getLogger(__name__)


class PermissionService:
    """Role checks for world-scoped actions."""

    def __init__(self, db: Session):
        self.db = db

    def get_membership(self, world_id: str, user_id: str) -> Optional[WorldMember]:
        return self.db.query(WorldMember).filter(
            WorldMember.world_id == world_id,
            WorldMember.user_id == user_id,
        ).first()

    def get_role(self, world_id: str, user_id: str) -> Optional[MemberRole]:
        membership = self.get_membership(world_id, user_id)
        if not membership:
            return None
        return MemberRole(membership.role)

    def check(self, world_id: str, user_id: str, required: MemberRole) -> bool:
        """Allow iff the user holds a membership whose rank is at least ``required``."""
        role = self.get_role(world_id, user_id)
        return role is not None and role.satisfies(required)

    def require_role(
        self,
        world_id: str,
        user_id: str,
        required: MemberRole,
        allow_public_read: bool = False,
    ) -> Tuple[World, Optional[MemberRole]]:
        """
        Load the world and make sure the user may act on it.

        Args:
            world_id: World being acted on.
            user_id: Acting user.
            required: Minimum role for the action.
            allow_public_read: Let non-members through when the world is public
                and the action only needs viewer rights.

        Returns:
            Tuple of (world, caller role or None for public readers).
        """
        world = self.db.query(World).filter(World.id == world_id).first()
        if not world:
            raise NotFound("World", world_id)

        role = self.get_role(world_id, user_id)
        if role is not None and role.satisfies(required):
            return world, role

        if allow_public_read and world.is_public and required == MemberRole.VIEWER:
            return world, role

        logger.info(f"Denied {user_id} on world {world_id}: has {role}, needs {required.value}")
        raise AuthorizationDenied(
            f"This action requires the {required.value} role",
            {"required": required.value, "actual": role.value if role else None},
        )

    def count_owners(self, world_id: str) -> int:
        return self.db.query(WorldMember).filter(
            WorldMember.world_id == world_id,
            WorldMember.role == MemberRole.OWNER.value,
        ).count()

    @staticmethod
    def can_change_member(
        actor_role: Optional[MemberRole],
        target_role: MemberRole,
        new_role: Optional[MemberRole],
        owner_count: int,
    ) -> Tuple[bool, Optional[str]]:
        """
        Decide whether ``actor_role`` may move a member from ``target_role`` to
        ``new_role``. A ``new_role`` of None means removal.

        Returns:
            Tuple of (allowed, reason when denied).
        """
        if actor_role is None or not actor_role.satisfies(MemberRole.ADMIN):
            return False, "Only admins and owners can manage members"

        demoting_owner = target_role == MemberRole.OWNER and new_role != MemberRole.OWNER
        if demoting_owner and owner_count <= 1:
            return False, "The world's sole owner cannot be removed or demoted"

        if actor_role != MemberRole.OWNER:
            if target_role == MemberRole.OWNER:
                return False, "Only owners can modify an owner"
            if new_role == MemberRole.OWNER:
                return False, "Only owners can grant the owner role"

        return True, None
