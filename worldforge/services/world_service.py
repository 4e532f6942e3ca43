# worldforge/services/world_service.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional, Dict, Any, Tuple
from datetime import datetime, timezone
import logging

from worldforge.errors import ValidationFailed
from worldforge.models.entity import Entity
from worldforge.models.enums import MemberRole
from worldforge.models.world import World, WorldMember
from worldforge.services.saga import Saga, SagaResult, SagaStep
from worldforge.services.template_service import TemplateService

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "description", "is_public", "is_archived")


class WorldService:
    """Service for handling world operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_world(
        self,
        owner_id: str,
        name: str,
        description: Optional[str] = None,
        is_public: bool = False,
        settings: Optional[Dict[str, Any]] = None,
    ) -> Tuple[World, SagaResult]:
        """
        Create a world and provision it.

        Creating the row and the owner membership must succeed. Creating the
        Core folder and copying the system templates into it are best effort:
        failures there leave the world usable and are reported in the result.

        Args:
            owner_id: ID of the user creating the world (owner).
            name: Name of the world.
            description: Description of the world.
            is_public: Whether non-members may read the world.
            settings: Extended creation fields.

        Returns:
            Tuple of (world, saga result).
        """
        templates = TemplateService(self.db)

        def create_row(ctx):
            world = World(
                name=name,
                description=description,
                is_public=bool(is_public),
                settings=settings or None,
                owner_id=owner_id,
            )
            self.db.add(world)
            self.db.commit()
            self.db.refresh(world)
            return world

        def delete_row(ctx):
            self.db.delete(ctx["world"])
            self.db.commit()

        def add_owner(ctx):
            member = WorldMember(world_id=ctx["world"].id, user_id=owner_id, role=MemberRole.OWNER.value)
            self.db.add(member)
            self.db.commit()
            return member

        def create_core_folder(ctx):
            return templates.get_or_create_core_folder(ctx["world"].id)

        def seed_templates(ctx):
            core = ctx.get("core_folder")
            if core is None:
                raise RuntimeError("Core folder is missing")
            return templates.seed_world_templates(ctx["world"].id, core)

        saga = Saga(
            "create_world",
            [
                SagaStep("world", create_row, fatal=True, compensate=delete_row),
                SagaStep("owner_member", add_owner, fatal=True),
                SagaStep("core_folder", create_core_folder, fatal=False),
                SagaStep("seed_templates", seed_templates, fatal=False),
            ],
            on_step_error=lambda step, e: self.db.rollback(),
        )
        result = saga.run()
        world = result.context["world"]
        if result.failed:
            logger.warning(f"World {world.id} created degraded, failed steps: {result.failed}")
        else:
            logger.info(f"World {world.id} created by {owner_id}")
        return world, result

    def reseed_templates(self, world_id: str) -> Tuple[int, str]:
        """
        Repair a world's Core folder. Safe to call any number of times.

        Returns:
            Tuple of (templates inserted, core folder id).
        """
        templates = TemplateService(self.db)
        core = templates.get_or_create_core_folder(world_id)
        return templates.seed_world_templates(world_id, core), core.id

    def get_world(self, world_id: str) -> Optional[World]:
        """Get a world by its ID."""
        return self.db.query(World).filter(World.id == world_id).first()

    def get_user_worlds(self, user_id: str, include_archived: bool = False) -> List[Tuple[World, MemberRole]]:
        """Worlds the user is a member of, newest first, with the user's role."""
        query = (
            self.db.query(World, WorldMember.role)
            .join(WorldMember, WorldMember.world_id == World.id)
            .filter(WorldMember.user_id == user_id)
        )
        if not include_archived:
            query = query.filter(World.is_archived.is_(False))

        rows = query.order_by(World.updated_at.desc()).all()
        return [(world, MemberRole(role)) for world, role in rows]

    def count_entities(self, world_ids: List[str]) -> Dict[str, int]:
        if not world_ids:
            return {}
        rows = (
            self.db.query(Entity.world_id, func.count(Entity.id))
            .filter(Entity.world_id.in_(world_ids))
            .group_by(Entity.world_id)
            .all()
        )
        return {world_id: count for world_id, count in rows}

    def update_world(self, world: World, update_data: Dict[str, Any]) -> World:
        """
        Update a world's properties.

        Raises:
            ValidationFailed: When no updatable field is present.
        """
        changes = {key: value for key, value in update_data.items() if key in UPDATABLE_FIELDS}
        if not changes:
            raise ValidationFailed("No valid fields provided")

        if "is_archived" in changes:
            self._set_archived(world, changes.pop("is_archived"))

        for key, value in changes.items():
            setattr(world, key, value)

        self.db.commit()
        self.db.refresh(world)
        return world

    def archive_world(self, world: World, archived: bool = True) -> World:
        self._set_archived(world, archived)
        self.db.commit()
        self.db.refresh(world)
        return world

    def _set_archived(self, world: World, archived: bool) -> None:
        world.is_archived = bool(archived)
        world.archived_at = datetime.now(timezone.utc) if archived else None

    def delete_world(self, world: World) -> None:
        """Delete a world; child rows go with it."""
        self.db.delete(world)
        self.db.commit()
