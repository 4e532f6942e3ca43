# worldforge/services/template_service.py
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional, Tuple
import copy
import logging

from worldforge.errors import AuthorizationDenied, NotFound, ValidationFailed
from worldforge.models.enums import FolderKind
from worldforge.models.folder import Folder, CORE_FOLDER_NAME
from worldforge.models.template import Template

logger = logging.getLogger(__name__)


class TemplateService:
    """Service for world templates and the global system templates."""

    def __init__(self, db: Session):
        self.db = db

    def get_template(self, template_id: str) -> Optional[Template]:
        return self.db.query(Template).filter(Template.id == template_id).first()

    def get_world_templates(self, world_id: str) -> List[Template]:
        """
        Templates usable in a world: the world's own templates plus every
        system template the world has not overridden by name.
        """
        own = (
            self.db.query(Template)
            .filter(Template.world_id == world_id)
            .order_by(Template.name)
            .all()
        )
        own_names = {template.name for template in own}
        system = [template for template in self.get_system_templates() if template.name not in own_names]
        return own + system

    def get_system_templates(self) -> List[Template]:
        return (
            self.db.query(Template)
            .filter(Template.is_system.is_(True), Template.world_id.is_(None))
            .order_by(Template.name)
            .all()
        )

    def create_template(self, world_id: str, data: Dict[str, Any]) -> Template:
        folder_id = data.get("folder_id")
        if folder_id:
            self._check_folder(world_id, folder_id)

        template = Template(
            world_id=world_id,
            folder_id=folder_id,
            name=data["name"],
            description=data.get("description"),
            category=data.get("category"),
            icon=data.get("icon"),
            fields=data.get("fields") or [],
            is_system=False,
        )
        self.db.add(template)
        self.db.commit()
        self.db.refresh(template)
        return template

    def update_template(self, template: Template, data: Dict[str, Any]) -> Template:
        """
        Apply an update. System templates are never modified in place: the
        update lands on a world-scoped override with the same name instead.
        """
        if template.is_system:
            return self._override_system_template(template, data)

        if data.get("folder_id"):
            self._check_folder(template.world_id, data["folder_id"])

        for key in ("name", "description", "category", "icon", "folder_id", "fields"):
            if key in data:
                setattr(template, key, data[key])

        self.db.commit()
        self.db.refresh(template)
        return template

    def delete_template(self, template: Template) -> None:
        if template.is_system:
            raise AuthorizationDenied("System templates cannot be deleted")
        self.db.delete(template)
        self.db.commit()

    def _override_system_template(self, system: Template, data: Dict[str, Any]) -> Template:
        world_id = data.get("world_id")
        if not world_id:
            raise ValidationFailed.for_field("worldId", "worldId is required to customize a system template")

        core = self.get_or_create_core_folder(world_id)
        override = (
            self.db.query(Template)
            .filter(Template.world_id == world_id, Template.name == system.name)
            .first()
        )
        if not override:
            override = Template(
                world_id=world_id,
                folder_id=core.id,
                name=system.name,
                description=system.description,
                category=system.category,
                icon=system.icon,
                fields=copy.deepcopy(system.fields or []),
                is_system=False,
            )
            self.db.add(override)

        for key in ("description", "category", "icon", "fields"):
            if key in data:
                setattr(override, key, data[key])

        self.db.commit()
        self.db.refresh(override)
        logger.info(f"Saved override of system template {system.name} in world {world_id}")
        return override

    def _check_folder(self, world_id: str, folder_id: str) -> Folder:
        folder = self.db.query(Folder).filter(Folder.id == folder_id, Folder.world_id == world_id).first()
        if not folder:
            raise NotFound("Folder", folder_id)
        if folder.kind != FolderKind.TEMPLATES.value:
            raise ValidationFailed.for_field("folderId", "Templates can only be placed in template folders")
        return folder

    # Core folder and seeding

    def get_core_folder(self, world_id: str) -> Optional[Folder]:
        return self.db.query(Folder).filter(
            Folder.world_id == world_id,
            Folder.kind == FolderKind.TEMPLATES.value,
            Folder.name == CORE_FOLDER_NAME,
        ).first()

    def get_or_create_core_folder(self, world_id: str) -> Folder:
        folder = self.get_core_folder(world_id)
        if folder:
            return folder

        folder = Folder(
            world_id=world_id,
            name=CORE_FOLDER_NAME,
            kind=FolderKind.TEMPLATES.value,
            description="Core templates available to every world",
        )
        self.db.add(folder)
        self.db.commit()
        self.db.refresh(folder)
        return folder

    def seed_world_templates(self, world_id: str, core_folder: Folder) -> int:
        """
        Copy every system template into the world's Core folder.

        Copies are matched by name first, so running this again only fills in
        what is missing.

        Returns:
            Number of templates inserted.
        """
        existing = {
            name for (name,) in self.db.query(Template.name).filter(
                Template.world_id == world_id,
                Template.folder_id == core_folder.id,
            )
        }

        inserted = 0
        for system in self.get_system_templates():
            if system.name in existing:
                continue
            self.db.add(Template(
                world_id=world_id,
                folder_id=core_folder.id,
                name=system.name,
                description=system.description,
                category=system.category,
                icon=system.icon,
                fields=copy.deepcopy(system.fields or []),
                is_system=False,
            ))
            existing.add(system.name)
            inserted += 1

        self.db.commit()
        logger.info(f"Seeded {inserted} core templates into world {world_id}")
        return inserted

    def upsert_system_templates(self, definitions: List[Dict[str, Any]]) -> List[Tuple[str, str]]:
        """
        Create or refresh global system templates, matched by name.

        Returns:
            List of (action, name) pairs, action being ``created`` or ``updated``.
        """
        results: List[Tuple[str, str]] = []
        for definition in definitions:
            template = self.db.query(Template).filter(
                Template.name == definition["name"],
                Template.is_system.is_(True),
                Template.world_id.is_(None),
            ).first()

            if template:
                action = "updated"
            else:
                template = Template(name=definition["name"], world_id=None, is_system=True)
                self.db.add(template)
                action = "created"

            template.folder_id = None
            template.description = definition.get("description")
            template.category = definition.get("category")
            template.icon = definition.get("icon")
            template.fields = copy.deepcopy(definition.get("fields", []))
            results.append((action, definition["name"]))

        self.db.commit()
        return results
