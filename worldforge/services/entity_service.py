# worldforge/services/entity_service.py
from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import Any, Dict, List, Optional
import logging

from worldforge.errors import NotFound, ValidationFailed
from worldforge.models.entity import Entity
from worldforge.models.enums import FieldType, FolderKind
from worldforge.models.folder import Folder
from worldforge.models.template import Template

logger = logging.getLogger(__name__)

_TEXT_TYPES = {FieldType.SHORT_TEXT.value, FieldType.LONG_TEXT.value, FieldType.RICH_TEXT.value, FieldType.IMAGE.value}


def _is_blank(value: Any) -> bool:
    return value is None or value == "" or value == []


def validate_entity_fields(
    template_fields: List[Dict[str, Any]],
    values: Dict[str, Any],
    allow_unknown: bool = False,
) -> List[Dict[str, str]]:
    """
    Check entity field values against a template's field definitions.

    With ``allow_unknown`` set, values for ids the template no longer
    defines are kept as they are instead of being reported.

    Returns:
        A list of ``{path, message}`` issues, empty when the values are valid.
    """
    issues: List[Dict[str, str]] = []
    definitions = {field["id"]: field for field in template_fields}

    for field_id in values:
        if not allow_unknown and field_id not in definitions:
            issues.append({"path": f"fields.{field_id}", "message": "Unknown field"})

    for field_id, field in definitions.items():
        path = f"fields.{field_id}"
        value = values.get(field_id)
        if _is_blank(value):
            if field.get("required"):
                issues.append({"path": path, "message": f"{field['name']} is required"})
            continue

        field_type = field.get("type")
        options = field.get("options") or []

        if field_type == FieldType.NUMBER.value:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                issues.append({"path": path, "message": f"{field['name']} must be a number"})
        elif field_type == FieldType.SELECT.value:
            if value not in options:
                issues.append({"path": path, "message": f"{field['name']} must be one of the template options"})
        elif field_type == FieldType.MULTI_SELECT.value:
            if not isinstance(value, list) or any(item not in options for item in value):
                issues.append({"path": path, "message": f"{field['name']} must be a list of template options"})
        elif field_type == FieldType.REFERENCE.value:
            ids = value if isinstance(value, list) else [value]
            if not all(isinstance(item, str) for item in ids):
                issues.append({"path": path, "message": f"{field['name']} must reference entity ids"})
        elif field_type in _TEXT_TYPES and not isinstance(value, str):
            issues.append({"path": path, "message": f"{field['name']} must be text"})

    return issues


class EntityService:
    """Service for entity operations inside a world."""

    def __init__(self, db: Session):
        self.db = db

    def get_entity(self, entity_id: str) -> Optional[Entity]:
        return self.db.query(Entity).filter(Entity.id == entity_id).first()

    def get_world_entities(
        self,
        world_id: str,
        folder_id: Optional[str] = None,
        template_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Entity]:
        query = self.db.query(Entity).filter(Entity.world_id == world_id)
        if folder_id:
            query = query.filter(Entity.folder_id == folder_id)
        if template_id:
            query = query.filter(Entity.template_id == template_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Entity.name.ilike(pattern), Entity.summary.ilike(pattern)))
        return query.order_by(Entity.updated_at.desc()).all()

    def create_entity(self, world_id: str, data: Dict[str, Any]) -> Entity:
        template = self._resolve_template(world_id, data.get("template_id"))
        if data.get("folder_id"):
            self._check_folder(world_id, data["folder_id"])

        fields = data.get("fields") or {}
        if template is not None:
            self._validate_fields(template, fields)

        entity = Entity(
            world_id=world_id,
            template_id=template.id if template else None,
            folder_id=data.get("folder_id"),
            name=data["name"],
            summary=data.get("summary"),
            fields=fields,
            tags=data.get("tags") or [],
            image_url=data.get("image_url"),
        )
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update_entity(self, entity: Entity, data: Dict[str, Any]) -> Entity:
        if "template_id" in data:
            template = self._resolve_template(entity.world_id, data["template_id"])
        else:
            template = self._resolve_template(entity.world_id, entity.template_id)
        if data.get("folder_id"):
            self._check_folder(entity.world_id, data["folder_id"])

        submitted = data.get("fields") is not None
        fields = data["fields"] if submitted else (entity.fields or {})
        if template is not None:
            # Stored values for fields since removed from the template do not block other edits
            self._validate_fields(template, fields, allow_unknown=not submitted)

        for key in ("name", "summary", "folder_id", "tags", "image_url"):
            if key in data:
                setattr(entity, key, data[key])
        entity.template_id = template.id if template else None
        entity.fields = dict(fields)

        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete_entity(self, entity_id: str) -> None:
        """
        Delete an entity and the relationships touching it.

        Raises:
            NotFound: When no entity has this id.
        """
        entity = self.get_entity(entity_id)
        if not entity:
            raise NotFound("Entity", entity_id)
        world_id = entity.world_id
        self.db.delete(entity)
        self.db.commit()
        logger.info(f"Entity {entity_id} deleted from world {world_id}")

    def _resolve_template(self, world_id: str, template_id: Optional[str]) -> Optional[Template]:
        if not template_id:
            return None
        template = self.db.query(Template).filter(
            Template.id == template_id,
            or_(Template.world_id == world_id, Template.is_system.is_(True)),
        ).first()
        if not template:
            raise NotFound("Template", template_id)
        return template

    def _check_folder(self, world_id: str, folder_id: str) -> None:
        folder = self.db.query(Folder).filter(Folder.id == folder_id, Folder.world_id == world_id).first()
        if not folder:
            raise NotFound("Folder", folder_id)
        if folder.kind != FolderKind.ENTITIES.value:
            raise ValidationFailed.for_field("folderId", "Entities can only be placed in entity folders")

    def _validate_fields(self, template: Template, fields: Dict[str, Any], allow_unknown: bool = False) -> None:
        issues = validate_entity_fields(template.fields or [], fields, allow_unknown=allow_unknown)
        if issues:
            raise ValidationFailed("Invalid entity fields", issues=issues)
