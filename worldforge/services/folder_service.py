# worldforge/services/folder_service.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Any, Dict, List, Optional, Tuple
import logging

from worldforge.models.entity import Entity
from worldforge.models.enums import FolderKind
from worldforge.models.folder import Folder
from worldforge.models.template import Template

logger = logging.getLogger(__name__)


class FolderService:
    """Folders that group a world's entities or templates."""

    def __init__(self, db: Session):
        self.db = db

    def get_folder(self, folder_id: str) -> Optional[Folder]:
        return self.db.query(Folder).filter(Folder.id == folder_id).first()

    def list_folders(self, world_id: str, kind: Optional[FolderKind] = None) -> List[Tuple[Folder, int]]:
        """Folders of a world, each with the number of items filed in it."""
        query = self.db.query(Folder).filter(Folder.world_id == world_id)
        if kind:
            query = query.filter(Folder.kind == kind.value)
        folders = query.order_by(Folder.name).all()

        entity_counts = dict(
            self.db.query(Entity.folder_id, func.count(Entity.id))
            .filter(Entity.world_id == world_id, Entity.folder_id.isnot(None))
            .group_by(Entity.folder_id)
            .all()
        )
        template_counts = dict(
            self.db.query(Template.folder_id, func.count(Template.id))
            .filter(Template.world_id == world_id, Template.folder_id.isnot(None))
            .group_by(Template.folder_id)
            .all()
        )
        return [
            (folder, (template_counts if folder.kind == FolderKind.TEMPLATES.value else entity_counts).get(folder.id, 0))
            for folder in folders
        ]

    def count_items(self, folder: Folder) -> int:
        model = Template if folder.kind == FolderKind.TEMPLATES.value else Entity
        return self.db.query(model).filter(model.folder_id == folder.id).count()

    def create_folder(self, world_id: str, data: Dict[str, Any]) -> Folder:
        kind = data.get("kind") or FolderKind.ENTITIES
        folder = Folder(
            world_id=world_id,
            name=data["name"],
            kind=FolderKind(kind).value,
            description=data.get("description"),
            color=data.get("color"),
            data=data.get("data"),
        )
        self.db.add(folder)
        self.db.commit()
        self.db.refresh(folder)
        return folder

    def update_folder(self, folder: Folder, data: Dict[str, Any]) -> Folder:
        for key in ("name", "description", "color", "data"):
            if key in data:
                setattr(folder, key, data[key])
        self.db.commit()
        self.db.refresh(folder)
        return folder

    def delete_folder(self, folder: Folder) -> None:
        """Delete a folder; its items stay in the world, unfiled."""
        self.db.query(Entity).filter(Entity.folder_id == folder.id).update(
            {Entity.folder_id: None}, synchronize_session=False
        )
        self.db.query(Template).filter(Template.folder_id == folder.id).update(
            {Template.folder_id: None}, synchronize_session=False
        )
        folder_id, world_id = folder.id, folder.world_id
        self.db.delete(folder)
        self.db.commit()
        logger.info(f"Folder {folder_id} deleted from world {world_id}")
