# worldforge/services/map_service.py
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional

from worldforge.errors import NotFound
from worldforge.models.entity import Entity
from worldforge.models.map import Map, MapMarker


class MapService:
    """World maps and the markers pinned on them."""

    def __init__(self, db: Session):
        self.db = db

    def get_map(self, world_id: str, map_id: str) -> Map:
        world_map = self.db.query(Map).filter(Map.id == map_id, Map.world_id == world_id).first()
        if not world_map:
            raise NotFound("Map", map_id)
        return world_map

    def list_maps(self, world_id: str) -> List[Map]:
        return self.db.query(Map).filter(Map.world_id == world_id).order_by(Map.name).all()

    def create_map(self, world_id: str, data: Dict[str, Any], created_by: Optional[str] = None) -> Map:
        world_map = Map(world_id=world_id, created_by=created_by, **data)
        self.db.add(world_map)
        self.db.commit()
        self.db.refresh(world_map)
        return world_map

    def update_map(self, world_map: Map, data: Dict[str, Any]) -> Map:
        for key, value in data.items():
            setattr(world_map, key, value)
        self.db.commit()
        self.db.refresh(world_map)
        return world_map

    def set_image_path(self, world_map: Map, path: str) -> Map:
        return self.update_map(world_map, {"image_path": path})

    def delete_map(self, world_map: Map) -> None:
        self.db.delete(world_map)
        self.db.commit()

    def list_markers(self, world_map: Map) -> List[MapMarker]:
        return self.db.query(MapMarker).filter(MapMarker.map_id == world_map.id).all()

    def create_marker(self, world_map: Map, data: Dict[str, Any]) -> MapMarker:
        entity_id = data.get("entity_id")
        if entity_id:
            entity = self.db.query(Entity).filter(
                Entity.id == entity_id,
                Entity.world_id == world_map.world_id,
            ).first()
            if not entity:
                raise NotFound("Entity", entity_id)

        marker = MapMarker(map_id=world_map.id, **data)
        self.db.add(marker)
        self.db.commit()
        self.db.refresh(marker)
        return marker

    def delete_marker(self, world_map: Map, marker_id: str) -> None:
        marker = self.db.query(MapMarker).filter(
            MapMarker.id == marker_id,
            MapMarker.map_id == world_map.id,
        ).first()
        if not marker:
            raise NotFound("Marker", marker_id)
        self.db.delete(marker)
        self.db.commit()
