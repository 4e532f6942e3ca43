# worldforge/services/relationship_service.py
from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import Any, Dict, List, Optional

from worldforge.errors import NotFound, ValidationFailed
from worldforge.models.entity import Entity
from worldforge.models.relationship import Relationship


class RelationshipService:
    """Typed links between two entities of the same world."""

    def __init__(self, db: Session):
        self.db = db

    def get_relationship(self, relationship_id: str) -> Optional[Relationship]:
        return self.db.query(Relationship).filter(Relationship.id == relationship_id).first()

    def get_world_relationships(self, world_id: str, entity_id: Optional[str] = None) -> List[Relationship]:
        query = self.db.query(Relationship).filter(Relationship.world_id == world_id)
        if entity_id:
            query = query.filter(or_(
                Relationship.from_entity_id == entity_id,
                Relationship.to_entity_id == entity_id,
            ))
        return query.order_by(Relationship.created_at).all()

    def create_relationship(self, world_id: str, data: Dict[str, Any]) -> Relationship:
        from_id, to_id = data["from_entity_id"], data["to_entity_id"]
        if from_id == to_id:
            raise ValidationFailed.for_field("toEntityId", "An entity cannot be related to itself")

        found = {
            entity_id for (entity_id,) in self.db.query(Entity.id).filter(
                Entity.world_id == world_id,
                Entity.id.in_([from_id, to_id]),
            )
        }
        for entity_id in (from_id, to_id):
            if entity_id not in found:
                raise NotFound("Entity", entity_id)

        relationship = Relationship(
            world_id=world_id,
            from_entity_id=from_id,
            to_entity_id=to_id,
            relationship_type=data["relationship_type"],
            description=data.get("description"),
            strength=data.get("strength"),
            is_bidirectional=bool(data.get("is_bidirectional")),
            meta=data.get("meta"),
        )
        self.db.add(relationship)
        self.db.commit()
        self.db.refresh(relationship)
        return relationship

    def update_relationship(self, relationship: Relationship, data: Dict[str, Any]) -> Relationship:
        for key in ("relationship_type", "description", "strength", "is_bidirectional", "meta"):
            if key in data:
                setattr(relationship, key, data[key])
        self.db.commit()
        self.db.refresh(relationship)
        return relationship

    def delete_relationship(self, relationship: Relationship) -> None:
        self.db.delete(relationship)
        self.db.commit()
