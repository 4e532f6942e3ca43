# worldforge/models/relationship.py
from sqlalchemy import Column, String, Text, JSON, Integer, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from worldforge.database import Base
from worldforge.models.mixins import TimestampMixin, generate_uuid


class Relationship(Base, TimestampMixin):
    __tablename__ = "relationships"

    id = Column(String(36), primary_key=True, default=generate_uuid, index=True)
    world_id = Column(String(36), ForeignKey("worlds.id", ondelete="CASCADE"), nullable=False, index=True)
    from_entity_id = Column(String(36), ForeignKey("entities.id", ondelete="CASCADE"), nullable=False, index=True)
    to_entity_id = Column(String(36), ForeignKey("entities.id", ondelete="CASCADE"), nullable=False, index=True)
    relationship_type = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    strength = Column(Integer, nullable=True)
    is_bidirectional = Column(Boolean, default=False, nullable=False)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON, nullable=True)

    world = relationship("World", back_populates="relationships")
    from_entity = relationship("Entity", foreign_keys=[from_entity_id], back_populates="outgoing")
    to_entity = relationship("Entity", foreign_keys=[to_entity_id], back_populates="incoming")

    def __repr__(self):
        return f"<Relationship {self.from_entity_id} -{self.relationship_type}-> {self.to_entity_id}>"
