# worldforge/models/entity.py
from sqlalchemy import Column, String, Text, JSON, ForeignKey
from sqlalchemy.orm import relationship
from worldforge.database import Base
from worldforge.models.mixins import TimestampMixin, generate_uuid


class Entity(Base, TimestampMixin):
    __tablename__ = "entities"

    id = Column(String(36), primary_key=True, default=generate_uuid, index=True)
    world_id = Column(String(36), ForeignKey("worlds.id", ondelete="CASCADE"), nullable=False, index=True)
    template_id = Column(String(36), ForeignKey("templates.id", ondelete="SET NULL"), nullable=True, index=True)
    folder_id = Column(String(36), ForeignKey("folders.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String(200), nullable=False)
    summary = Column(Text, nullable=True)
    # Keyed by template field id
    fields = Column(JSON, nullable=False, default=dict)
    tags = Column(JSON, nullable=False, default=list)
    image_url = Column(String(500), nullable=True)

    # Relationships
    world = relationship("World", back_populates="entities")
    template = relationship("Template", back_populates="entities")
    folder = relationship("Folder", back_populates="entities")
    outgoing = relationship(
        "Relationship",
        foreign_keys="Relationship.from_entity_id",
        back_populates="from_entity",
        cascade="all, delete-orphan",
    )
    incoming = relationship(
        "Relationship",
        foreign_keys="Relationship.to_entity_id",
        back_populates="to_entity",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Entity {self.id} - {self.name}>"
