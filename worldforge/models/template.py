# worldforge/models/template.py
from sqlalchemy import Column, String, Text, JSON, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from worldforge.database import Base
from worldforge.models.mixins import TimestampMixin, generate_uuid


class Template(Base, TimestampMixin):
    __tablename__ = "templates"

    id = Column(String(36), primary_key=True, default=generate_uuid, index=True)
    # Null world_id marks a global system template
    world_id = Column(String(36), ForeignKey("worlds.id", ondelete="CASCADE"), nullable=True, index=True)
    folder_id = Column(String(36), ForeignKey("folders.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=True)
    icon = Column(String(50), nullable=True)
    fields = Column(JSON, nullable=False, default=list)
    is_system = Column(Boolean, default=False, nullable=False)

    world = relationship("World", back_populates="templates")
    folder = relationship("Folder", back_populates="templates")
    entities = relationship("Entity", back_populates="template")

    def __repr__(self):
        return f"<Template {self.id} - {self.name}>"
