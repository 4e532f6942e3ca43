# worldforge/models/folder.py
from sqlalchemy import Column, String, Text, JSON, ForeignKey
from sqlalchemy.orm import relationship
from worldforge.database import Base
from worldforge.models.mixins import TimestampMixin, generate_uuid

CORE_FOLDER_NAME = "Core"


class Folder(Base, TimestampMixin):
    __tablename__ = "folders"

    id = Column(String(36), primary_key=True, default=generate_uuid, index=True)
    world_id = Column(String(36), ForeignKey("worlds.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    kind = Column(String(20), nullable=False, default="entities")
    description = Column(Text, nullable=True)
    color = Column(String(30), nullable=True)
    data = Column(JSON, nullable=True)

    world = relationship("World", back_populates="folders")
    entities = relationship("Entity", back_populates="folder")
    templates = relationship("Template", back_populates="folder")

    def __repr__(self):
        return f"<Folder {self.id} - {self.name} ({self.kind})>"
