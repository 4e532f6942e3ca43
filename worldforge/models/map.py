# worldforge/models/map.py
from sqlalchemy import Column, String, Text, Integer, Float, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from worldforge.database import Base
from worldforge.models.mixins import TimestampMixin, generate_uuid


class Map(Base, TimestampMixin):
    __tablename__ = "maps"

    id = Column(String(36), primary_key=True, default=generate_uuid, index=True)
    world_id = Column(String(36), ForeignKey("worlds.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    image_path = Column(String(500), nullable=True)
    width_px = Column(Integer, nullable=False, default=0)
    height_px = Column(Integer, nullable=False, default=0)
    default_zoom = Column(Float, nullable=False, default=1.0)
    is_public = Column(Boolean, default=False, nullable=False)
    created_by = Column(String(36), nullable=True)

    world = relationship("World", back_populates="maps")
    markers = relationship("MapMarker", back_populates="map", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Map {self.id} - {self.name}>"


class MapMarker(Base, TimestampMixin):
    __tablename__ = "map_markers"

    id = Column(String(36), primary_key=True, default=generate_uuid, index=True)
    map_id = Column(String(36), ForeignKey("maps.id", ondelete="CASCADE"), nullable=False, index=True)
    entity_id = Column(String(36), ForeignKey("entities.id", ondelete="SET NULL"), nullable=True)
    label = Column(String(200), nullable=True)
    x = Column(Float, nullable=False)
    y = Column(Float, nullable=False)
    color = Column(String(30), nullable=True)
    icon = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)

    map = relationship("Map", back_populates="markers")
    entity = relationship("Entity")

    def __repr__(self):
        return f"<MapMarker {self.id} ({self.x}, {self.y})>"
