# worldforge/models/world.py
from sqlalchemy import Column, String, Text, JSON, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from worldforge.database import Base
from worldforge.models.mixins import TimestampMixin, generate_uuid


class World(Base, TimestampMixin):
    __tablename__ = "worlds"

    id = Column(String(36), primary_key=True, default=generate_uuid, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    summary = Column(Text, nullable=True)
    settings = Column(JSON, nullable=True)
    is_public = Column(Boolean, default=False, nullable=False)
    is_archived = Column(Boolean, default=False, nullable=False)
    archived_at = Column(DateTime(timezone=True), nullable=True)

    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)

    # Relationships
    owner = relationship("Profile", back_populates="owned_worlds")
    members = relationship("WorldMember", back_populates="world", cascade="all, delete-orphan")
    folders = relationship("Folder", back_populates="world", cascade="all, delete-orphan")
    templates = relationship("Template", back_populates="world", cascade="all, delete-orphan")
    entities = relationship("Entity", back_populates="world", cascade="all, delete-orphan")
    relationships = relationship("Relationship", back_populates="world", cascade="all, delete-orphan")
    invites = relationship("WorldInvite", back_populates="world", cascade="all, delete-orphan")
    maps = relationship("Map", back_populates="world", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<World {self.id} - {self.name}>"


class WorldMember(Base):
    __tablename__ = "world_members"
    __table_args__ = (UniqueConstraint("world_id", "user_id", name="uq_world_members_world_user"),)

    id = Column(String(36), primary_key=True, default=generate_uuid, index=True)
    world_id = Column(String(36), ForeignKey("worlds.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    role = Column(String(20), nullable=False)
    invited_by = Column(String(36), nullable=True)
    joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    world = relationship("World", back_populates="members")
    profile = relationship("Profile")

    def __repr__(self):
        return f"<WorldMember {self.user_id} in {self.world_id} ({self.role})>"
