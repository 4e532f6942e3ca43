# worldforge/models/invite.py
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from worldforge.database import Base
from worldforge.models.mixins import TimestampMixin, generate_uuid, generate_token


class WorldInvite(Base, TimestampMixin):
    __tablename__ = "world_invites"

    id = Column(String(36), primary_key=True, default=generate_uuid, index=True)
    world_id = Column(String(36), ForeignKey("worlds.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    role = Column(String(20), nullable=False)
    token = Column(String(64), nullable=False, unique=True, default=generate_token, index=True)
    invited_by = Column(String(36), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    revoked_at = Column(DateTime(timezone=True), nullable=True)

    world = relationship("World", back_populates="invites")

    def __repr__(self):
        return f"<WorldInvite {self.email} -> {self.world_id} ({self.role})>"
