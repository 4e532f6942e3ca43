# worldforge/models/activity.py
from sqlalchemy import Column, String, Text, JSON, DateTime, Integer, UniqueConstraint
from sqlalchemy.sql import func
from worldforge.database import Base
from worldforge.models.mixins import generate_uuid


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(String(36), primary_key=True, default=generate_uuid, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    world_id = Column(String(36), nullable=True, index=True)
    action = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    resource_type = Column(String(50), nullable=True)
    resource_id = Column(String(36), nullable=True)
    resource_name = Column(String(200), nullable=True)
    meta = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<ActivityLog {self.action} by {self.user_id}>"


class RateLimitRecord(Base):
    """Fixed-window request counter, one row per (bucket, key, window)."""
    __tablename__ = "rate_limits"
    __table_args__ = (UniqueConstraint("bucket", "key", "window_start", name="uq_rate_limits_window"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    bucket = Column(String(50), nullable=False)
    key = Column(String(100), nullable=False, index=True)
    window_start = Column(Integer, nullable=False)
    count = Column(Integer, nullable=False, default=0)
