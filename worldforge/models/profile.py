# worldforge/models/profile.py
from sqlalchemy import Column, String, Text, JSON
from sqlalchemy.orm import relationship
from worldforge.database import Base
from worldforge.models.mixins import TimestampMixin


class Profile(Base, TimestampMixin):
    __tablename__ = "profiles"

    # Same id as the auth provider's user
    id = Column(String(36), primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=True)
    full_name = Column(String(200), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String(100), nullable=True)
    website = Column(String(500), nullable=True)
    banner_url = Column(String(500), nullable=True)
    social_links = Column(JSON, nullable=True)
    # Open-ended bag, e.g. saved art style presets
    data = Column(JSON, nullable=True)

    owned_worlds = relationship("World", back_populates="owner")

    @property
    def display_name(self):
        if self.full_name:
            return self.full_name
        if self.email:
            return self.email.split('@')[0]
        return "Unknown User"

    def __repr__(self):
        return f"<Profile {self.id} - {self.email}>"
