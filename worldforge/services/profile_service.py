# worldforge/services/profile_service.py
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional, Tuple
import logging

from worldforge.models.profile import Profile

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("bio", "location", "website", "social_links", "banner_url", "full_name", "data")


class ProfileService:
    """Service for user profiles."""

    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self.db.query(Profile).filter(Profile.id == user_id).first()

    def get_or_create_profile(self, user_id: str, email: Optional[str] = None, full_name: Optional[str] = None) -> Profile:
        """Return the user's profile, creating it on first sight."""
        profile = self.get_profile(user_id)
        if profile:
            return profile

        profile = Profile(id=user_id, email=email, full_name=full_name)
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        logger.info(f"Created profile for user {user_id}")
        return profile

    def update_profile(self, profile: Profile, update_data: Dict[str, Any]) -> Tuple[Profile, List[str]]:
        """
        Apply editable fields.

        Returns:
            Tuple of (profile, names of fields that were set to a non-empty value).
        """
        changed: List[str] = []
        for key, value in update_data.items():
            if key not in EDITABLE_FIELDS:
                continue
            setattr(profile, key, value)
            if value not in (None, "", {}, []):
                changed.append(key)

        self.db.commit()
        self.db.refresh(profile)
        return profile, changed
