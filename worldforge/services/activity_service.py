# worldforge/services/activity_service.py
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
import logging

from worldforge.models.activity import ActivityLog
from worldforge.models.enums import ActivityAction

logger = logging.getLogger(__name__)


class ActivityService:
    """
    Best-effort audit trail.

    Every write happens inside its own savepoint so a failed insert never
    disturbs the caller's transaction, and ``log`` never raises.
    """

    def __init__(self, db: Session):
        self.db = db

    def log(
        self,
        user_id: str,
        action: ActivityAction,
        description: str,
        world_id: Optional[str] = None,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        resource_name: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[ActivityLog]:
        try:
            with self.db.begin_nested():
                entry = ActivityLog(
                    user_id=user_id,
                    world_id=world_id,
                    action=action.value,
                    description=description,
                    resource_type=resource_type,
                    resource_id=resource_id,
                    resource_name=resource_name,
                    meta=metadata,
                )
                self.db.add(entry)
            self.db.commit()
            return entry
        except Exception as e:
            self.db.rollback()
            logger.warning(f"Failed to log activity {action.value} for {user_id}: {e}")
            return None

    def get_user_activity(self, user_id: str, limit: int = 50) -> List[ActivityLog]:
        return (
            self.db.query(ActivityLog)
            .filter(ActivityLog.user_id == user_id)
            .order_by(ActivityLog.created_at.desc())
            .limit(limit)
            .all()
        )

    # Named helpers

    def world_created(self, user_id: str, world_id: str, world_name: str):
        return self.log(user_id, ActivityAction.CREATE_WORLD, f'Created world "{world_name}"',
                        world_id=world_id, resource_type="world", resource_id=world_id,
                        resource_name=world_name)

    def world_updated(self, user_id: str, world_id: str, world_name: str, changes: Optional[List[str]] = None):
        return self.log(user_id, ActivityAction.UPDATE_WORLD, f'Updated world "{world_name}"',
                        world_id=world_id, resource_type="world", resource_id=world_id,
                        resource_name=world_name, metadata={"changes": changes or []})

    def world_archived(self, user_id: str, world_id: str, world_name: str, archived: bool):
        action = ActivityAction.ARCHIVE_WORLD if archived else ActivityAction.UNARCHIVE_WORLD
        verb = "Archived" if archived else "Unarchived"
        return self.log(user_id, action, f'{verb} world "{world_name}"',
                        world_id=world_id, resource_type="world", resource_id=world_id,
                        resource_name=world_name)

    def world_deleted(self, user_id: str, world_id: str, world_name: str):
        # The world row is gone, so the log row keeps no world_id reference
        return self.log(user_id, ActivityAction.DELETE_WORLD, f'Deleted world "{world_name}"',
                        resource_type="world", resource_id=world_id, resource_name=world_name)

    def entity_created(self, user_id: str, world_id: str, entity_id: str, entity_name: str):
        return self.log(user_id, ActivityAction.CREATE_ENTITY, f'Created entity "{entity_name}"',
                        world_id=world_id, resource_type="entity", resource_id=entity_id,
                        resource_name=entity_name)

    def entity_updated(self, user_id: str, world_id: str, entity_id: str, entity_name: str):
        return self.log(user_id, ActivityAction.UPDATE_ENTITY, f'Updated entity "{entity_name}"',
                        world_id=world_id, resource_type="entity", resource_id=entity_id,
                        resource_name=entity_name)

    def entity_deleted(self, user_id: str, world_id: str, entity_id: str, entity_name: str):
        return self.log(user_id, ActivityAction.DELETE_ENTITY, f'Deleted entity "{entity_name}"',
                        world_id=world_id, resource_type="entity", resource_id=entity_id,
                        resource_name=entity_name)

    def template_created(self, user_id: str, world_id: str, template_id: str, template_name: str):
        return self.log(user_id, ActivityAction.CREATE_TEMPLATE, f'Created template "{template_name}"',
                        world_id=world_id, resource_type="template", resource_id=template_id,
                        resource_name=template_name)

    def member_role_updated(self, user_id: str, world_id: str, member_user_id: str, new_role: str):
        return self.log(user_id, ActivityAction.UPDATE_MEMBER_ROLE, f"Changed member role to {new_role}",
                        world_id=world_id, resource_type="member", resource_id=member_user_id,
                        metadata={"role": new_role})

    def member_removed(self, user_id: str, world_id: str, member_user_id: str):
        return self.log(user_id, ActivityAction.REMOVE_MEMBER, "Removed a member",
                        world_id=world_id, resource_type="member", resource_id=member_user_id)

    def member_invited(self, user_id: str, world_id: str, invite_id: str, email: str, role: str):
        return self.log(user_id, ActivityAction.INVITE_MEMBER, f"Invited {email} as {role}",
                        world_id=world_id, resource_type="invite", resource_id=invite_id,
                        resource_name=email)

    def invite_accepted(self, user_id: str, world_id: str):
        return self.log(user_id, ActivityAction.ACCEPT_INVITE, "Accepted a world invite",
                        world_id=world_id, resource_type="world", resource_id=world_id)

    def profile_updated(self, user_id: str, fields: List[str]):
        # Only mention fields when something changed
        description = f"Updated profile: {', '.join(fields)}" if fields else "Updated profile"
        return self.log(user_id, ActivityAction.UPDATE_PROFILE, description,
                        resource_type="profile", resource_id=user_id,
                        metadata={"fields": fields} if fields else None)

    def file_uploaded(self, user_id: str, world_id: str, path: str, filename: str, size: int):
        return self.log(user_id, ActivityAction.UPLOAD_FILE, f'Uploaded "{filename}"',
                        world_id=world_id, resource_type="file", resource_name=filename,
                        metadata={"path": path, "size": size})
