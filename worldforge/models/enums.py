# worldforge/models/enums.py
import enum


class MemberRole(str, enum.Enum):
    """World membership role, ordered owner > admin > editor > viewer."""
    OWNER = "owner"
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"

    @property
    def rank(self) -> int:
        return _ROLE_RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, MemberRole):
            return NotImplemented
        return self.rank < other.rank

    def __ge__(self, other):
        if not isinstance(other, MemberRole):
            return NotImplemented
        return self.rank >= other.rank

    def __gt__(self, other):
        if not isinstance(other, MemberRole):
            return NotImplemented
        return self.rank > other.rank

    def __le__(self, other):
        if not isinstance(other, MemberRole):
            return NotImplemented
        return self.rank <= other.rank

    def satisfies(self, required: "MemberRole") -> bool:
        return self.rank >= required.rank


_ROLE_RANKS = {
    MemberRole.OWNER: 4,
    MemberRole.ADMIN: 3,
    MemberRole.EDITOR: 2,
    MemberRole.VIEWER: 1,
}


class FolderKind(str, enum.Enum):
    ENTITIES = "entities"
    TEMPLATES = "templates"


class FieldType(str, enum.Enum):
    SHORT_TEXT = "shortText"
    LONG_TEXT = "longText"
    RICH_TEXT = "richText"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multiSelect"
    IMAGE = "image"
    REFERENCE = "reference"


class HealthStatus(str, enum.Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ActivityAction(str, enum.Enum):
    CREATE_WORLD = "create_world"
    UPDATE_WORLD = "update_world"
    DELETE_WORLD = "delete_world"
    ARCHIVE_WORLD = "archive_world"
    UNARCHIVE_WORLD = "unarchive_world"
    CREATE_ENTITY = "create_entity"
    UPDATE_ENTITY = "update_entity"
    DELETE_ENTITY = "delete_entity"
    CREATE_TEMPLATE = "create_template"
    UPDATE_TEMPLATE = "update_template"
    DELETE_TEMPLATE = "delete_template"
    CREATE_FOLDER = "create_folder"
    UPDATE_FOLDER = "update_folder"
    DELETE_FOLDER = "delete_folder"
    CREATE_RELATIONSHIP = "create_relationship"
    DELETE_RELATIONSHIP = "delete_relationship"
    INVITE_MEMBER = "invite_member"
    ACCEPT_INVITE = "accept_invite"
    REVOKE_INVITE = "revoke_invite"
    REMOVE_MEMBER = "remove_member"
    UPDATE_MEMBER_ROLE = "update_member_role"
    UPDATE_PROFILE = "update_profile"
    UPLOAD_FILE = "upload_file"
