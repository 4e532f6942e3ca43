"""
Schema definitions for the application.
This module exports all schemas for easy importing throughout the app.
"""

# Import from base
from worldforge.schemas.base import (
    ApiModel, Issue, ErrorResponse, OkResponse, ActivityEntry, ActivityList
)

# Import from worlds
from worldforge.schemas.worlds import (
    WorldCreate, WorldUpdate, WorldArchiveRequest, WorldResponse, SeedingReport,
    WorldEnvelope, WorldCreatedEnvelope, WorldList
)

# Import from members
from worldforge.schemas.members import (
    MemberRoleUpdate, MemberResponse, MemberList, MemberEnvelope
)

# Import from invites
from worldforge.schemas.invites import (
    InviteCreate, InviteAccept, InviteResponse, InviteCreated, InviteList,
    InviteEnvelope, InviteAcceptResult
)

# Import from folders
from worldforge.schemas.folders import (
    FolderCreate, FolderUpdate, FolderResponse, FolderList, FolderEnvelope
)

# Import from templates
from worldforge.schemas.templates import (
    TemplateField, TemplateCreate, TemplateUpdate, TemplateResponse,
    TemplateList, TemplateEnvelope, fields_to_json
)

# Import from entities
from worldforge.schemas.entities import (
    EntityCreate, EntityUpdate, EntityResponse, EntityList, EntityEnvelope
)

# Import from relationships
from worldforge.schemas.relationships import (
    RelationshipCreate, RelationshipUpdate, RelationshipResponse,
    RelationshipList, RelationshipEnvelope
)

# Import from maps
from worldforge.schemas.maps import (
    MapCreate, MapUpdate, MapResponse, MapList, MapEnvelope,
    MarkerCreate, MarkerResponse, MarkerList, MarkerEnvelope, UploadResult
)

# Import from profiles
from worldforge.schemas.profiles import (
    ProfileUpdate, ProfileResponse, ProfileEnvelope
)

# Import from health
from worldforge.schemas.health import (
    HealthCheck, HealthSummary, HealthReport
)
