"""
Model registry.
Importing this package registers every table on ``Base.metadata``.
"""

from worldforge.models.profile import Profile
from worldforge.models.world import World, WorldMember
from worldforge.models.folder import Folder, CORE_FOLDER_NAME
from worldforge.models.template import Template
from worldforge.models.entity import Entity
from worldforge.models.relationship import Relationship
from worldforge.models.invite import WorldInvite
from worldforge.models.map import Map, MapMarker
from worldforge.models.activity import ActivityLog, RateLimitRecord
