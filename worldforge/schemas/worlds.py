from typing import List, Optional, Dict, Any
from pydantic import Field
from datetime import datetime
from worldforge.schemas.base import ApiModel
from worldforge.models.enums import MemberRole

# Extended creation fields, stored in World.settings
EXTENDED_WORLD_FIELDS = (
    "logline", "genre_blend", "overall_tone", "key_themes", "audience_rating",
    "scope_scale", "technology_level", "magic_level", "cosmology_model",
    "climate_biomes", "calendar_timekeeping", "societal_overview",
    "conflict_drivers", "rules_constraints", "aesthetic_direction",
)


class WorldCreate(ApiModel):
    """Properties required to create a world"""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    is_public: Optional[bool] = None
    logline: Optional[str] = Field(None, max_length=5000)
    genre_blend: Optional[List[str]] = None
    overall_tone: Optional[str] = None
    key_themes: Optional[List[str]] = None
    audience_rating: Optional[str] = None
    scope_scale: Optional[str] = None
    technology_level: Optional[List[str]] = None
    magic_level: Optional[List[str]] = None
    cosmology_model: Optional[str] = None
    climate_biomes: Optional[List[str]] = None
    calendar_timekeeping: Optional[str] = None
    societal_overview: Optional[str] = None
    conflict_drivers: Optional[List[str]] = None
    rules_constraints: Optional[str] = None
    aesthetic_direction: Optional[str] = None

    def extended_settings(self) -> Dict[str, Any]:
        return {
            key: value
            for key, value in self.model_dump(include=set(EXTENDED_WORLD_FIELDS)).items()
            if value is not None
        }


class WorldUpdate(ApiModel):
    """Properties that can be updated"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    is_public: Optional[bool] = None
    is_archived: Optional[bool] = None


class WorldArchiveRequest(ApiModel):
    archived: bool = True


class WorldResponse(ApiModel):
    """Response model with all world properties"""
    id: str
    name: str
    description: Optional[str] = None
    summary: Optional[str] = None
    owner_id: str
    is_public: bool
    is_archived: bool
    archived_at: Optional[datetime] = None
    settings: Optional[Dict[str, Any]] = None
    entity_count: int = 0
    role: Optional[MemberRole] = None
    created_at: datetime
    updated_at: datetime


class SeedingReport(ApiModel):
    status: str
    failed_steps: List[str] = []
    templates_seeded: int = 0
    core_folder_id: Optional[str] = None


class WorldEnvelope(ApiModel):
    world: WorldResponse


class WorldCreatedEnvelope(ApiModel):
    world: WorldResponse
    seeding: SeedingReport


class WorldList(ApiModel):
    worlds: List[WorldResponse]
