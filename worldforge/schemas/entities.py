from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import Field, field_validator
from worldforge.schemas.base import ApiModel, reject_null


class EntityCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    template_id: Optional[str] = None
    folder_id: Optional[str] = None
    summary: Optional[str] = Field(None, max_length=5000)
    fields: Dict[str, Any] = {}
    tags: List[str] = []
    image_url: Optional[str] = Field(None, max_length=500)


class EntityUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    template_id: Optional[str] = None
    folder_id: Optional[str] = None
    summary: Optional[str] = Field(None, max_length=5000)
    fields: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None
    image_url: Optional[str] = Field(None, max_length=500)

    @field_validator("name", "tags")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class EntityResponse(ApiModel):
    id: str
    world_id: str
    template_id: Optional[str] = None
    folder_id: Optional[str] = None
    name: str
    summary: Optional[str] = None
    fields: Dict[str, Any] = {}
    tags: List[str] = []
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EntityList(ApiModel):
    entities: List[EntityResponse]


class EntityEnvelope(ApiModel):
    entity: EntityResponse
