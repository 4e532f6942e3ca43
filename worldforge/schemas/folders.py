from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import Field, field_validator
from worldforge.schemas.base import ApiModel, reject_null
from worldforge.models.enums import FolderKind


class FolderCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    color: Optional[str] = Field(None, max_length=30)
    kind: FolderKind = FolderKind.ENTITIES
    data: Optional[Dict[str, Any]] = None


class FolderUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    color: Optional[str] = Field(None, max_length=30)
    data: Optional[Dict[str, Any]] = None

    @field_validator("name")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class FolderResponse(ApiModel):
    id: str
    world_id: str
    name: str
    kind: FolderKind
    description: Optional[str] = None
    color: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FolderList(ApiModel):
    folders: List[FolderResponse]


class FolderEnvelope(ApiModel):
    folder: FolderResponse
