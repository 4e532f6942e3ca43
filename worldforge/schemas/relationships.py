from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import Field, field_validator
from worldforge.schemas.base import ApiModel, reject_null


class RelationshipCreate(ApiModel):
    from_entity_id: str
    to_entity_id: str
    relationship_type: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    strength: Optional[int] = Field(None, ge=1, le=10)
    is_bidirectional: bool = False
    meta: Optional[Dict[str, Any]] = Field(None, alias="metadata")


class RelationshipUpdate(ApiModel):
    relationship_type: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    strength: Optional[int] = Field(None, ge=1, le=10)
    is_bidirectional: Optional[bool] = None
    meta: Optional[Dict[str, Any]] = Field(None, alias="metadata")

    @field_validator("relationship_type", "is_bidirectional")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class RelationshipResponse(ApiModel):
    id: str
    world_id: str
    from_entity_id: str
    to_entity_id: str
    relationship_type: str
    description: Optional[str] = None
    strength: Optional[int] = None
    is_bidirectional: bool = False
    meta: Optional[Dict[str, Any]] = Field(None, validation_alias="meta", serialization_alias="metadata")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RelationshipList(ApiModel):
    relationships: List[RelationshipResponse]


class RelationshipEnvelope(ApiModel):
    relationship: RelationshipResponse
