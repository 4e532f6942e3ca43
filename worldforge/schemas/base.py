from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for request and response shapes: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def reject_null(value: Any) -> Any:
    """Field validator body for optional update fields whose column is NOT NULL."""
    if value is None:
        raise ValueError("may not be null")
    return value


class Issue(BaseModel):
    """A single field violation"""
    path: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned for every 4xx/5xx"""
    error: str
    details: Optional[Any] = None
    issues: Optional[List[Issue]] = None
    request_id: Optional[str] = None


class OkResponse(BaseModel):
    ok: bool = True


class ActivityEntry(ApiModel):
    id: str
    user_id: str
    world_id: Optional[str] = None
    action: str
    description: str
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    resource_name: Optional[str] = None
    meta: Optional[Dict[str, Any]] = Field(None, validation_alias="meta", serialization_alias="metadata")
    created_at: Any = None


class ActivityList(ApiModel):
    activities: List[ActivityEntry]
