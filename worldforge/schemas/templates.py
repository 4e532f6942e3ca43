from typing import List, Optional
from datetime import datetime
from pydantic import Field, field_validator, model_validator
from worldforge.schemas.base import ApiModel, reject_null
from worldforge.models.enums import FieldType

_OPTION_TYPES = (FieldType.SELECT, FieldType.MULTI_SELECT)


class TemplateField(ApiModel):
    """One typed field in a template's schema"""
    id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    type: FieldType
    prompt: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None
    reference_type: Optional[str] = None

    @model_validator(mode="after")
    def check_options(self):
        if self.type in _OPTION_TYPES and not self.options:
            raise ValueError(f"Field '{self.name}' of type {self.type.value} needs options")
        return self


def _unique_field_ids(fields: Optional[List[TemplateField]]) -> None:
    if not fields:
        return
    seen = set()
    for field in fields:
        if field.id in seen:
            raise ValueError(f"Duplicate field id '{field.id}'")
        seen.add(field.id)


class TemplateCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    category: Optional[str] = Field(None, max_length=50)
    icon: Optional[str] = Field(None, max_length=50)
    folder_id: Optional[str] = None
    fields: List[TemplateField] = []

    @model_validator(mode="after")
    def check_fields(self):
        _unique_field_ids(self.fields)
        return self


class TemplateUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    category: Optional[str] = Field(None, max_length=50)
    icon: Optional[str] = Field(None, max_length=50)
    folder_id: Optional[str] = None
    fields: Optional[List[TemplateField]] = None
    # Required when overriding a system template
    world_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

    @model_validator(mode="after")
    def check_fields(self):
        _unique_field_ids(self.fields)
        return self


class TemplateResponse(ApiModel):
    id: str
    world_id: Optional[str] = None
    folder_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    icon: Optional[str] = None
    fields: List[TemplateField] = []
    is_system: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TemplateList(ApiModel):
    templates: List[TemplateResponse]


class TemplateEnvelope(ApiModel):
    template: TemplateResponse


def fields_to_json(fields: Optional[List[TemplateField]]) -> List[dict]:
    """Field definitions as stored: camelCase keys, unset options dropped"""
    return [field.model_dump(mode="json", by_alias=True, exclude_none=True) for field in fields or []]
