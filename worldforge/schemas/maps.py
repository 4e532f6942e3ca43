from typing import List, Optional
from datetime import datetime
from pydantic import Field, field_validator
from worldforge.schemas.base import ApiModel, reject_null


class MapCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    width_px: int = Field(0, ge=0, le=20000)
    height_px: int = Field(0, ge=0, le=20000)
    default_zoom: float = Field(1.0, gt=0, le=10)
    is_public: bool = False


class MapUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    image_path: Optional[str] = Field(None, max_length=500)
    width_px: Optional[int] = Field(None, ge=0, le=20000)
    height_px: Optional[int] = Field(None, ge=0, le=20000)
    default_zoom: Optional[float] = Field(None, gt=0, le=10)
    is_public: Optional[bool] = None

    @field_validator("name", "width_px", "height_px", "default_zoom", "is_public")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class MapResponse(ApiModel):
    id: str
    world_id: str
    name: str
    description: Optional[str] = None
    image_path: Optional[str] = None
    width_px: int = 0
    height_px: int = 0
    default_zoom: float = 1.0
    is_public: bool = False
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MapList(ApiModel):
    maps: List[MapResponse]


class MapEnvelope(ApiModel):
    map: MapResponse


class MarkerCreate(ApiModel):
    x: float = Field(..., ge=0)
    y: float = Field(..., ge=0)
    entity_id: Optional[str] = None
    label: Optional[str] = Field(None, max_length=200)
    color: Optional[str] = Field(None, max_length=30)
    icon: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=2000)


class MarkerResponse(ApiModel):
    id: str
    map_id: str
    entity_id: Optional[str] = None
    label: Optional[str] = None
    x: float
    y: float
    color: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None


class MarkerList(ApiModel):
    markers: List[MarkerResponse]


class MarkerEnvelope(ApiModel):
    marker: MarkerResponse


class UploadResult(ApiModel):
    success: bool = True
    path: str
    filename: str
    size: int
    mime_type: str
