from typing import Any, Dict, Literal, Optional, Union
from datetime import datetime
from pydantic import Field, HttpUrl
from worldforge.schemas.base import ApiModel


class ProfileUpdate(ApiModel):
    """Editable profile fields; website and banner accept a URL or an empty string"""
    bio: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=100)
    website: Optional[Union[HttpUrl, Literal[""]]] = None
    social_links: Optional[Dict[str, str]] = None
    banner_url: Optional[Union[HttpUrl, Literal[""]]] = None
    full_name: Optional[str] = Field(None, max_length=200)
    data: Optional[Any] = None


class ProfileResponse(ApiModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    banner_url: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None
    data: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileEnvelope(ApiModel):
    profile: ProfileResponse
