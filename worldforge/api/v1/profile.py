# worldforge/api/v1/profile.py
from fastapi import APIRouter, Depends, Query

from worldforge.api.auth import CurrentUser, get_current_user
from worldforge.api.dependencies import get_service
from worldforge.schemas import ActivityList, ProfileEnvelope, ProfileUpdate
from worldforge.services.activity_service import ActivityService
from worldforge.services.profile_service import ProfileService

router = APIRouter()


@router.get("", response_model=ProfileEnvelope)
async def get_profile(
    current_user: CurrentUser = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_service(ProfileService)),
):
    return {"profile": profile_service.get_or_create_profile(current_user.id, current_user.email)}


@router.put("", response_model=ProfileEnvelope)
async def update_profile(
    payload: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_service(ProfileService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    """Update the caller's profile. ``website`` and ``bannerUrl`` take a URL or ""."""
    profile = profile_service.get_or_create_profile(current_user.id, current_user.email)
    profile, changed = profile_service.update_profile(profile, payload.model_dump(mode="json", exclude_unset=True))
    activity.profile_updated(current_user.id, changed)
    return {"profile": profile}


@router.get("/activity", response_model=ActivityList)
async def list_activity(
    limit: int = Query(50, ge=1, le=200),
    current_user: CurrentUser = Depends(get_current_user),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    return {"activities": activity.get_user_activity(current_user.id, limit)}
