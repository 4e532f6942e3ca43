# worldforge/api/v1/maps.py
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from typing import Optional

from worldforge.api.dependencies import (
    WorldAccess, get_app_settings, get_service, get_storage_service, require_world_role,
)
from worldforge.config import Settings
from worldforge.errors import ValidationFailed
from worldforge.models.enums import MemberRole
from worldforge.schemas import (
    MapCreate, MapEnvelope, MapList, MapUpdate, MarkerCreate, MarkerEnvelope, MarkerList,
    OkResponse, UploadResult,
)
from worldforge.services.activity_service import ActivityService
from worldforge.services.map_service import MapService
from worldforge.services.rate_limit_service import RATE_LIMITS, RateLimitRule, RateLimitService
from worldforge.services.storage_service import StorageService, build_map_path, map_image_filename
from worldforge.services.upload_validation import validate_upload

router = APIRouter()


@router.get("/{world_id}/maps", response_model=MapList)
async def list_maps(
    access: WorldAccess = Depends(require_world_role(MemberRole.VIEWER, allow_public_read=True)),
    map_service: MapService = Depends(get_service(MapService)),
):
    return {"maps": map_service.list_maps(access.world.id)}


@router.post("/{world_id}/maps", response_model=MapEnvelope, status_code=status.HTTP_201_CREATED)
async def create_map(
    payload: MapCreate,
    access: WorldAccess = Depends(require_world_role(MemberRole.EDITOR)),
    map_service: MapService = Depends(get_service(MapService)),
):
    return {"map": map_service.create_map(access.world.id, payload.model_dump(), created_by=access.user.id)}


@router.post("/{world_id}/maps/upload", response_model=UploadResult)
async def upload_map_image(
    file: Optional[UploadFile] = File(None),
    map_id: Optional[str] = Form(None, alias="mapId"),
    access: WorldAccess = Depends(require_world_role(MemberRole.EDITOR)),
    map_service: MapService = Depends(get_service(MapService)),
    storage: StorageService = Depends(get_storage_service),
    rate_limits: RateLimitService = Depends(get_service(RateLimitService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
    settings: Settings = Depends(get_app_settings),
):
    """
    Upload the base image of a map (multipart form: ``file`` and ``mapId``).

    Checked in order: upload rate limit, required form fields, file
    screening (type, size, signature), image type.
    """
    rule = RateLimitRule(settings.UPLOADS_PER_MINUTE, 60, RATE_LIMITS["upload.files"].message)
    rate_limits.enforce("upload.files", access.user.id, rule)

    if file is None:
        raise ValidationFailed("Missing file (form field: file)")
    if not map_id:
        raise ValidationFailed("Missing mapId (form field: mapId)")

    world_map = map_service.get_map(access.world.id, map_id)
    # At most one byte past the limit is buffered
    content = await file.read(settings.MAX_IMAGE_UPLOAD_BYTES + 1)
    content_type = file.content_type or "application/octet-stream"

    validation = validate_upload(file.filename or "", content_type, content)
    if not validation.is_valid:
        raise ValidationFailed("File validation failed", details=validation.errors)
    if not content_type.startswith("image/"):
        raise ValidationFailed("Invalid file type", details="Only image files are allowed for maps")
    if len(content) > settings.MAX_IMAGE_UPLOAD_BYTES:
        raise ValidationFailed("File too large", details=f"Map images are limited to {settings.MAX_IMAGE_UPLOAD_BYTES} bytes")

    filename = map_image_filename(content_type)
    path = storage.upload(build_map_path(access.world.id, world_map.id, filename), content, content_type)
    map_service.set_image_path(world_map, path)
    activity.file_uploaded(access.user.id, access.world.id, path, filename, len(content))

    return UploadResult(path=path, filename=filename, size=len(content), mime_type=content_type)


@router.get("/{world_id}/maps/{map_id}", response_model=MapEnvelope)
async def get_map(
    map_id: str,
    access: WorldAccess = Depends(require_world_role(MemberRole.VIEWER, allow_public_read=True)),
    map_service: MapService = Depends(get_service(MapService)),
):
    return {"map": map_service.get_map(access.world.id, map_id)}


@router.put("/{world_id}/maps/{map_id}", response_model=MapEnvelope)
async def update_map(
    map_id: str,
    payload: MapUpdate,
    access: WorldAccess = Depends(require_world_role(MemberRole.EDITOR)),
    map_service: MapService = Depends(get_service(MapService)),
):
    world_map = map_service.get_map(access.world.id, map_id)
    return {"map": map_service.update_map(world_map, payload.model_dump(exclude_unset=True))}


@router.delete("/{world_id}/maps/{map_id}", response_model=OkResponse)
async def delete_map(
    map_id: str,
    access: WorldAccess = Depends(require_world_role(MemberRole.EDITOR)),
    map_service: MapService = Depends(get_service(MapService)),
    storage: StorageService = Depends(get_storage_service),
):
    """Delete a map and its markers; the stored image is removed best effort."""
    world_map = map_service.get_map(access.world.id, map_id)
    image_path = world_map.image_path
    map_service.delete_map(world_map)
    if image_path:
        storage.remove([image_path])
    return {"ok": True}


@router.get("/{world_id}/maps/{map_id}/markers", response_model=MarkerList)
async def list_markers(
    map_id: str,
    access: WorldAccess = Depends(require_world_role(MemberRole.VIEWER, allow_public_read=True)),
    map_service: MapService = Depends(get_service(MapService)),
):
    world_map = map_service.get_map(access.world.id, map_id)
    return {"markers": map_service.list_markers(world_map)}


@router.post("/{world_id}/maps/{map_id}/markers", response_model=MarkerEnvelope,
             status_code=status.HTTP_201_CREATED)
async def create_marker(
    map_id: str,
    payload: MarkerCreate,
    access: WorldAccess = Depends(require_world_role(MemberRole.EDITOR)),
    map_service: MapService = Depends(get_service(MapService)),
):
    world_map = map_service.get_map(access.world.id, map_id)
    return {"marker": map_service.create_marker(world_map, payload.model_dump())}


@router.delete("/{world_id}/maps/{map_id}/markers", response_model=OkResponse)
async def delete_marker(
    map_id: str,
    marker_id: str = Query(..., alias="markerId"),
    access: WorldAccess = Depends(require_world_role(MemberRole.EDITOR)),
    map_service: MapService = Depends(get_service(MapService)),
):
    world_map = map_service.get_map(access.world.id, map_id)
    map_service.delete_marker(world_map, marker_id)
    return {"ok": True}
