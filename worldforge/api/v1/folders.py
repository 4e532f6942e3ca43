# worldforge/api/v1/folders.py
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from worldforge.api.auth import CurrentUser, get_current_user
from worldforge.api.dependencies import WorldAccess, authorize_world, get_service, require_world_role
from worldforge.errors import NotFound
from worldforge.models.enums import ActivityAction, FolderKind, MemberRole
from worldforge.models.folder import Folder
from worldforge.schemas import FolderCreate, FolderEnvelope, FolderList, FolderResponse, FolderUpdate, OkResponse
from worldforge.services.activity_service import ActivityService
from worldforge.services.folder_service import FolderService
from worldforge.services.permission_service import PermissionService

world_router = APIRouter()
router = APIRouter()


def to_folder_response(folder: Folder, count: int) -> FolderResponse:
    return FolderResponse.model_validate(folder).model_copy(update={"count": count})


@world_router.get("/{world_id}/folders", response_model=FolderList)
async def list_folders(
    kind: Optional[FolderKind] = Query(None),
    access: WorldAccess = Depends(require_world_role(MemberRole.VIEWER, allow_public_read=True)),
    folder_service: FolderService = Depends(get_service(FolderService)),
):
    rows = folder_service.list_folders(access.world.id, kind)
    return {"folders": [to_folder_response(folder, count) for folder, count in rows]}


@world_router.post("/{world_id}/folders", response_model=FolderEnvelope, status_code=status.HTTP_201_CREATED)
async def create_folder(
    payload: FolderCreate,
    access: WorldAccess = Depends(require_world_role(MemberRole.EDITOR)),
    folder_service: FolderService = Depends(get_service(FolderService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    folder = folder_service.create_folder(access.world.id, payload.model_dump())
    activity.log(access.user.id, ActivityAction.CREATE_FOLDER, f'Created folder "{folder.name}"',
                 world_id=access.world.id, resource_type="folder", resource_id=folder.id,
                 resource_name=folder.name)
    return {"folder": to_folder_response(folder, 0)}


def _load_folder(folder_id: str, folder_service: FolderService) -> Folder:
    folder = folder_service.get_folder(folder_id)
    if not folder:
        raise NotFound("Folder", folder_id)
    return folder


@router.get("/{folder_id}", response_model=FolderEnvelope)
async def get_folder(
    folder_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    folder_service: FolderService = Depends(get_service(FolderService)),
    permissions: PermissionService = Depends(get_service(PermissionService)),
):
    folder = _load_folder(folder_id, folder_service)
    authorize_world(permissions, folder.world_id, current_user, MemberRole.VIEWER, allow_public_read=True)
    return {"folder": to_folder_response(folder, folder_service.count_items(folder))}


@router.put("/{folder_id}", response_model=FolderEnvelope)
async def update_folder(
    folder_id: str,
    payload: FolderUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    folder_service: FolderService = Depends(get_service(FolderService)),
    permissions: PermissionService = Depends(get_service(PermissionService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    folder = _load_folder(folder_id, folder_service)
    authorize_world(permissions, folder.world_id, current_user, MemberRole.EDITOR)
    folder = folder_service.update_folder(folder, payload.model_dump(exclude_unset=True))
    activity.log(current_user.id, ActivityAction.UPDATE_FOLDER, f'Updated folder "{folder.name}"',
                 world_id=folder.world_id, resource_type="folder", resource_id=folder.id,
                 resource_name=folder.name)
    return {"folder": to_folder_response(folder, folder_service.count_items(folder))}


@router.delete("/{folder_id}", response_model=OkResponse)
async def delete_folder(
    folder_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    folder_service: FolderService = Depends(get_service(FolderService)),
    permissions: PermissionService = Depends(get_service(PermissionService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    """Delete a folder. Its entities or templates are kept, unfiled."""
    folder = _load_folder(folder_id, folder_service)
    authorize_world(permissions, folder.world_id, current_user, MemberRole.EDITOR)
    world_id, name = folder.world_id, folder.name
    folder_service.delete_folder(folder)
    activity.log(current_user.id, ActivityAction.DELETE_FOLDER, f'Deleted folder "{name}"',
                 world_id=world_id, resource_type="folder", resource_id=folder_id, resource_name=name)
    return {"ok": True}
