# worldforge/api/v1/entities.py
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from worldforge.api.auth import CurrentUser, get_current_user
from worldforge.api.dependencies import WorldAccess, authorize_world, get_service, require_world_role
from worldforge.errors import NotFound
from worldforge.models.entity import Entity
from worldforge.models.enums import MemberRole
from worldforge.schemas import EntityCreate, EntityEnvelope, EntityList, EntityUpdate, OkResponse
from worldforge.services.activity_service import ActivityService
from worldforge.services.entity_service import EntityService
from worldforge.services.permission_service import PermissionService

world_router = APIRouter()
router = APIRouter()


@world_router.get("/{world_id}/entities", response_model=EntityList)
async def list_entities(
    folder_id: Optional[str] = Query(None, alias="folderId"),
    template_id: Optional[str] = Query(None, alias="templateId"),
    search: Optional[str] = Query(None, alias="q"),
    access: WorldAccess = Depends(require_world_role(MemberRole.VIEWER, allow_public_read=True)),
    entity_service: EntityService = Depends(get_service(EntityService)),
):
    entities = entity_service.get_world_entities(
        access.world.id, folder_id=folder_id, template_id=template_id, search=search
    )
    return {"entities": entities}


@world_router.post("/{world_id}/entities", response_model=EntityEnvelope, status_code=status.HTTP_201_CREATED)
async def create_entity(
    payload: EntityCreate,
    access: WorldAccess = Depends(require_world_role(MemberRole.EDITOR)),
    entity_service: EntityService = Depends(get_service(EntityService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    """Create an entity. Field values are checked against its template."""
    entity = entity_service.create_entity(access.world.id, payload.model_dump())
    activity.entity_created(access.user.id, access.world.id, entity.id, entity.name)
    return {"entity": entity}


def _load_entity(entity_id: str, entity_service: EntityService) -> Entity:
    entity = entity_service.get_entity(entity_id)
    if not entity:
        raise NotFound("Entity", entity_id)
    return entity


@router.get("/{entity_id}", response_model=EntityEnvelope)
async def get_entity(
    entity_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    entity_service: EntityService = Depends(get_service(EntityService)),
    permissions: PermissionService = Depends(get_service(PermissionService)),
):
    entity = _load_entity(entity_id, entity_service)
    authorize_world(permissions, entity.world_id, current_user, MemberRole.VIEWER, allow_public_read=True)
    return {"entity": entity}


@router.put("/{entity_id}", response_model=EntityEnvelope)
async def update_entity(
    entity_id: str,
    payload: EntityUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    entity_service: EntityService = Depends(get_service(EntityService)),
    permissions: PermissionService = Depends(get_service(PermissionService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    entity = _load_entity(entity_id, entity_service)
    authorize_world(permissions, entity.world_id, current_user, MemberRole.EDITOR)
    entity = entity_service.update_entity(entity, payload.model_dump(exclude_unset=True))
    activity.entity_updated(current_user.id, entity.world_id, entity.id, entity.name)
    return {"entity": entity}


@router.delete("/{entity_id}", response_model=OkResponse)
async def delete_entity(
    entity_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    entity_service: EntityService = Depends(get_service(EntityService)),
    permissions: PermissionService = Depends(get_service(PermissionService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    """Delete an entity; 404 when it does not exist."""
    entity = _load_entity(entity_id, entity_service)
    authorize_world(permissions, entity.world_id, current_user, MemberRole.EDITOR)
    world_id, name = entity.world_id, entity.name
    entity_service.delete_entity(entity_id)
    activity.entity_deleted(current_user.id, world_id, entity_id, name)
    return {"ok": True}
