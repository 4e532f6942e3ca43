# worldforge/api/v1/relationships.py
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from worldforge.api.auth import CurrentUser, get_current_user
from worldforge.api.dependencies import WorldAccess, authorize_world, get_service, require_world_role
from worldforge.errors import NotFound
from worldforge.models.enums import ActivityAction, MemberRole
from worldforge.models.relationship import Relationship
from worldforge.schemas import (
    OkResponse, RelationshipCreate, RelationshipEnvelope, RelationshipList, RelationshipUpdate,
)
from worldforge.services.activity_service import ActivityService
from worldforge.services.permission_service import PermissionService
from worldforge.services.relationship_service import RelationshipService

world_router = APIRouter()
router = APIRouter()


@world_router.get("/{world_id}/relationships", response_model=RelationshipList)
async def list_relationships(
    entity_id: Optional[str] = Query(None, alias="entityId"),
    access: WorldAccess = Depends(require_world_role(MemberRole.VIEWER, allow_public_read=True)),
    relationship_service: RelationshipService = Depends(get_service(RelationshipService)),
):
    return {"relationships": relationship_service.get_world_relationships(access.world.id, entity_id)}


@world_router.post("/{world_id}/relationships", response_model=RelationshipEnvelope,
                   status_code=status.HTTP_201_CREATED)
async def create_relationship(
    payload: RelationshipCreate,
    access: WorldAccess = Depends(require_world_role(MemberRole.EDITOR)),
    relationship_service: RelationshipService = Depends(get_service(RelationshipService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    relationship = relationship_service.create_relationship(access.world.id, payload.model_dump())
    activity.log(access.user.id, ActivityAction.CREATE_RELATIONSHIP,
                 f"Linked entities as {relationship.relationship_type}",
                 world_id=access.world.id, resource_type="relationship", resource_id=relationship.id)
    return {"relationship": relationship}


def _load_relationship(relationship_id: str, relationship_service: RelationshipService) -> Relationship:
    relationship = relationship_service.get_relationship(relationship_id)
    if not relationship:
        raise NotFound("Relationship", relationship_id)
    return relationship


@router.put("/{relationship_id}", response_model=RelationshipEnvelope)
async def update_relationship(
    relationship_id: str,
    payload: RelationshipUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    relationship_service: RelationshipService = Depends(get_service(RelationshipService)),
    permissions: PermissionService = Depends(get_service(PermissionService)),
):
    relationship = _load_relationship(relationship_id, relationship_service)
    authorize_world(permissions, relationship.world_id, current_user, MemberRole.EDITOR)
    relationship = relationship_service.update_relationship(relationship, payload.model_dump(exclude_unset=True))
    return {"relationship": relationship}


@router.delete("/{relationship_id}", response_model=OkResponse)
async def delete_relationship(
    relationship_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    relationship_service: RelationshipService = Depends(get_service(RelationshipService)),
    permissions: PermissionService = Depends(get_service(PermissionService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    relationship = _load_relationship(relationship_id, relationship_service)
    authorize_world(permissions, relationship.world_id, current_user, MemberRole.EDITOR)
    world_id = relationship.world_id
    relationship_service.delete_relationship(relationship)
    activity.log(current_user.id, ActivityAction.DELETE_RELATIONSHIP, "Removed a relationship",
                 world_id=world_id, resource_type="relationship", resource_id=relationship_id)
    return {"ok": True}
