# worldforge/api/v1/worlds.py
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from worldforge.api.auth import CurrentUser, get_current_user
from worldforge.api.dependencies import WorldAccess, get_service, require_world_role
from worldforge.models.enums import MemberRole
from worldforge.models.world import World
from worldforge.schemas import (
    OkResponse, SeedingReport, WorldArchiveRequest, WorldCreate, WorldCreatedEnvelope,
    WorldEnvelope, WorldList, WorldResponse, WorldUpdate,
)
from worldforge.services.activity_service import ActivityService
from worldforge.services.rate_limit_service import RateLimitService
from worldforge.services.world_service import WorldService

router = APIRouter()


def to_world_response(world: World, role: Optional[MemberRole], entity_count: int = 0) -> WorldResponse:
    return WorldResponse.model_validate(world).model_copy(update={"role": role, "entity_count": entity_count})


@router.get("", response_model=WorldList)
async def list_worlds(
    include_archived: bool = Query(False, alias="includeArchived"),
    current_user: CurrentUser = Depends(get_current_user),
    world_service: WorldService = Depends(get_service(WorldService)),
):
    """List the worlds the current user belongs to."""
    rows = world_service.get_user_worlds(current_user.id, include_archived=include_archived)
    counts = world_service.count_entities([world.id for world, _ in rows])
    return {"worlds": [to_world_response(world, role, counts.get(world.id, 0)) for world, role in rows]}


@router.post("", response_model=WorldCreatedEnvelope, status_code=status.HTTP_201_CREATED)
async def create_world(
    payload: WorldCreate,
    current_user: CurrentUser = Depends(get_current_user),
    world_service: WorldService = Depends(get_service(WorldService)),
    rate_limits: RateLimitService = Depends(get_service(RateLimitService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    """
    Create a new world.

    The caller becomes its owner. The Core template folder is provisioned as
    part of creation; if that part fails the world is still returned, with
    ``seeding.status`` set to ``degraded``.
    """
    rate_limits.enforce("worlds.create", current_user.id)

    world, result = world_service.create_world(
        owner_id=current_user.id,
        name=payload.name,
        description=payload.description,
        is_public=bool(payload.is_public),
        settings=payload.extended_settings(),
    )
    activity.world_created(current_user.id, world.id, world.name)

    core = result.context.get("core_folder")
    seeding = SeedingReport(
        status=result.status,
        failed_steps=result.failed,
        templates_seeded=result.context.get("seed_templates", 0),
        core_folder_id=core.id if core is not None else None,
    )
    return {"world": to_world_response(world, MemberRole.OWNER), "seeding": seeding}


@router.get("/{world_id}", response_model=WorldEnvelope)
async def get_world(
    access: WorldAccess = Depends(require_world_role(MemberRole.VIEWER, allow_public_read=True)),
    world_service: WorldService = Depends(get_service(WorldService)),
):
    """Get a world. Members and, for public worlds, anyone signed in."""
    counts = world_service.count_entities([access.world.id])
    return {"world": to_world_response(access.world, access.role, counts.get(access.world.id, 0))}


@router.put("/{world_id}", response_model=WorldEnvelope)
async def update_world(
    payload: WorldUpdate,
    access: WorldAccess = Depends(require_world_role(MemberRole.ADMIN)),
    world_service: WorldService = Depends(get_service(WorldService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    """Update a world's name, description, visibility or archive flag."""
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    world = world_service.update_world(access.world, changes)
    activity.world_updated(access.user.id, world.id, world.name, sorted(changes))
    return {"world": to_world_response(world, access.role)}


@router.delete("/{world_id}", response_model=OkResponse)
async def delete_world(
    access: WorldAccess = Depends(require_world_role(MemberRole.OWNER)),
    world_service: WorldService = Depends(get_service(WorldService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    """Delete a world and everything in it. Owners only."""
    world_id, world_name = access.world.id, access.world.name
    world_service.delete_world(access.world)
    activity.world_deleted(access.user.id, world_id, world_name)
    return {"ok": True}


@router.post("/{world_id}/archive", response_model=WorldEnvelope)
async def archive_world(
    payload: WorldArchiveRequest,
    access: WorldAccess = Depends(require_world_role(MemberRole.ADMIN)),
    world_service: WorldService = Depends(get_service(WorldService)),
    activity: ActivityService = Depends(get_service(ActivityService)),
):
    world = world_service.archive_world(access.world, payload.archived)
    activity.world_archived(access.user.id, world.id, world.name, payload.archived)
    return {"world": to_world_response(world, access.role)}


@router.post("/{world_id}/seed-templates", response_model=SeedingReport)
async def seed_world_templates(
    access: WorldAccess = Depends(require_world_role(MemberRole.ADMIN)),
    world_service: WorldService = Depends(get_service(WorldService)),
):
    """Re-run Core template provisioning for a world. Idempotent."""
    inserted, core_folder_id = world_service.reseed_templates(access.world.id)
    return SeedingReport(status="complete", templates_seeded=inserted, core_folder_id=core_folder_id)
