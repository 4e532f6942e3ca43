# worldforge/api/dependencies.py
from dataclasses import dataclass
from typing import Callable, Optional, Type
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from worldforge.api.auth import CurrentUser, get_current_user
from worldforge.config import Settings
from worldforge.database import get_db
from worldforge.models.enums import MemberRole
from worldforge.models.world import World
from worldforge.services.health_service import HealthService
from worldforge.services.permission_service import PermissionService
from worldforge.services.storage_service import StorageService


def get_service(service_class: Type) -> Callable:
    """Factory function to create service dependencies with DB injection"""
    def _get_service(db: Session = Depends(get_db)):
        return service_class(db)
    return _get_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage_service(request: Request) -> StorageService:
    return StorageService(request.app.state.admin_client, request.app.state.settings.MAPS_BUCKET)


def get_health_service(request: Request) -> HealthService:
    return HealthService(
        request.app.state.session_factory,
        request.app.state.admin_client,
        slow_threshold_ms=request.app.state.settings.HEALTH_SLOW_THRESHOLD_MS,
    )


@dataclass
class WorldAccess:
    world: World
    role: Optional[MemberRole]
    user: CurrentUser


def require_world_role(required: MemberRole, allow_public_read: bool = False) -> Callable:
    """
    Dependency factory: resolve ``world_id`` from the path and make sure the
    current user holds at least ``required`` on that world.
    """
    def _require(
        world_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        permissions: PermissionService = Depends(get_service(PermissionService)),
    ) -> WorldAccess:
        world, role = permissions.require_role(
            world_id, current_user.id, required, allow_public_read=allow_public_read
        )
        return WorldAccess(world=world, role=role, user=current_user)
    return _require


def authorize_world(
    permissions: PermissionService,
    world_id: str,
    current_user: CurrentUser,
    required: MemberRole,
    allow_public_read: bool = False,
) -> WorldAccess:
    """Same check for routes that only learn the world from the resource they load."""
    world, role = permissions.require_role(world_id, current_user.id, required, allow_public_read=allow_public_read)
    return WorldAccess(world=world, role=role, user=current_user)
