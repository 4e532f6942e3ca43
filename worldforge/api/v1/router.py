# worldforge/api/v1/router.py
from fastapi import APIRouter
from worldforge.api.v1 import (
    admin, csrf, entities, folders, health, invites, maps, members, profile, relationships, templates, worlds,
)

# Create the main router
api_router = APIRouter()

# World-scoped routes share the /worlds prefix
api_router.include_router(worlds.router, prefix="/worlds", tags=["worlds"])
api_router.include_router(members.router, prefix="/worlds", tags=["members"])
api_router.include_router(invites.world_router, prefix="/worlds", tags=["invites"])
api_router.include_router(folders.world_router, prefix="/worlds", tags=["folders"])
api_router.include_router(templates.world_router, prefix="/worlds", tags=["templates"])
api_router.include_router(entities.world_router, prefix="/worlds", tags=["entities"])
api_router.include_router(relationships.world_router, prefix="/worlds", tags=["relationships"])
api_router.include_router(maps.router, prefix="/worlds", tags=["maps"])

api_router.include_router(invites.router, prefix="/invites", tags=["invites"])
api_router.include_router(folders.router, prefix="/folders", tags=["folders"])
api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
api_router.include_router(entities.router, prefix="/entities", tags=["entities"])
api_router.include_router(relationships.router, prefix="/relationships", tags=["relationships"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(csrf.router, prefix="/csrf", tags=["csrf"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
