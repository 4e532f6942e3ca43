# Read side of the client: cached queries over the API
from typing import Any, Dict, List, Optional

from worldforge_client import keys
from worldforge_client.api import ApiClient
from worldforge_client.query_cache import QueryCache


class WorldforgeQueries:
    """Cached reads. Each method returns the unwrapped payload of its endpoint."""

    def __init__(self, api: ApiClient, cache: QueryCache):
        self.api = api
        self.cache = cache

    async def _list(self, key, endpoint: str, field: str, params: Optional[Dict[str, Any]] = None,
                    force: bool = False) -> List[Dict[str, Any]]:
        async def fetcher():
            response = await self.api.get(endpoint, params=params)
            return response.get(field, [])
        return await self.cache.fetch(key, fetcher, force=force)

    async def _item(self, key, endpoint: str, field: str, force: bool = False) -> Dict[str, Any]:
        async def fetcher():
            response = await self.api.get(endpoint)
            return response.get(field)
        return await self.cache.fetch(key, fetcher, force=force)

    async def worlds(self, include_archived: bool = False, force: bool = False):
        key = keys.worlds() + (("archived",) if include_archived else ())
        params = {"includeArchived": "true"} if include_archived else None
        return await self._list(key, "/worlds", "worlds", params, force)

    async def world(self, world_id: str, force: bool = False):
        return await self._item(keys.world(world_id), f"/worlds/{world_id}", "world", force)

    async def entities(self, world_id: str, force: bool = False):
        return await self._list(keys.world_entities(world_id), f"/worlds/{world_id}/entities", "entities",
                                force=force)

    async def entity(self, entity_id: str, force: bool = False):
        return await self._item(keys.entity(entity_id), f"/entities/{entity_id}", "entity", force)

    async def folders(self, world_id: str, force: bool = False):
        return await self._list(keys.world_folders(world_id), f"/worlds/{world_id}/folders", "folders",
                                force=force)

    async def templates(self, world_id: str, force: bool = False):
        return await self._list(keys.world_templates(world_id), f"/worlds/{world_id}/templates", "templates",
                                force=force)

    async def relationships(self, world_id: str, force: bool = False):
        return await self._list(keys.world_relationships(world_id), f"/worlds/{world_id}/relationships",
                                "relationships", force=force)

    async def members(self, world_id: str, force: bool = False):
        return await self._list(keys.world_members(world_id), f"/worlds/{world_id}/members", "members",
                                force=force)

    async def invites(self, world_id: str, force: bool = False):
        return await self._list(keys.world_invites(world_id), f"/worlds/{world_id}/invites", "invites",
                                force=force)

    async def maps(self, world_id: str, force: bool = False):
        return await self._list(keys.world_maps(world_id), f"/worlds/{world_id}/maps", "maps", force=force)

    async def markers(self, world_id: str, map_id: str, force: bool = False):
        return await self._list(keys.map_markers(world_id, map_id), f"/worlds/{world_id}/maps/{map_id}/markers",
                                "markers", force=force)

    async def profile(self, force: bool = False):
        return await self._item(keys.profile(), "/profile", "profile", force)

    async def activity(self, limit: int = 50, force: bool = False):
        return await self._list(keys.user_activity(), "/profile/activity", "activities", {"limit": limit}, force)
