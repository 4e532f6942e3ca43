# Mutations: server writes plus the cache bookkeeping that follows them
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from worldforge_client import keys
from worldforge_client.api import ApiClient
from worldforge_client.query_cache import QueryCache, QueryKey

logger = logging.getLogger(__name__)


class Mutation:
    """
    One write with a lifecycle:

    ``on_mutate(variables)`` runs first and may return a context (e.g. a
    snapshot for rollback); then the write; then ``on_success`` or
    ``on_error(error, variables, context)``; then ``on_settled`` and the
    invalidation of every key in ``invalidates``, whether the write failed
    or not.
    """

    def __init__(
        self,
        cache: QueryCache,
        mutation_fn: Callable[[Any], Awaitable[Any]],
        invalidates: Optional[Callable[[Any], List[QueryKey]]] = None,
        on_mutate: Optional[Callable[[Any], Awaitable[Any]]] = None,
        on_success: Optional[Callable[[Any, Any, Any], None]] = None,
        on_error: Optional[Callable[[Exception, Any, Any], None]] = None,
        on_settled: Optional[Callable[[Any, Optional[Exception], Any, Any], None]] = None,
    ):
        self.cache = cache
        self.mutation_fn = mutation_fn
        self.invalidates = invalidates
        self.on_mutate = on_mutate
        self.on_success = on_success
        self.on_error = on_error
        self.on_settled = on_settled

    def keys_for(self, variables: Any) -> List[QueryKey]:
        return self.invalidates(variables) if self.invalidates else []

    async def execute(self, variables: Any = None) -> Any:
        context = await self.on_mutate(variables) if self.on_mutate else None
        result, error = None, None
        try:
            result = await self.mutation_fn(variables)
            if self.on_success:
                self.on_success(result, variables, context)
            return result
        except Exception as e:
            error = e
            if self.on_error:
                self.on_error(e, variables, context)
            raise
        finally:
            if self.on_settled:
                self.on_settled(result, error, variables, context)
            for key in self.keys_for(variables):
                self.cache.invalidate(key)


class WorldforgeMutations:
    """Every write the client performs, with the query keys it invalidates."""

    def __init__(self, api: ApiClient, cache: QueryCache):
        self.api = api
        self.cache = cache

    def _mutation(self, fn, invalidates, **hooks) -> Mutation:
        return Mutation(self.cache, fn, invalidates, **hooks)

    # Worlds

    def create_world(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.post("/worlds", v),
            lambda v: [keys.worlds()],
        )

    def update_world(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.put(f"/worlds/{v['world_id']}", v["data"]),
            lambda v: [keys.worlds(), keys.world(v["world_id"])],
        )

    def archive_world(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.post(f"/worlds/{v['world_id']}/archive", {"archived": v.get("archived", True)}),
            lambda v: [keys.worlds(), keys.world(v["world_id"])],
        )

    def delete_world(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.delete(f"/worlds/{v['world_id']}"),
            lambda v: [keys.worlds(), keys.world(v["world_id"])],
        )

    # Entities

    def create_entity(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.post(f"/worlds/{v['world_id']}/entities", v["data"]),
            lambda v: [keys.world_entities(v["world_id"]), keys.world_folders(v["world_id"]), keys.world(v["world_id"])],
        )

    def update_entity(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.put(f"/entities/{v['entity_id']}", v["data"]),
            lambda v: [keys.entity(v["entity_id"]), keys.world_entities(v["world_id"]), keys.world_folders(v["world_id"])],
        )

    def delete_entity(self) -> Mutation:
        """
        Optimistic delete: the entity leaves the cached list at once and the
        exact previous list comes back if the server refuses.
        """
        async def on_mutate(v: Dict[str, Any]):
            list_key = keys.world_entities(v["world_id"])
            await self.cache.cancel(list_key)
            previous = self.cache.get_data(list_key)
            if previous is not None:
                self.cache.set_data(list_key, [item for item in previous if item.get("id") != v["entity_id"]])
            return {"previous": previous}

        def on_error(error: Exception, v: Dict[str, Any], context: Optional[Dict[str, Any]]):
            logger.warning(f"Deleting entity {v['entity_id']} failed, restoring list: {error}")
            if context and context["previous"] is not None:
                self.cache.set_data(keys.world_entities(v["world_id"]), context["previous"])

        return self._mutation(
            lambda v: self.api.delete(f"/entities/{v['entity_id']}"),
            lambda v: [keys.world_entities(v["world_id"]), keys.world_folders(v["world_id"]), keys.entity(v["entity_id"])],
            on_mutate=on_mutate,
            on_error=on_error,
        )

    # Folders, templates, relationships

    def create_folder(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.post(f"/worlds/{v['world_id']}/folders", v["data"]),
            lambda v: [keys.world_folders(v["world_id"])],
        )

    def update_folder(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.put(f"/folders/{v['folder_id']}", v["data"]),
            lambda v: [keys.world_folders(v["world_id"])],
        )

    def delete_folder(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.delete(f"/folders/{v['folder_id']}"),
            lambda v: [keys.world_folders(v["world_id"]), keys.world_entities(v["world_id"]),
                       keys.world_templates(v["world_id"])],
        )

    def create_template(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.post(f"/worlds/{v['world_id']}/templates", v["data"]),
            lambda v: [keys.world_templates(v["world_id"]), keys.world_folders(v["world_id"])],
        )

    def update_template(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.put(f"/templates/{v['template_id']}", {**v["data"], "worldId": v["world_id"]}),
            lambda v: [keys.world_templates(v["world_id"])],
        )

    def delete_template(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.delete(f"/templates/{v['template_id']}"),
            lambda v: [keys.world_templates(v["world_id"]), keys.world_folders(v["world_id"])],
        )

    def create_relationship(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.post(f"/worlds/{v['world_id']}/relationships", v["data"]),
            lambda v: [keys.world_relationships(v["world_id"])],
        )

    def update_relationship(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.put(f"/relationships/{v['relationship_id']}", v["data"]),
            lambda v: [keys.world_relationships(v["world_id"])],
        )

    def delete_relationship(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.delete(f"/relationships/{v['relationship_id']}"),
            lambda v: [keys.world_relationships(v["world_id"])],
        )

    # Members and invites

    def update_member_role(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.put(f"/worlds/{v['world_id']}/members", {"memberId": v["member_id"], "role": v["role"]}),
            lambda v: [keys.world_members(v["world_id"])],
        )

    def remove_member(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.delete(f"/worlds/{v['world_id']}/members", params={"memberId": v["member_id"]}),
            lambda v: [keys.world_members(v["world_id"]), keys.worlds()],
        )

    def create_invite(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.post(f"/worlds/{v['world_id']}/invites", v["data"]),
            lambda v: [keys.world_invites(v["world_id"])],
        )

    def revoke_invite(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.delete(f"/worlds/{v['world_id']}/invites/{v['invite_id']}"),
            lambda v: [keys.world_invites(v["world_id"])],
        )

    def accept_invite(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.post("/invites/accept", {"token": v["token"]}),
            lambda v: [keys.worlds()],
        )

    # Maps

    def create_map(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.post(f"/worlds/{v['world_id']}/maps", v["data"]),
            lambda v: [keys.world_maps(v["world_id"])],
        )

    def delete_map(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.delete(f"/worlds/{v['world_id']}/maps/{v['map_id']}"),
            lambda v: [keys.world_maps(v["world_id"]), keys.map_markers(v["world_id"], v["map_id"])],
        )

    def upload_map_image(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.upload(
                f"/worlds/{v['world_id']}/maps/upload",
                files={"file": (v["filename"], v["content"], v["content_type"])},
                data={"mapId": v["map_id"]},
            ),
            lambda v: [keys.world_maps(v["world_id"])],
        )

    def create_marker(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.post(f"/worlds/{v['world_id']}/maps/{v['map_id']}/markers", v["data"]),
            lambda v: [keys.map_markers(v["world_id"], v["map_id"])],
        )

    def delete_marker(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.delete(f"/worlds/{v['world_id']}/maps/{v['map_id']}/markers",
                                      params={"markerId": v["marker_id"]}),
            lambda v: [keys.map_markers(v["world_id"], v["map_id"])],
        )

    # Profile

    def update_profile(self) -> Mutation:
        return self._mutation(
            lambda v: self.api.put("/profile", v),
            lambda v: [keys.profile(), keys.user_activity()],
        )
