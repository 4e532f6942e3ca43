# Query keys. Tuples, so invalidating a prefix covers every narrower key.
from typing import Optional, Tuple

QueryKey = Tuple


def worlds() -> QueryKey:
    return ("worlds",)


def world(world_id: str) -> QueryKey:
    return ("world", world_id)


def world_entities(world_id: str) -> QueryKey:
    return ("world-entities", world_id)


def world_folders(world_id: str) -> QueryKey:
    return ("world-folders", world_id)


def world_templates(world_id: str) -> QueryKey:
    return ("world-templates", world_id)


def world_relationships(world_id: str) -> QueryKey:
    return ("world-relationships", world_id)


def world_members(world_id: str) -> QueryKey:
    return ("world-members", world_id)


def world_invites(world_id: str) -> QueryKey:
    return ("world-invites", world_id)


def world_maps(world_id: str) -> QueryKey:
    return ("world-maps", world_id)


def map_markers(world_id: str, map_id: str) -> QueryKey:
    return ("map-markers", world_id, map_id)


def entity(entity_id: str) -> QueryKey:
    return ("entity", entity_id)


def profile() -> QueryKey:
    return ("profile",)


def user_activity(user_id: Optional[str] = None) -> QueryKey:
    return ("user-activity", user_id) if user_id else ("user-activity",)
