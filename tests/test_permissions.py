import pytest

from worldforge.models.enums import MemberRole
from worldforge.services.permission_service import PermissionService

OWNER, ADMIN, EDITOR, VIEWER = MemberRole.OWNER, MemberRole.ADMIN, MemberRole.EDITOR, MemberRole.VIEWER


def test_role_order():
    assert OWNER > ADMIN > EDITOR > VIEWER
    assert ADMIN.satisfies(EDITOR)
    assert not VIEWER.satisfies(EDITOR)


@pytest.mark.parametrize(
    "actor, target, new_role, owners, allowed",
    [
        (None, VIEWER, EDITOR, 1, False),
        (VIEWER, VIEWER, EDITOR, 1, False),
        (EDITOR, VIEWER, None, 1, False),
        (ADMIN, VIEWER, EDITOR, 1, True),
        (ADMIN, EDITOR, None, 1, True),
        (ADMIN, ADMIN, VIEWER, 1, True),
        (ADMIN, OWNER, ADMIN, 2, False),
        (ADMIN, VIEWER, OWNER, 1, False),
        (OWNER, VIEWER, OWNER, 1, True),
        (OWNER, OWNER, ADMIN, 1, False),
        (OWNER, OWNER, None, 1, False),
        (OWNER, OWNER, ADMIN, 2, True),
    ],
)
def test_can_change_member(actor, target, new_role, owners, allowed):
    result, reason = PermissionService.can_change_member(actor, target, new_role, owners)

    assert result is allowed
    assert (reason is None) is allowed


@pytest.mark.parametrize(
    "role, status",
    [("viewer", 403), ("editor", 201), ("admin", 201), ("owner", 201)],
)
def test_entity_creation_needs_editor(client, make_user, create_world, add_member, role, status):
    world = create_world()
    user = make_user()
    add_member(world["id"], user, role)

    response = client.post(f"/api/worlds/{world['id']}/entities", json={"name": "Mira"}, headers=user.headers)

    assert response.status_code == status


def test_non_member_cannot_read_private_world(client, make_user, create_world):
    world = create_world()
    stranger = make_user()

    response = client.get(f"/api/worlds/{world['id']}", headers=stranger.headers)

    assert response.status_code == 403
    assert response.json()["details"] == {"required": "viewer", "actual": None}


def test_public_world_is_readable_but_not_writable(client, make_user, create_world):
    world = create_world(isPublic=True)
    stranger = make_user()

    read = client.get(f"/api/worlds/{world['id']}", headers=stranger.headers)
    assert read.status_code == 200
    assert read.json()["world"]["role"] is None
    assert client.get(f"/api/worlds/{world['id']}/entities", headers=stranger.headers).status_code == 200

    write = client.post(f"/api/worlds/{world['id']}/entities", json={"name": "Intruder"}, headers=stranger.headers)
    assert write.status_code == 403


def test_permission_check_runs_before_body_validation(client, make_user, create_world, add_member):
    world = create_world()
    viewer = make_user()
    add_member(world["id"], viewer, "viewer")

    response = client.post(f"/api/worlds/{world['id']}/entities", json={"name": ""}, headers=viewer.headers)

    assert response.status_code == 403


def test_world_update_needs_admin(client, make_user, create_world, add_member):
    world = create_world()
    editor = make_user()
    add_member(world["id"], editor, "editor")

    response = client.put(f"/api/worlds/{world['id']}", json={"name": "Taken over"}, headers=editor.headers)

    assert response.status_code == 403
