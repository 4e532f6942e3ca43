from datetime import datetime, timedelta, timezone

from worldforge.models import World, WorldInvite, WorldMember


def roles(db, world_id):
    db.expire_all()
    return {m.user_id: m.role for m in db.query(WorldMember).filter_by(world_id=world_id)}


def test_list_members_includes_profiles(client, owner, make_user, create_world, add_member):
    world = create_world()
    viewer = make_user()
    add_member(world["id"], viewer, "viewer")

    members = client.get(f"/api/worlds/{world['id']}/members", headers=viewer.headers).json()["members"]

    by_user = {m["userId"]: m for m in members}
    assert by_user[owner.id]["role"] == "owner"
    assert by_user[owner.id]["email"] == owner.email
    assert by_user[viewer.id]["role"] == "viewer"


def test_admin_promotes_viewer(client, owner, make_user, create_world, add_member, db):
    world = create_world()
    admin, viewer = make_user(), make_user()
    add_member(world["id"], admin, "admin")
    member_id = add_member(world["id"], viewer, "viewer")

    response = client.put(f"/api/worlds/{world['id']}/members", json={"memberId": member_id, "role": "editor"},
                          headers=admin.headers)

    assert response.status_code == 200
    assert response.json()["member"]["role"] == "editor"
    assert roles(db, world["id"])[viewer.id] == "editor"


def test_admin_cannot_grant_ownership(client, make_user, create_world, add_member, db):
    world = create_world()
    admin, viewer = make_user(), make_user()
    add_member(world["id"], admin, "admin")
    member_id = add_member(world["id"], viewer, "viewer")

    response = client.put(f"/api/worlds/{world['id']}/members", json={"memberId": member_id, "role": "owner"},
                          headers=admin.headers)

    assert response.status_code == 403
    assert roles(db, world["id"])[viewer.id] == "viewer"


def test_sole_owner_cannot_be_demoted(client, owner, create_world, db):
    world = create_world()
    owner_member = db.query(WorldMember).filter_by(world_id=world["id"], user_id=owner.id).one()

    response = client.put(f"/api/worlds/{world['id']}/members",
                          json={"memberId": owner_member.id, "role": "admin"}, headers=owner.headers)

    assert response.status_code == 403
    assert roles(db, world["id"])[owner.id] == "owner"


def test_sole_owner_cannot_leave(client, owner, create_world, db):
    world = create_world()

    response = client.delete(f"/api/worlds/{world['id']}/members", params={"memberId": owner.id},
                             headers=owner.headers)

    assert response.status_code == 403
    assert roles(db, world["id"])[owner.id] == "owner"


def test_co_owner_leaving_hands_over_world(client, owner, make_user, create_world, add_member, db):
    world = create_world()
    co_owner = make_user()
    add_member(world["id"], co_owner, "owner")

    response = client.delete(f"/api/worlds/{world['id']}/members", params={"memberId": owner.id},
                             headers=owner.headers)

    assert response.status_code == 200
    assert owner.id not in roles(db, world["id"])
    assert db.query(World).filter_by(id=world["id"]).one().owner_id == co_owner.id


def test_non_admin_cannot_remove_others(client, owner, make_user, create_world, add_member, db):
    world = create_world()
    editor, viewer = make_user(), make_user()
    add_member(world["id"], editor, "editor")
    viewer_member = add_member(world["id"], viewer, "viewer")
    before = roles(db, world["id"])

    response = client.delete(f"/api/worlds/{world['id']}/members", params={"memberId": viewer_member},
                             headers=editor.headers)

    assert response.status_code == 403
    assert roles(db, world["id"]) == before


def test_viewer_can_leave(client, make_user, create_world, add_member, db):
    world = create_world()
    viewer = make_user()
    add_member(world["id"], viewer, "viewer")

    response = client.delete(f"/api/worlds/{world['id']}/members", params={"memberId": viewer.id},
                             headers=viewer.headers)

    assert response.status_code == 200
    assert viewer.id not in roles(db, world["id"])


def test_unknown_member_is_not_found(client, owner, create_world):
    world = create_world()

    response = client.delete(f"/api/worlds/{world['id']}/members", params={"memberId": "nobody"},
                             headers=owner.headers)

    assert response.status_code == 404


# Invites

def invite(client, world_id, user, email="guest@example.com", role="editor"):
    response = client.post(f"/api/worlds/{world_id}/invites", json={"email": email, "role": role},
                           headers=user.headers)
    assert response.status_code == 201, response.text
    return response.json()["invite"]


def test_invite_and_accept(client, owner, make_user, create_world, db):
    world = create_world()
    guest = make_user("Guest@Example.com")
    created = invite(client, world["id"], owner)
    assert created["email"] == "guest@example.com"

    response = client.post("/api/invites/accept", json={"token": created["token"]}, headers=guest.headers)

    assert response.status_code == 200
    assert response.json() == {"ok": True, "accepted": True, "worldId": world["id"]}
    assert roles(db, world["id"])[guest.id] == "editor"
    assert client.get(f"/api/worlds/{world['id']}/invites", headers=owner.headers).json()["invites"] == []


def test_invite_cannot_be_reused(client, owner, make_user, create_world):
    world = create_world()
    guest = make_user("guest@example.com")
    token = invite(client, world["id"], owner)["token"]

    assert client.post("/api/invites/accept", json={"token": token}, headers=guest.headers).status_code == 200
    again = client.post("/api/invites/accept", json={"token": token}, headers=guest.headers)

    assert again.status_code == 400
    assert again.json() == {"ok": False, "accepted": False}


def test_invalid_invite_token(client, make_user, create_world, db):
    world = create_world()
    guest = make_user("guest@example.com")

    response = client.post("/api/invites/accept", json={"token": "bogus"}, headers=guest.headers)

    assert response.status_code == 400
    assert response.json() == {"ok": False, "accepted": False}
    assert guest.id not in roles(db, world["id"])


def test_expired_invite_is_rejected(client, owner, make_user, create_world, db):
    world = create_world()
    guest = make_user("guest@example.com")
    created = invite(client, world["id"], owner)
    row = db.query(WorldInvite).filter_by(id=created["id"]).one()
    row.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.commit()

    response = client.post("/api/invites/accept", json={"token": created["token"]}, headers=guest.headers)

    assert response.status_code == 400
    assert guest.id not in roles(db, world["id"])


def test_invite_for_another_email_is_rejected(client, owner, make_user, create_world, db):
    world = create_world()
    intruder = make_user("intruder@example.com")
    token = invite(client, world["id"], owner)["token"]

    response = client.post("/api/invites/accept", json={"token": token}, headers=intruder.headers)

    assert response.status_code == 400
    assert intruder.id not in roles(db, world["id"])


def test_revoked_invite_is_gone(client, owner, make_user, create_world):
    world = create_world()
    created = invite(client, world["id"], owner)

    assert client.delete(f"/api/worlds/{world['id']}/invites/{created['id']}", headers=owner.headers).status_code == 200
    missing = client.delete(f"/api/worlds/{world['id']}/invites/{created['id']}", headers=owner.headers)

    assert missing.status_code == 404


def test_revoked_invite_cannot_be_accepted(client, owner, make_user, create_world, db):
    world = create_world()
    guest = make_user("guest@example.com")
    created = invite(client, world["id"], owner)

    client.delete(f"/api/worlds/{world['id']}/invites/{created['id']}", headers=owner.headers)
    response = client.post("/api/invites/accept", json={"token": created["token"]}, headers=guest.headers)

    assert response.status_code == 400
    assert db.query(WorldInvite).filter_by(id=created["id"]).one().revoked_at is not None
    assert client.get(f"/api/worlds/{world['id']}/invites", headers=owner.headers).json()["invites"] == []
    assert guest.id not in roles(db, world["id"])


def test_invites_cannot_grant_ownership(client, owner, create_world):
    world = create_world()

    response = client.post(f"/api/worlds/{world['id']}/invites", json={"email": "x@example.com", "role": "owner"},
                           headers=owner.headers)

    assert response.status_code == 400
    assert response.json()["issues"][0]["path"] == "role"


def test_invites_are_rate_limited(client, owner, create_world):
    world = create_world()
    for i in range(10):
        invite(client, world["id"], owner, email=f"guest{i}@example.com")

    response = client.post(f"/api/worlds/{world['id']}/invites", json={"email": "late@example.com"},
                           headers=owner.headers)

    assert response.status_code == 429
