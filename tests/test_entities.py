import pytest

from worldforge.models import Entity, Relationship, Template
from worldforge.services.entity_service import validate_entity_fields

FIELDS = [
    {"id": "tf-age", "name": "Age", "type": "number"},
    {"id": "tf-title", "name": "Title", "type": "shortText", "required": True},
    {"id": "tf-align", "name": "Alignment", "type": "select", "options": ["good", "evil"]},
    {"id": "tf-traits", "name": "Traits", "type": "multiSelect", "options": ["brave", "sly"]},
    {"id": "tf-ally", "name": "Ally", "type": "reference"},
]


@pytest.mark.parametrize(
    "values, paths",
    [
        ({"tf-title": "Queen", "tf-age": 41, "tf-align": "good", "tf-traits": ["sly"], "tf-ally": "e-1"}, []),
        ({"tf-title": "Queen", "tf-ally": ["e-1", "e-2"], "tf-age": 3.5}, []),
        ({}, ["fields.tf-title"]),
        ({"tf-title": "Queen", "tf-age": "old"}, ["fields.tf-age"]),
        ({"tf-title": "Queen", "tf-age": True}, ["fields.tf-age"]),
        ({"tf-title": "Queen", "tf-align": "neutral"}, ["fields.tf-align"]),
        ({"tf-title": "Queen", "tf-traits": ["brave", "loud"]}, ["fields.tf-traits"]),
        ({"tf-title": "Queen", "tf-ally": [1]}, ["fields.tf-ally"]),
        ({"tf-title": 7}, ["fields.tf-title"]),
        ({"tf-title": "Queen", "tf-extra": "x"}, ["fields.tf-extra"]),
    ],
)
def test_validate_entity_fields(values, paths):
    issues = validate_entity_fields(FIELDS, values)

    assert sorted(issue["path"] for issue in issues) == sorted(paths)


@pytest.fixture
def world(create_world):
    return create_world()


@pytest.fixture
def template_id(client, owner, world):
    response = client.post(
        f"/api/worlds/{world['id']}/templates",
        json={"name": "Ruler", "fields": FIELDS},
        headers=owner.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["template"]["id"]


def new_entity(client, world, user, **data):
    response = client.post(f"/api/worlds/{world['id']}/entities", json={"name": "Mira", **data},
                           headers=user.headers)
    assert response.status_code == 201, response.text
    return response.json()["entity"]


def test_create_entity_with_template(client, owner, world, template_id):
    entity = new_entity(client, world, owner, templateId=template_id,
                        fields={"tf-title": "Queen", "tf-align": "good"}, tags=["royal"])

    assert entity["templateId"] == template_id
    assert entity["fields"] == {"tf-title": "Queen", "tf-align": "good"}
    assert entity["tags"] == ["royal"]


def test_create_entity_rejects_bad_fields(client, owner, world, template_id, db):
    response = client.post(
        f"/api/worlds/{world['id']}/entities",
        json={"name": "Mira", "templateId": template_id, "fields": {"tf-align": "neutral"}},
        headers=owner.headers,
    )

    assert response.status_code == 400
    assert {issue["path"] for issue in response.json()["issues"]} == {"fields.tf-title", "fields.tf-align"}
    assert db.query(Entity).count() == 0


def test_create_entity_with_foreign_template(client, owner, make_user, world, create_world):
    other_owner = make_user()
    other_world = create_world("Elsewhere", user=other_owner)
    foreign = client.post(f"/api/worlds/{other_world['id']}/templates", json={"name": "Alien"},
                          headers=other_owner.headers).json()["template"]

    response = client.post(f"/api/worlds/{world['id']}/entities",
                           json={"name": "Mira", "templateId": foreign["id"]}, headers=owner.headers)

    assert response.status_code == 404


def test_update_entity_revalidates(client, owner, world, template_id):
    entity = new_entity(client, world, owner, templateId=template_id, fields={"tf-title": "Queen"})

    bad = client.put(f"/api/entities/{entity['id']}", json={"fields": {"tf-age": "ancient", "tf-title": "Queen"}},
                     headers=owner.headers)
    good = client.put(f"/api/entities/{entity['id']}", json={"name": "Mira II", "fields": {"tf-title": "Empress"}},
                      headers=owner.headers)

    assert bad.status_code == 400
    assert good.status_code == 200
    assert good.json()["entity"]["name"] == "Mira II"
    assert good.json()["entity"]["fields"] == {"tf-title": "Empress"}


def test_list_entities_filters(client, owner, world):
    new_entity(client, world, owner, name="Mira", summary="Queen of tides")
    new_entity(client, world, owner, name="Oren", summary="Smuggler")

    everything = client.get(f"/api/worlds/{world['id']}/entities", headers=owner.headers).json()["entities"]
    found = client.get(f"/api/worlds/{world['id']}/entities", params={"q": "tide"},
                       headers=owner.headers).json()["entities"]

    assert len(everything) == 2
    assert [e["name"] for e in found] == ["Mira"]


def test_delete_missing_entity_is_not_found(client, owner):
    response = client.delete("/api/entities/missing-id", headers=owner.headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Entity not found"


def test_delete_entity_removes_relationships(client, owner, world, db):
    a = new_entity(client, world, owner, name="Mira")
    b = new_entity(client, world, owner, name="Oren")
    link = client.post(f"/api/worlds/{world['id']}/relationships",
                       json={"fromEntityId": a["id"], "toEntityId": b["id"], "relationshipType": "rival"},
                       headers=owner.headers)
    assert link.status_code == 201

    response = client.delete(f"/api/entities/{a['id']}", headers=owner.headers)

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert db.query(Entity).filter_by(id=a["id"]).count() == 0
    assert db.query(Relationship).count() == 0
    assert client.delete(f"/api/entities/{a['id']}", headers=owner.headers).status_code == 404


def test_viewer_cannot_delete_entity(client, owner, make_user, world, add_member, db):
    entity = new_entity(client, world, owner)
    viewer = make_user()
    add_member(world["id"], viewer, "viewer")

    response = client.delete(f"/api/entities/{entity['id']}", headers=viewer.headers)

    assert response.status_code == 403
    assert db.query(Entity).filter_by(id=entity["id"]).count() == 1


# Relationships

def test_relationship_rules(client, owner, world):
    a = new_entity(client, world, owner, name="Mira")
    b = new_entity(client, world, owner, name="Oren")
    url = f"/api/worlds/{world['id']}/relationships"

    self_link = client.post(url, json={"fromEntityId": a["id"], "toEntityId": a["id"], "relationshipType": "self"},
                            headers=owner.headers)
    missing = client.post(url, json={"fromEntityId": a["id"], "toEntityId": "ghost", "relationshipType": "ally"},
                          headers=owner.headers)
    created = client.post(
        url,
        json={"fromEntityId": a["id"], "toEntityId": b["id"], "relationshipType": "ally",
              "strength": 7, "metadata": {"since": "the flood"}},
        headers=owner.headers,
    )

    assert self_link.status_code == 400
    assert missing.status_code == 404
    assert created.status_code == 201
    assert created.json()["relationship"]["metadata"] == {"since": "the flood"}

    listed = client.get(url, params={"entityId": b["id"]}, headers=owner.headers).json()["relationships"]
    assert [r["relationshipType"] for r in listed] == ["ally"]


# Folders

def test_folder_counts_and_kind_checks(client, owner, world, template_id):
    folders_url = f"/api/worlds/{world['id']}/folders"
    people = client.post(folders_url, json={"name": "People"}, headers=owner.headers).json()["folder"]
    assert people["kind"] == "entities"
    new_entity(client, world, owner, folderId=people["id"])

    template_folder = client.post(folders_url, json={"name": "Mine", "kind": "templates"},
                                  headers=owner.headers).json()["folder"]
    misfiled = client.post(f"/api/worlds/{world['id']}/entities",
                           json={"name": "Lost", "folderId": template_folder["id"]}, headers=owner.headers)
    assert misfiled.status_code == 400

    folders = {f["name"]: f for f in client.get(folders_url, headers=owner.headers).json()["folders"]}
    assert folders["People"]["count"] == 1
    assert folders["Core"]["count"] > 0

    only_entities = client.get(folders_url, params={"kind": "entities"}, headers=owner.headers).json()["folders"]
    assert [f["name"] for f in only_entities] == ["People"]


def test_deleting_folder_keeps_its_entities(client, owner, world, db):
    folder = client.post(f"/api/worlds/{world['id']}/folders", json={"name": "People"},
                         headers=owner.headers).json()["folder"]
    entity = new_entity(client, world, owner, folderId=folder["id"])

    response = client.delete(f"/api/folders/{folder['id']}", headers=owner.headers)

    assert response.status_code == 200
    db.expire_all()
    assert db.query(Entity).filter_by(id=entity["id"]).one().folder_id is None


# Templates

def test_system_templates_cannot_be_deleted(client, owner, world, db):
    system = db.query(Template).filter_by(is_system=True).first()

    response = client.delete(f"/api/templates/{system.id}", headers=owner.headers)

    assert response.status_code == 403
    assert db.query(Template).filter_by(id=system.id).count() == 1


def test_updating_system_template_saves_world_override(client, owner, world, db):
    system = db.query(Template).filter_by(is_system=True, name="Character").first()
    original_description = system.description

    response = client.put(f"/api/templates/{system.id}",
                          json={"worldId": world["id"], "description": "Our own take"}, headers=owner.headers)

    assert response.status_code == 200
    override = response.json()["template"]
    assert override["id"] != system.id
    assert override["worldId"] == world["id"]
    assert override["isSystem"] is False
    assert override["description"] == "Our own take"

    db.expire_all()
    assert db.query(Template).filter_by(id=system.id).one().description == original_description
    names = [t["name"] for t in client.get(f"/api/worlds/{world['id']}/templates",
                                           headers=owner.headers).json()["templates"]]
    assert names.count("Character") == 1


def test_updating_system_template_requires_world(client, owner, world, db):
    system = db.query(Template).filter_by(is_system=True).first()

    response = client.put(f"/api/templates/{system.id}", json={"description": "x"}, headers=owner.headers)

    assert response.status_code == 400
    assert response.json()["issues"][0]["path"] == "worldId"


def test_template_fields_are_validated(client, owner, world):
    response = client.post(
        f"/api/worlds/{world['id']}/templates",
        json={"name": "Broken", "fields": [{"id": "a", "name": "Kind", "type": "select"}]},
        headers=owner.headers,
    )

    assert response.status_code == 400


# Partial updates

def test_entity_keeps_working_after_template_drops_a_field(client, owner, world, template_id):
    entity = new_entity(client, world, owner, templateId=template_id,
                        fields={"tf-title": "Queen", "tf-age": 41})
    trimmed = [field for field in FIELDS if field["id"] != "tf-age"]
    assert client.put(f"/api/templates/{template_id}", json={"fields": trimmed},
                      headers=owner.headers).status_code == 200

    renamed = client.put(f"/api/entities/{entity['id']}", json={"name": "Mira II"}, headers=owner.headers)
    resubmitted = client.put(f"/api/entities/{entity['id']}", json={"fields": {"tf-title": "Queen", "tf-age": 41}},
                             headers=owner.headers)

    assert renamed.status_code == 200
    assert renamed.json()["entity"]["name"] == "Mira II"
    assert renamed.json()["entity"]["fields"] == {"tf-title": "Queen", "tf-age": 41}
    assert resubmitted.status_code == 400
    assert [issue["path"] for issue in resubmitted.json()["issues"]] == ["fields.tf-age"]


def test_null_for_required_columns_is_rejected(client, owner, world, db):
    a = new_entity(client, world, owner, name="Mira")
    b = new_entity(client, world, owner, name="Oren")
    folder = client.post(f"/api/worlds/{world['id']}/folders", json={"name": "People"},
                         headers=owner.headers).json()["folder"]
    template = client.post(f"/api/worlds/{world['id']}/templates", json={"name": "Ruler"},
                           headers=owner.headers).json()["template"]
    link = client.post(f"/api/worlds/{world['id']}/relationships",
                       json={"fromEntityId": a["id"], "toEntityId": b["id"], "relationshipType": "rival"},
                       headers=owner.headers).json()["relationship"]

    cases = [
        (f"/api/entities/{a['id']}", {"name": None}, "name"),
        (f"/api/entities/{a['id']}", {"tags": None}, "tags"),
        (f"/api/folders/{folder['id']}", {"name": None}, "name"),
        (f"/api/templates/{template['id']}", {"name": None}, "name"),
        (f"/api/relationships/{link['id']}", {"relationshipType": None}, "relationshipType"),
        (f"/api/relationships/{link['id']}", {"isBidirectional": None}, "isBidirectional"),
    ]
    for url, body, path in cases:
        response = client.put(url, json=body, headers=owner.headers)
        assert response.status_code == 400, (url, response.text)
        assert [issue["path"] for issue in response.json()["issues"]] == [path]

    db.expire_all()
    assert db.query(Entity).filter_by(id=a["id"]).one().name == "Mira"
    assert db.query(Relationship).filter_by(id=link["id"]).one().relationship_type == "rival"


def test_null_clears_optional_columns(client, owner, world):
    entity = new_entity(client, world, owner, summary="Queen of tides")

    response = client.put(f"/api/entities/{entity['id']}", json={"summary": None}, headers=owner.headers)

    assert response.status_code == 200
    assert response.json()["entity"]["summary"] is None
