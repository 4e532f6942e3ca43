import jwt
import pytest

from tests.conftest import CSRF_SECRET, FakeSession, SEED_TOKEN, mint_token
from worldforge.api.auth import SESSION_COOKIE
from worldforge.core_templates import CORE_TEMPLATES
from worldforge.models import Profile, Template
from worldforge.services.auth_service import AuthService, CSRF_COOKIE, CSRF_HEADER


def test_token_with_wrong_audience_is_rejected(client, owner):
    token = mint_token(owner.id, owner.email, aud="anon")

    response = client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_token_signed_with_other_secret_is_rejected(client, owner):
    token = mint_token(owner.id, owner.email, secret="some-other-secret-0123456789abcdef")

    assert client.get("/api/profile", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_cookie_session_can_read(client, owner):
    client.cookies.set(SESSION_COOKIE, owner.token)

    response = client.get("/api/profile")

    assert response.status_code == 200
    assert response.json()["profile"]["id"] == owner.id


def test_cookie_session_write_needs_csrf(client, owner, db):
    client.cookies.set(SESSION_COOKIE, owner.token)

    response = client.post("/api/worlds", json={"name": "Forged"})

    assert response.status_code == 403
    assert response.json()["error"] == "Invalid or missing CSRF token"


def test_cookie_session_write_with_csrf(client, owner):
    client.cookies.set(SESSION_COOKIE, owner.token)
    issued = client.get("/api/csrf")
    assert issued.status_code == 200
    assert issued.json()["header"] == CSRF_HEADER
    token = issued.json()["token"]
    assert client.cookies.get(CSRF_COOKIE) == token

    response = client.post("/api/worlds", json={"name": "Legit"}, headers={CSRF_HEADER: token})

    assert response.status_code == 201


def test_csrf_header_must_match_cookie(client, owner, settings):
    client.cookies.set(SESSION_COOKIE, owner.token)
    client.get("/api/csrf")
    other = AuthService(settings).issue_csrf_token(owner.id)

    response = client.post("/api/worlds", json={"name": "Mismatch"}, headers={CSRF_HEADER: other})

    assert response.status_code == 403


def test_bearer_writes_skip_csrf(client, owner):
    assert client.post("/api/worlds", json={"name": "Bearer"}, headers=owner.headers).status_code == 201


@pytest.mark.parametrize(
    "claims, ok",
    [
        ({"typ": "csrf", "sub": "user-1"}, True),
        ({"typ": "csrf", "sub": "user-2"}, False),
        ({"typ": "session", "sub": "user-1"}, False),
    ],
)
def test_verify_csrf_token(settings, claims, ok):
    service = AuthService(settings)
    token = jwt.encode(claims, CSRF_SECRET, algorithm="HS256")

    assert service.verify_csrf_token(token, token, "user-1") is ok


def test_profile_gets_full_name_from_token(client, make_user, db):
    user = make_user()
    token = mint_token(user.id, user.email, user_metadata={"full_name": "Ada Vey"})

    client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})

    assert db.query(Profile).filter_by(id=user.id).one().full_name == "Ada Vey"


# Auth pages

def test_callback_sets_session_cookies(client, supabase):
    supabase.auth.valid_codes["good-code"] = FakeSession(access_token="access-1", refresh_token="refresh-1")

    response = client.get("/auth/callback", params={"code": "good-code", "redirect_to": "/worlds"},
                          follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/worlds"
    assert response.cookies.get(SESSION_COOKIE) == "access-1"


def test_callback_with_bad_code_still_redirects(client):
    response = client.get("/auth/callback", params={"code": "bad"}, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert SESSION_COOKIE not in response.cookies


def test_callback_refuses_offsite_redirects(client):
    response = client.get("/auth/callback", params={"redirect_to": "//evil.example.com"}, follow_redirects=False)

    assert response.headers["location"] == "/"


def test_signout(client, supabase):
    response = client.get("/auth/signout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert supabase.auth.signed_out is True


# Admin seeding

def test_admin_seed_requires_token(client):
    assert client.post("/api/admin/seed-core-templates").status_code == 401
    assert client.post("/api/admin/seed-core-templates", params={"token": "wrong"}).status_code == 401


def test_admin_seed_upserts_by_name(client, db):
    response = client.post("/api/admin/seed-core-templates", params={"token": SEED_TOKEN})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["summary"] == {"templatesProcessed": len(CORE_TEMPLATES), "actions": {"updated": len(CORE_TEMPLATES)}}
    assert db.query(Template).filter_by(is_system=True).count() == len(CORE_TEMPLATES)


def test_admin_seed_is_rate_limited_per_address(client):
    for _ in range(2):
        client.post("/api/admin/seed-core-templates", params={"token": "wrong"})

    response = client.post("/api/admin/seed-core-templates", params={"token": SEED_TOKEN})

    assert response.status_code == 429
