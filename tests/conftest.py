import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from worldforge.config import Settings
from worldforge.database import Base, build_engine, build_session_factory
from worldforge.main import create_app
from worldforge.models import Profile, WorldMember
import worldforge.models  # noqa: F401

JWT_SECRET = "test-supabase-jwt-secret-0123456789abcdef"
CSRF_SECRET = "test-csrf-secret-0123456789abcdef0123"
SEED_TOKEN = "seed-admin-token"


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path, content, options=None):
        if self.storage.fail_uploads:
            raise RuntimeError("storage unavailable")
        self.storage.uploads.append({"bucket": self.name, "path": path, "size": len(content), "options": options})
        return {"path": path}

    def remove(self, paths):
        self.storage.removed.extend(paths)
        return paths


class FakeStorage:
    def __init__(self):
        self.uploads: List[Dict[str, Any]] = []
        self.removed: List[str] = []
        self.fail_uploads = False
        self.fail_list = False

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)

    def list_buckets(self):
        if self.fail_list:
            raise RuntimeError("storage unreachable")
        return [{"name": "maps"}]


class FakeAuthAdmin:
    def list_users(self, page=1, per_page=50):
        return []


@dataclass
class FakeSession:
    access_token: str
    refresh_token: Optional[str] = None


@dataclass
class FakeExchangeResponse:
    session: FakeSession


class FakeAuth:
    def __init__(self):
        self.admin = FakeAuthAdmin()
        self.signed_out = False
        self.valid_codes: Dict[str, FakeSession] = {}

    def exchange_code_for_session(self, params):
        session = self.valid_codes.get(params["auth_code"])
        if session is None:
            raise RuntimeError("invalid code")
        return FakeExchangeResponse(session=session)

    def sign_out(self):
        self.signed_out = True


class FakeSupabase:
    def __init__(self):
        self.auth = FakeAuth()
        self.storage = FakeStorage()


def mint_token(user_id: str, email: Optional[str] = None, secret: str = JWT_SECRET, **claims) -> str:
    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


@dataclass
class TestUser:
    __test__ = False

    id: str
    email: str
    token: str = ""
    headers: Dict[str, str] = field(default_factory=dict)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        SUPABASE_JWT_SECRET=JWT_SECRET,
        DATABASE_URL="sqlite://",
        CSRF_SECRET=CSRF_SECRET,
        SEED_ADMIN_TOKEN=SEED_TOKEN,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def app(settings, session_factory, supabase):
    return create_app(
        settings=settings,
        session_factory=session_factory,
        auth_client=supabase,
        admin_client=supabase,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user():
    def _make(email: Optional[str] = None) -> TestUser:
        user_id = str(uuid.uuid4())
        email = email or f"user-{user_id[:8]}@example.com"
        token = mint_token(user_id, email)
        return TestUser(id=user_id, email=email, token=token, headers={"Authorization": f"Bearer {token}"})
    return _make


@pytest.fixture
def owner(make_user):
    return make_user("owner@example.com")


@pytest.fixture
def create_world(client, owner):
    def _create(name: str = "Aeloria", user: Optional[TestUser] = None, **extra) -> Dict[str, Any]:
        response = client.post("/api/worlds", json={"name": name, **extra}, headers=(user or owner).headers)
        assert response.status_code == 201, response.text
        return response.json()["world"]
    return _create


@pytest.fixture
def add_member(session_factory):
    """Insert a membership directly, creating the profile if needed."""
    def _add(world_id: str, user: TestUser, role: str) -> str:
        session = session_factory()
        try:
            if not session.get(Profile, user.id):
                session.add(Profile(id=user.id, email=user.email))
            member = WorldMember(world_id=world_id, user_id=user.id, role=role)
            session.add(member)
            session.commit()
            return member.id
        finally:
            session.close()
    return _add
