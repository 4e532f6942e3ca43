# worldforge/database.py
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from supabase import create_client, Client

from worldforge.config import Settings

# SQLAlchemy Base
Base = declarative_base()


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create the SQLAlchemy engine for the given URL."""
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(database_url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def build_supabase_client(settings: Settings, service_role: bool = False) -> Client:
    """
    Create a Supabase client.

    The anon key is used for user-scoped calls (code exchange, sign out);
    the service-role key for administrative calls (health, storage uploads).
    """
    key = settings.SUPABASE_SERVICE_ROLE_KEY if service_role else settings.SUPABASE_ANON_KEY
    return create_client(settings.SUPABASE_URL, key)


# Dependency to get DB session
def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
