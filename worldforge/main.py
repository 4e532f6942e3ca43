# worldforge/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker
from typing import Any, Optional
import logging
import uuid

from worldforge.api.auth_pages import router as auth_pages_router
from worldforge.api.error_handlers import register_exception_handlers
from worldforge.api.v1.router import api_router
from worldforge.config import Settings, get_settings
from worldforge.core_templates import CORE_TEMPLATES
from worldforge.database import Base, build_engine, build_session_factory, build_supabase_client
from worldforge.services.template_service import TemplateService
import worldforge.models  # noqa: F401  registers tables on Base.metadata

logger = logging.getLogger(__name__)


def seed_system_templates(session_factory: sessionmaker) -> None:
    """Make sure the global system templates exist before any world is created."""
    db = session_factory()
    try:
        results = TemplateService(db).upsert_system_templates(CORE_TEMPLATES)
        logger.info(f"System templates ready ({len(results)})")
    finally:
        db.close()


def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[sessionmaker] = None,
    auth_client: Optional[Any] = None,
    admin_client: Optional[Any] = None,
    create_tables: bool = True,
    seed_templates: bool = True,
) -> FastAPI:
    """
    Build the application.

    Every external client can be injected; whatever is not passed in is built
    from ``settings``.
    """
    settings = settings or get_settings()

    # Setup logging
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if session_factory is None:
        session_factory = build_session_factory(build_engine(settings.DATABASE_URL))
    if create_tables:
        # Create tables in the database
        Base.metadata.create_all(bind=session_factory.kw["bind"])
    if seed_templates:
        seed_system_templates(session_factory)

    app = FastAPI(
        title="Worldforge API",
        description="Collaborative worldbuilding API using Supabase for authentication and storage",
        version="0.1.0"
    )
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.auth_client = auth_client if auth_client is not None else build_supabase_client(settings)
    app.state.admin_client = (
        admin_client if admin_client is not None else build_supabase_client(settings, service_role=True)
    )

    # CORS middleware for frontend access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.APP_BASE_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    register_exception_handlers(app)

    # Include API routes
    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(auth_pages_router, prefix="/auth", tags=["auth"])

    @app.get("/")
    async def root():
        """Welcome message"""
        return {
            "message": "Welcome to the Worldforge API",
            "status": "online",
            "version": "0.1.0"
        }

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("worldforge.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=True)
