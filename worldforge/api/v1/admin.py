# worldforge/api/v1/admin.py
from collections import Counter
from fastapi import APIRouter, Depends, Query, Request
from typing import Optional
import logging
import secrets

from worldforge.api.dependencies import get_app_settings, get_service
from worldforge.config import Settings
from worldforge.core_templates import CORE_TEMPLATES
from worldforge.errors import AuthenticationRequired
from worldforge.services.rate_limit_service import RateLimitService
from worldforge.services.template_service import TemplateService

logger = logging.getLogger(__name__)

router = APIRouter()


def client_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("x-real-ip") or (request.client.host if request.client else "unknown")


@router.post("/seed-core-templates")
async def seed_core_templates(
    request: Request,
    token: Optional[str] = Query(None),
    settings: Settings = Depends(get_app_settings),
    rate_limits: RateLimitService = Depends(get_service(RateLimitService)),
    template_service: TemplateService = Depends(get_service(TemplateService)),
):
    """
    Create or refresh the global system templates, matched by name.
    Requires ``?token=`` equal to ``SEED_ADMIN_TOKEN``.
    """
    rate_limits.enforce("admin.seed", client_address(request))

    if not settings.SEED_ADMIN_TOKEN or not token or not secrets.compare_digest(token, settings.SEED_ADMIN_TOKEN):
        raise AuthenticationRequired("Unauthorized")

    results = template_service.upsert_system_templates(CORE_TEMPLATES)
    logger.info(f"Seeded {len(results)} system templates")
    return {
        "success": True,
        "summary": {
            "templatesProcessed": len(results),
            "actions": dict(Counter(action for action, _ in results)),
        },
        "results": [{"action": action, "name": name} for action, name in results],
    }
