# worldforge/api/v1/health.py
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from worldforge.api.dependencies import get_health_service
from worldforge.models.enums import HealthStatus
from worldforge.schemas import HealthReport
from worldforge.services.health_service import HealthService

router = APIRouter()


@router.get("/db", response_model=HealthReport)
async def database_health(health_service: HealthService = Depends(get_health_service)):
    """
    Probe the database tables, storage and auth.

    200 when healthy or degraded, 503 when any probe failed.
    """
    report = HealthReport.model_validate(health_service.run())
    code = status.HTTP_503_SERVICE_UNAVAILABLE if report.status == HealthStatus.UNHEALTHY else status.HTTP_200_OK
    return JSONResponse(
        status_code=code,
        content=report.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
