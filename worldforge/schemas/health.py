from typing import Any, List, Optional
from pydantic import BaseModel
from worldforge.models.enums import HealthStatus
from worldforge.schemas.base import ApiModel


class HealthCheck(ApiModel):
    service: str
    status: HealthStatus
    response_time: int
    error: Optional[str] = None
    details: Optional[Any] = None


class HealthSummary(BaseModel):
    total: int
    healthy: int
    unhealthy: int
    degraded: int


class HealthReport(ApiModel):
    status: HealthStatus
    timestamp: str
    checks: List[HealthCheck]
    summary: HealthSummary
