# worldforge/services/health_service.py
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
import logging
import time

from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from worldforge.models.enums import HealthStatus

logger = logging.getLogger(__name__)

CHECKED_TABLES = ("worlds", "entities", "templates", "profiles")


def overall_status(checks: List[Dict[str, Any]]) -> HealthStatus:
    """Unhealthy if any check failed, else degraded if any was slow, else healthy."""
    statuses = {check["status"] for check in checks}
    if HealthStatus.UNHEALTHY in statuses:
        return HealthStatus.UNHEALTHY
    if HealthStatus.DEGRADED in statuses:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


class HealthService:
    """Probes the database, object storage and the auth provider."""

    def __init__(
        self,
        session_factory: sessionmaker,
        admin_client: Any,
        slow_threshold_ms: int = 1000,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.session_factory = session_factory
        self.admin_client = admin_client
        self.slow_threshold_ms = slow_threshold_ms
        self.clock = clock

    def perform_check(self, service: str, probe: Callable[[], Any]) -> Dict[str, Any]:
        start = self.clock()
        try:
            details = probe()
            elapsed = int((self.clock() - start) * 1000)
            status = HealthStatus.DEGRADED if elapsed > self.slow_threshold_ms else HealthStatus.HEALTHY
            return {"service": service, "status": status, "response_time": elapsed, "details": details}
        except Exception as e:
            elapsed = int((self.clock() - start) * 1000)
            logger.warning(f"Health check {service} failed: {e}")
            return {"service": service, "status": HealthStatus.UNHEALTHY, "response_time": elapsed, "error": str(e)}

    def run(self) -> Dict[str, Any]:
        checks = [self.perform_check("database_connection", self._check_connection)]
        for table in CHECKED_TABLES:
            checks.append(self.perform_check(f"table_{table}", self._table_probe(table)))
        checks.append(self.perform_check("storage", self._check_storage))
        checks.append(self.perform_check("auth", self._check_auth))

        return {
            "status": overall_status(checks),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": checks,
            "summary": {
                "total": len(checks),
                "healthy": sum(1 for c in checks if c["status"] == HealthStatus.HEALTHY),
                "unhealthy": sum(1 for c in checks if c["status"] == HealthStatus.UNHEALTHY),
                "degraded": sum(1 for c in checks if c["status"] == HealthStatus.DEGRADED),
            },
        }

    def _check_connection(self) -> Optional[Dict[str, Any]]:
        db = self.session_factory()
        try:
            db.execute(text("SELECT 1"))
            return {"connected": True}
        finally:
            db.close()

    def _table_probe(self, table: str) -> Callable[[], Dict[str, Any]]:
        def probe():
            db = self.session_factory()
            try:
                count = db.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar()
                return {"rows": count}
            finally:
                db.close()
        return probe

    def _check_storage(self) -> Dict[str, Any]:
        buckets = self.admin_client.storage.list_buckets()
        return {"buckets": len(buckets or [])}

    def _check_auth(self) -> Dict[str, Any]:
        self.admin_client.auth.admin.list_users(page=1, per_page=1)
        return {"reachable": True}
