# worldforge/services/rate_limit_service.py
from dataclasses import dataclass
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Callable, Dict, Optional
import logging
import time

from worldforge.errors import RateLimited
from worldforge.models.activity import RateLimitRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitRule:
    max_requests: int
    window_seconds: int
    message: str = "Too many requests, please try again later"


# Keyed per authenticated user unless noted
RATE_LIMITS: Dict[str, RateLimitRule] = {
    "upload.files": RateLimitRule(20, 60, "Too many file uploads, please slow down"),
    "invites.create": RateLimitRule(10, 60, "Too many invitations sent, please wait"),
    "worlds.create": RateLimitRule(5, 300, "Too many worlds created, please wait"),
    # Keyed by client address
    "admin.seed": RateLimitRule(2, 60, "Too many seed attempts"),
}


@dataclass
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_at: int


class RateLimitService:
    """
    Fixed-window counters kept in the database, so every worker sees the
    same counts.
    """

    def __init__(self, db: Session, clock: Callable[[], float] = time.time):
        self.db = db
        self.clock = clock

    def hit(self, bucket: str, key: str, rule: Optional[RateLimitRule] = None) -> RateLimitResult:
        rule = rule or RATE_LIMITS[bucket]
        now = int(self.clock())
        window_start = now - (now % rule.window_seconds)
        reset_at = window_start + rule.window_seconds

        record = self._get_record(bucket, key, window_start)
        if record is None:
            record = RateLimitRecord(bucket=bucket, key=key, window_start=window_start, count=0)
            self.db.add(record)
            try:
                self.db.flush()
            except IntegrityError:
                # Another request opened the same window first
                self.db.rollback()
                record = self._get_record(bucket, key, window_start)

        if record.count >= rule.max_requests:
            self.db.rollback()
            return RateLimitResult(allowed=False, remaining=0, reset_at=reset_at)

        record.count = RateLimitRecord.count + 1
        self.db.commit()
        self.db.refresh(record)
        return RateLimitResult(
            allowed=True,
            remaining=max(rule.max_requests - record.count, 0),
            reset_at=reset_at,
        )

    def enforce(self, bucket: str, key: str, rule: Optional[RateLimitRule] = None) -> RateLimitResult:
        """Count a request and raise when the bucket is exhausted."""
        rule = rule or RATE_LIMITS[bucket]
        result = self.hit(bucket, key, rule)
        if not result.allowed:
            logger.warning(f"Rate limit hit: {bucket} for {key}")
            raise RateLimited(rule.message, reset_at=result.reset_at, remaining=0)
        return result

    def _get_record(self, bucket: str, key: str, window_start: int) -> Optional[RateLimitRecord]:
        return self.db.query(RateLimitRecord).filter(
            RateLimitRecord.bucket == bucket,
            RateLimitRecord.key == key,
            RateLimitRecord.window_start == window_start,
        ).first()
