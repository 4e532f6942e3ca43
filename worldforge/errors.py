# worldforge/errors.py
from typing import Any, Dict, List, Optional

from fastapi import status


class WorldforgeError(Exception):
    """Base class for errors that map to a fixed HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.details = details
        self.headers = headers or {}
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class AuthenticationRequired(WorldforgeError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"

    def __init__(self, message: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationDenied(WorldforgeError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class ValidationFailed(WorldforgeError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request body"

    def __init__(
        self,
        message: Optional[str] = None,
        issues: Optional[List[Dict[str, str]]] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message, details)
        self.issues = issues or []

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        if self.issues:
            body["issues"] = self.issues
        return body

    @classmethod
    def for_field(cls, path: str, message: str) -> "ValidationFailed":
        return cls(issues=[{"path": path, "message": message}])


class NotFound(WorldforgeError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"

    def __init__(self, resource: str = "Resource", resource_id: Optional[str] = None):
        super().__init__(f"{resource} not found", {"resource": resource, "id": resource_id} if resource_id else None)


class RateLimited(WorldforgeError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Rate limit exceeded"

    def __init__(self, message: Optional[str] = None, reset_at: Optional[int] = None, remaining: int = 0):
        headers = {"X-RateLimit-Remaining": str(remaining)}
        if reset_at is not None:
            headers["X-RateLimit-Reset"] = str(reset_at)
        super().__init__(message, {"resetTime": reset_at, "remaining": remaining}, headers=headers)


class UpstreamFailure(WorldforgeError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Upstream service failed"


class InternalUnexpected(WorldforgeError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Something went wrong. Please try again later."
