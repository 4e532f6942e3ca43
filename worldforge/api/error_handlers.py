# worldforge/api/error_handlers.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from worldforge.errors import InternalUnexpected, ValidationFailed, WorldforgeError

logger = logging.getLogger(__name__)

# Leading loc parts that name where a value came from, not the field
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie", "form"}


def _issue_path(loc) -> str:
    parts = list(loc)
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(str(part) for part in parts)


def validation_issues(errors) -> list:
    return [{"path": _issue_path(error.get("loc", ())), "message": error.get("msg", "Invalid value")} for error in errors]


def _error_response(request: Request, error: WorldforgeError) -> JSONResponse:
    body = error.to_body()
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        body["requestId"] = request_id
    return JSONResponse(status_code=error.status_code, content=body, headers=error.headers or None)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(WorldforgeError)
    async def worldforge_error_handler(request: Request, exc: WorldforgeError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details})")
        return _error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error_response(request, ValidationFailed(issues=validation_issues(exc.errors())))

    @app.exception_handler(ValidationError)
    async def pydantic_validation_handler(request: Request, exc: ValidationError):
        return _error_response(request, ValidationFailed(issues=validation_issues(exc.errors())))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        error = WorldforgeError(str(exc.detail), headers=getattr(exc, "headers", None))
        error.status_code = exc.status_code
        return _error_response(request, error)

    # Error handler for global exceptions
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        response = _error_response(request, InternalUnexpected())
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            response.headers["X-Request-ID"] = request_id
        return response
