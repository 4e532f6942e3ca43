# worldforge/api/auth.py
from dataclasses import dataclass
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
import logging

from worldforge.database import get_db
from worldforge.errors import AuthenticationRequired, AuthorizationDenied
from worldforge.services.auth_service import AuthService, CSRF_COOKIE, CSRF_HEADER
from worldforge.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

# Setup security scheme; cookie sessions are accepted too, so no auto error
security = HTTPBearer(auto_error=False)

SESSION_COOKIE = "sb-access-token"
REFRESH_COOKIE = "sb-refresh-token"
SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}


@dataclass
class CurrentUser:
    id: str
    email: Optional[str] = None
    via_cookie: bool = False


def get_auth_service(request: Request) -> AuthService:
    return AuthService(request.app.state.settings, request.app.state.auth_client)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> CurrentUser:
    """
    Dependency to get the current authenticated user from a JWT token.

    The token comes from the Authorization header, else from the session
    cookie. Cookie sessions must also present a CSRF token on writes.
    """
    if credentials:
        token, via_cookie = credentials.credentials, False
    else:
        token, via_cookie = request.cookies.get(SESSION_COOKIE), True

    if not token:
        raise AuthenticationRequired()

    payload = auth_service.verify_token(token)
    user = CurrentUser(id=payload["sub"], email=payload.get("email"), via_cookie=via_cookie)

    if via_cookie and request.method not in SAFE_METHODS:
        if not auth_service.verify_csrf_token(
            request.headers.get(CSRF_HEADER),
            request.cookies.get(CSRF_COOKIE),
            user.id,
        ):
            logger.warning(f"CSRF check failed for {user.id} on {request.method} {request.url.path}")
            raise AuthorizationDenied("Invalid or missing CSRF token")

    # Create the profile if it doesn't exist, which happens on a user's first request
    ProfileService(db).get_or_create_profile(
        user.id,
        email=user.email,
        full_name=(payload.get("user_metadata") or {}).get("full_name"),
    )
    return user
