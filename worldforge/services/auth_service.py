# worldforge/services/auth_service.py
from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone
import logging
import secrets

import jwt
from supabase import Client

from worldforge.config import Settings
from worldforge.errors import AuthenticationRequired

logger = logging.getLogger(__name__)

CSRF_COOKIE = "csrf-token"
CSRF_HEADER = "X-CSRF-Token"


class AuthService:
    """Token verification and the Supabase auth calls the API makes."""

    def __init__(self, settings: Settings, auth_client: Optional[Client] = None):
        self.settings = settings
        self.auth_client = auth_client

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify a JWT token using the Supabase JWT secret and return its payload.
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.SUPABASE_JWT_SECRET,
                algorithms=["HS256"],
                audience="authenticated"
            )
        except jwt.PyJWTError as e:
            raise AuthenticationRequired("Invalid token", str(e))

        if not payload.get("sub"):
            raise AuthenticationRequired("Invalid token: missing subject")

        return payload

    def exchange_code_for_session(self, code: str) -> Optional[Any]:
        """
        Trade an OAuth/magic-link code for a session. Failures are logged and
        reported as None so the caller can still redirect.
        """
        try:
            response = self.auth_client.auth.exchange_code_for_session({"auth_code": code})
            return response.session
        except Exception as e:
            logger.warning(f"Code exchange failed: {e}")
            return None

    def sign_out(self) -> bool:
        try:
            self.auth_client.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

    # CSRF (double submit: cookie + header carrying the same signed token)

    def issue_csrf_token(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "typ": "csrf",
            "nonce": secrets.token_urlsafe(16),
            "iat": now,
            "exp": now + timedelta(seconds=self.settings.CSRF_TOKEN_TTL_SECONDS),
        }
        return jwt.encode(payload, self.settings.CSRF_SECRET, algorithm="HS256")

    def verify_csrf_token(self, header_token: Optional[str], cookie_token: Optional[str], user_id: str) -> bool:
        if not header_token or not cookie_token:
            return False
        if not secrets.compare_digest(header_token, cookie_token):
            return False
        try:
            payload = jwt.decode(header_token, self.settings.CSRF_SECRET, algorithms=["HS256"])
        except jwt.PyJWTError:
            return False
        return payload.get("typ") == "csrf" and payload.get("sub") == user_id
