# worldforge/api/auth_pages.py
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse
from typing import Optional
import logging

from worldforge.api.auth import REFRESH_COOKIE, SESSION_COOKIE, get_auth_service
from worldforge.services.auth_service import AuthService, CSRF_COOKIE

logger = logging.getLogger(__name__)

router = APIRouter()


def _safe_redirect(target: Optional[str]) -> str:
    # Only same-site relative paths
    if not target or not target.startswith("/") or target.startswith("//"):
        return "/"
    return target


@router.get("/callback")
async def auth_callback(
    request: Request,
    code: Optional[str] = Query(None),
    redirect_to: Optional[str] = Query(None),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Finish an OAuth or magic-link sign in, then redirect."""
    response = RedirectResponse(_safe_redirect(redirect_to), status_code=303)
    if not code:
        return response

    session = auth_service.exchange_code_for_session(code)
    if session is not None:
        secure = request.url.scheme == "https"
        response.set_cookie(SESSION_COOKIE, session.access_token, httponly=True, samesite="lax", secure=secure)
        if getattr(session, "refresh_token", None):
            response.set_cookie(REFRESH_COOKIE, session.refresh_token, httponly=True, samesite="lax", secure=secure)
    return response


@router.get("/signout")
async def sign_out(auth_service: AuthService = Depends(get_auth_service)):
    auth_service.sign_out()
    response = RedirectResponse("/login", status_code=303)
    for cookie in (SESSION_COOKIE, REFRESH_COOKIE, CSRF_COOKIE):
        response.delete_cookie(cookie)
    return response
