# worldforge/api/v1/csrf.py
from fastapi import APIRouter, Depends, Request, Response

from worldforge.api.auth import CurrentUser, get_auth_service, get_current_user
from worldforge.services.auth_service import AuthService, CSRF_COOKIE, CSRF_HEADER

router = APIRouter()


@router.get("")
async def issue_csrf_token(
    request: Request,
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Issue a CSRF token for cookie sessions. It is set as a cookie and must be
    echoed in the ``X-CSRF-Token`` header on every write.
    """
    token = auth_service.issue_csrf_token(current_user.id)
    response.set_cookie(
        CSRF_COOKIE,
        token,
        max_age=request.app.state.settings.CSRF_TOKEN_TTL_SECONDS,
        httponly=False,
        samesite="strict",
        secure=request.url.scheme == "https",
    )
    return {"token": token, "header": CSRF_HEADER}
