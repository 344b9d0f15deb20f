"""Authentication routes: sign in with email/password, sign out."""
import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings
from .dependencies import TOKEN_COOKIE, get_db_session, get_settings, set_token_cookie
from .errors import AppError, AuthError
from .flash import flash
from .repositories import CredentialStore
from .responses import read_payload, redirect, templates, wants_json
from .schemas import LoginInput, dump
from .security import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _login_failed(request: Request, exc: AppError) -> Response:
    if wants_json(request):
        return JSONResponse({"success": False, "error": exc.message}, status_code=exc.status_code)
    return templates.TemplateResponse(
        request,
        "auth/login.html",
        {"title": "Admin Login", "error": exc.message},
        status_code=exc.status_code,
    )


@router.post("/login")
async def login(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Authenticate an admin and hand back a JWT in the `token` cookie."""

    try:
        credentials = LoginInput.model_validate(await read_payload(request))
    except (AppError, PydanticValidationError):
        return _login_failed(request, AuthError())

    admin = await CredentialStore(session).authenticate(credentials.email, credentials.password)
    if admin is None:
        # same answer for unknown email and wrong password
        logger.warning("Failed login for %s", credentials.email or "<blank>")
        return _login_failed(request, AuthError())

    token = create_access_token(admin, settings)
    logger.info("Admin id=%s signed in", admin.id)
    if wants_json(request):
        response: Response = JSONResponse({"success": True, "data": dump(token)})
    else:
        response = redirect("/")
    set_token_cookie(response, token, settings)
    return response


@router.get("/logout")
async def logout(request: Request) -> Response:
    """Drop the token cookie and the session, then return to the login page."""

    response = redirect("/login")
    response.delete_cookie(TOKEN_COOKIE)
    try:
        request.session.clear()
        flash(request, "You are logged out.", "success")
    except Exception:
        logger.exception("Could not clear the session during logout")
    return response
