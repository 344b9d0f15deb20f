"""Reusable FastAPI dependencies."""
from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Optional

import jwt
from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings
from .database import get_session
from .errors import AlreadyAuthenticated, LoginRequired, TokenRejected
from .repositories import CredentialStore
from .schemas import AdminRead, Token
from .security import decode_access_token

logger = logging.getLogger(__name__)

TOKEN_COOKIE = "token"


def get_settings(request: Request) -> Settings:
    """The settings object the app was built with."""
    return request.app.state.settings


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields an AsyncSession."""
    async for session in get_session(request):
        yield session


def extract_token(request: Request) -> Optional[str]:
    """Token from the `token` cookie, falling back to `Authorization: Bearer`."""

    token = request.cookies.get(TOKEN_COOKIE)
    if token:
        return token
    scheme, _, credentials = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def set_token_cookie(response: Response, token: Token, settings: Settings) -> None:
    response.set_cookie(
        TOKEN_COOKIE,
        token.token,
        max_age=settings.access_token_expires_minutes * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


async def protect(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> AdminRead:
    """
    Gate for every admin page and API route.

    No token -> redirect to the login page; a bad or expired token -> the
    generic not-found page; otherwise the admin (without password hash).
    """

    token = extract_token(request)
    if token is None:
        raise LoginRequired()

    try:
        token_data = decode_access_token(token, settings)
    except jwt.PyJWTError as exc:
        logger.info("Rejected token on %s: %s", request.url.path, exc)
        raise TokenRejected() from exc

    admin = await CredentialStore(session).get(token_data.id)
    if admin is None:
        logger.info("Token for unknown admin id=%s", token_data.id)
        raise TokenRejected()

    current = AdminRead.model_validate(admin)
    request.state.admin = current
    return current


async def check_auth(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """Send already signed-in admins away from the login page."""

    token = extract_token(request)
    if token is None:
        return
    try:
        decode_access_token(token, settings)
    except jwt.PyJWTError:
        return
    raise AlreadyAuthenticated()
