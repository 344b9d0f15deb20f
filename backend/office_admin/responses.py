"""Turning handler results into HTML pages or JSON envelopes.

Each resource router is built twice, once per :class:`ResponseFormat`, and
its handlers talk to a :class:`Responder` bound to that format instead of
looking at the request path.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.routing import APIRoute
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import (
    AlreadyAuthenticated,
    AppError,
    LoginRequired,
    NotFoundError,
    TokenRejected,
    ValidationError,
)
from .flash import flash, pop_flashed_messages
from .schemas import MAX_ID

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["get_flashed_messages"] = pop_flashed_messages

# passed through untouched: the app-level handlers own these
PASSTHROUGH_ERRORS = (
    LoginRequired,
    TokenRejected,
    AlreadyAuthenticated,
    StarletteHTTPException,
    RequestValidationError,
)


class ResponseFormat(str, Enum):
    HTML = "html"
    JSON = "json"


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


def render_error_page(
    request: Request, *, status_code: int, message: str, title: str = "Error"
) -> Response:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"title": title, "error": {"status": status_code, "message": message}},
        status_code=status_code,
    )


def render_not_found(request: Request) -> Response:
    return render_error_page(
        request, status_code=status.HTTP_404_NOT_FOUND, message="Page not found", title="Page Not Found"
    )


def parse_id(raw: str, *, not_found: str) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise NotFoundError(not_found) from None
    if not 0 < value <= MAX_ID:
        raise NotFoundError(not_found)
    return value


def wants_json(request: Request) -> bool:
    return "application/json" in request.headers.get("content-type", "")


async def read_payload(request: Request) -> dict[str, Any]:
    """Body as a flat dict, from either a JSON object or a urlencoded/multipart form."""

    if wants_json(request):
        try:
            body = await request.json()
        except json.JSONDecodeError:
            raise ValidationError.single("__all__", "Request body must be valid JSON") from None
        if not isinstance(body, dict):
            raise ValidationError.single("__all__", "Request body must be a JSON object")
        return body
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


@dataclass(frozen=True)
class Responder:
    """Format-specific success and failure responses for one router."""

    fmt: ResponseFormat

    @property
    def is_json(self) -> bool:
        return self.fmt is ResponseFormat.JSON

    def show(
        self,
        request: Request,
        template: str,
        *,
        title: str,
        data: Any,
        pagination: Optional[Mapping[str, Any]] = None,
        status_code: int = status.HTTP_200_OK,
        **context: Any,
    ) -> Response:
        """A read result: JSON envelope, or the template rendered with `data`."""

        if self.is_json:
            body: dict[str, Any] = {"success": True, "data": data}
            if pagination is not None:
                body["pagination"] = dict(pagination)
            return JSONResponse(body, status_code=status_code)
        return templates.TemplateResponse(
            request,
            template,
            {"title": title, "data": data, "pagination": pagination, **context},
            status_code=status_code,
        )

    def done(
        self,
        request: Request,
        *,
        message: str,
        redirect_to: str,
        data: Any = None,
        status_code: int = status.HTTP_200_OK,
    ) -> Response:
        """A completed mutation: JSON envelope, or flash + redirect."""

        if self.is_json:
            body: dict[str, Any] = {"success": True, "message": message}
            if data is not None:
                body["data"] = data
            return JSONResponse(body, status_code=status_code)
        flash(request, message, "success")
        return redirect(redirect_to)

    def fail(self, request: Request, exc: AppError, *, redirect_to: str) -> Response:
        """A classified failure: JSON error envelope, or flash + redirect."""

        if self.is_json:
            body: dict[str, Any] = {"success": False, "error": exc.message}
            if isinstance(exc, ValidationError):
                body["errors"] = [violation.as_dict() for violation in exc.violations]
            return JSONResponse(body, status_code=exc.status_code)
        flash(request, exc.message, "error")
        return redirect(redirect_to)

    def internal_error(self, request: Request, exc: Exception) -> Response:
        settings = request.app.state.settings
        message = "Something went wrong!" if settings.is_production else f"{type(exc).__name__}: {exc}"
        if self.is_json:
            return JSONResponse(
                {"success": False, "error": message},
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return render_error_page(
            request, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, message=message
        )


def boundary_route(responder: Responder, *, fallback: str = "/") -> type[APIRoute]:
    """Route class that stops unexpected errors at the handler boundary."""

    class BoundaryRoute(APIRoute):
        def get_route_handler(self) -> Callable:
            handler = super().get_route_handler()

            async def guarded(request: Request) -> Response:
                try:
                    return await handler(request)
                except PASSTHROUGH_ERRORS:
                    raise
                except AppError as exc:
                    return responder.fail(request, exc, redirect_to=fallback)
                except Exception as exc:
                    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
                    return responder.internal_error(request, exc)

            return guarded

    return BoundaryRoute
