"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .auth import router as auth_router
from .config import Settings
from .database import Database
from .errors import AlreadyAuthenticated, LoginRequired, TokenRejected
from .middleware import MethodOverrideMiddleware
from .responses import ResponseFormat, redirect, render_error_page, render_not_found
from .routers import departments, employees, pages, reports

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one settings object and one database."""

    settings = settings or Settings.from_env()
    database = Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await database.create_all()
        logger.info("Database ready at %s", settings.database_url)
        yield
        await database.dispose()

    app = FastAPI(title="Office Admin", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(MethodOverrideMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        max_age=24 * 60 * 60,
        https_only=settings.is_production,
    )

    app.include_router(pages.router)
    app.include_router(auth_router)
    for module in (departments, employees, reports):
        for fmt in ResponseFormat:
            app.include_router(module.build_router(fmt))

    @app.exception_handler(LoginRequired)
    async def login_required(request: Request, exc: LoginRequired) -> Response:
        return redirect("/login")

    @app.exception_handler(TokenRejected)
    async def token_rejected(request: Request, exc: TokenRejected) -> Response:
        return render_not_found(request)

    @app.exception_handler(AlreadyAuthenticated)
    async def already_authenticated(request: Request, exc: AlreadyAuthenticated) -> Response:
        return redirect("/")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == 404:
            return render_not_found(request)
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> Response:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = "Something went wrong!" if settings.is_production else f"{type(exc).__name__}: {exc}"
        return render_error_page(request, status_code=500, message=message)

    @app.get("/health", tags=["system"])
    async def healthcheck() -> dict[str, str]:
        """Simple readiness probe for uptime checks."""

        return {"status": "ok"}

    return app


def run() -> None:
    """Serve the app with uvicorn on the configured port."""

    import uvicorn

    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    settings = Settings.from_env()
    logger.info("Starting office admin (environment=%s)", settings.environment)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
