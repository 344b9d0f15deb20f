"""Top-level HTML pages: the dashboard and the login form."""
import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import check_auth, get_db_session, protect
from ..reports import ReportService
from ..responses import render_error_page, templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])


@router.get("/", dependencies=[Depends(protect)])
async def dashboard(request: Request, session: AsyncSession = Depends(get_db_session)) -> Response:
    """Landing page with headline numbers and breakdowns."""

    try:
        data = await ReportService(session).dashboard()
    except Exception:
        logger.exception("Dashboard data could not be loaded")
        return render_error_page(request, status_code=500, message="Failed to load dashboard data")
    return templates.TemplateResponse(
        request, "dashboard.html", {"title": "Dashboard Overview", "data": data}
    )


@router.get("/login", dependencies=[Depends(check_auth)])
async def login_page(request: Request) -> Response:
    return templates.TemplateResponse(request, "auth/login.html", {"title": "Admin Login"})
