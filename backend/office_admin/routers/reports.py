"""Read-only reporting endpoints."""
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, protect
from ..reports import ReportService
from ..responses import Responder, ResponseFormat, boundary_route


def build_router(fmt: ResponseFormat) -> APIRouter:
    responder = Responder(fmt)
    router = APIRouter(
        prefix="/api/reports" if fmt is ResponseFormat.JSON else "/reports",
        tags=["reports"],
        dependencies=[Depends(protect)],
        route_class=boundary_route(responder, fallback="/"),
    )

    @router.get("")
    async def reports_dashboard(
        request: Request, session: AsyncSession = Depends(get_db_session)
    ) -> Response:
        """Overview totals plus department, job title, location and hiring breakdowns."""

        data = await ReportService(session).dashboard()
        return responder.show(request, "reports/dashboard.html", title="Reports Dashboard", data=data)

    @router.get("/employee-analytics")
    async def employee_analytics(
        request: Request, session: AsyncSession = Depends(get_db_session)
    ) -> Response:
        data = await ReportService(session).employee_analytics()
        return responder.show(
            request, "reports/employee_analytics.html", title="Employee Analytics", data=data
        )

    @router.get("/department-performance")
    async def department_performance(
        request: Request, session: AsyncSession = Depends(get_db_session)
    ) -> Response:
        data = await ReportService(session).department_performance()
        return responder.show(
            request,
            "reports/department_performance.html",
            title="Department Performance",
            data=data,
        )

    @router.get("/financial")
    async def financial_report(
        request: Request, session: AsyncSession = Depends(get_db_session)
    ) -> Response:
        data = await ReportService(session).financial_report()
        return responder.show(request, "reports/financial.html", title="Financial Report", data=data)

    return router
