"""Employee endpoints, mounted as HTML pages and as a JSON API."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, protect
from ..errors import AppError, NotFoundError
from ..pagination import parse_page_params
from ..repositories import DepartmentRepository, EmployeeFilters, EmployeeRepository
from ..responses import (
    Responder,
    ResponseFormat,
    boundary_route,
    parse_id,
    read_payload,
)
from ..schemas import DepartmentSummary, EmployeeDetail, EmployeeRead, EmployeeSummary, dump

NOT_FOUND = "Employee not found"


def build_router(fmt: ResponseFormat) -> APIRouter:
    """Employee routes for one response format."""

    responder = Responder(fmt)
    html_base = "/employees"
    router = APIRouter(
        prefix="/api/employees" if fmt is ResponseFormat.JSON else html_base,
        tags=["employees"],
        dependencies=[Depends(protect)],
        route_class=boundary_route(responder, fallback=html_base),
    )

    async def form_options(session: AsyncSession, *, exclude_id: Optional[int] = None) -> dict:
        departments = await DepartmentRepository(session).active_departments()
        employees = await EmployeeRepository(session).active_employees(exclude_id=exclude_id)
        return {
            "departments": [dump(DepartmentSummary.model_validate(d)) for d in departments],
            "employees": [dump(EmployeeSummary.model_validate(e)) for e in employees],
        }

    @router.get("")
    async def list_employees(
        request: Request,
        page: Optional[str] = None,
        limit: Optional[str] = None,
        search: Optional[str] = None,
        department: Optional[str] = None,
        job_title: Optional[str] = Query(default=None, alias="jobTitle"),
        session: AsyncSession = Depends(get_db_session),
    ) -> Response:
        """List active employees with search, filters and pagination."""

        page_no, per_page = parse_page_params(page, limit)
        filters = EmployeeFilters.from_query(search, department, job_title)
        result = await EmployeeRepository(session).list(filters, page=page_no, limit=per_page)

        departments = []
        if not responder.is_json:
            departments = [
                dump(DepartmentSummary.model_validate(d))
                for d in await DepartmentRepository(session).active_departments()
            ]
        return responder.show(
            request,
            "employees/index.html",
            title="Employees",
            data=[dump(EmployeeRead.model_validate(e)) for e in result.items],
            pagination=result.pagination.as_dict(),
            departments=departments,
            filters=filters.as_dict(),
        )

    if fmt is ResponseFormat.HTML:

        @router.get("/new")
        async def new_employee_form(
            request: Request, session: AsyncSession = Depends(get_db_session)
        ) -> Response:
            return responder.show(
                request,
                "employees/form.html",
                title="Add New Employee",
                data=None,
                **(await form_options(session)),
            )

        @router.get("/{employee_id}/edit")
        async def edit_employee_form(
            request: Request, employee_id: str, session: AsyncSession = Depends(get_db_session)
        ) -> Response:
            try:
                employee = await EmployeeRepository(session).get(
                    parse_id(employee_id, not_found=NOT_FOUND)
                )
            except AppError as exc:
                return responder.fail(request, exc, redirect_to=html_base)
            return responder.show(
                request,
                "employees/form.html",
                title="Edit Employee",
                data=dump(EmployeeRead.model_validate(employee)),
                **(await form_options(session, exclude_id=employee.id)),
            )

    @router.post("")
    async def create_employee(
        request: Request, session: AsyncSession = Depends(get_db_session)
    ) -> Response:
        try:
            employee = await EmployeeRepository(session).create(await read_payload(request))
        except AppError as exc:
            return responder.fail(request, exc, redirect_to=f"{html_base}/new")
        return responder.done(
            request,
            message="Employee created successfully",
            redirect_to=html_base,
            data=dump(EmployeeRead.model_validate(employee)),
            status_code=status.HTTP_201_CREATED,
        )

    @router.get("/{employee_id}")
    async def show_employee(
        request: Request, employee_id: str, session: AsyncSession = Depends(get_db_session)
    ) -> Response:
        repo = EmployeeRepository(session)
        try:
            employee = await repo.get(parse_id(employee_id, not_found=NOT_FOUND))
            subordinates = await repo.active_subordinates(employee.id)
        except AppError as exc:
            return responder.fail(request, exc, redirect_to=html_base)

        detail = EmployeeDetail(
            **EmployeeRead.model_validate(employee).model_dump(),
            subordinates=[EmployeeSummary.model_validate(s) for s in subordinates],
        )
        return responder.show(
            request, "employees/show.html", title=employee.full_name, data=dump(detail)
        )

    @router.api_route("/{employee_id}", methods=["PUT", "PATCH"])
    async def update_employee(
        request: Request, employee_id: str, session: AsyncSession = Depends(get_db_session)
    ) -> Response:
        """Full replace of the employee's mutable fields."""

        try:
            target = parse_id(employee_id, not_found=NOT_FOUND)
            employee = await EmployeeRepository(session).update(target, await read_payload(request))
        except NotFoundError as exc:
            return responder.fail(request, exc, redirect_to=html_base)
        except AppError as exc:
            return responder.fail(request, exc, redirect_to=f"{html_base}/{employee_id}/edit")
        return responder.done(
            request,
            message="Employee updated successfully",
            redirect_to=f"{html_base}/{employee.id}",
            data=dump(EmployeeRead.model_validate(employee)),
        )

    @router.delete("/{employee_id}")
    async def delete_employee(
        request: Request, employee_id: str, session: AsyncSession = Depends(get_db_session)
    ) -> Response:
        """Soft delete; refused while the employee supervises anyone active."""

        try:
            await EmployeeRepository(session).soft_delete(parse_id(employee_id, not_found=NOT_FOUND))
        except AppError as exc:
            return responder.fail(request, exc, redirect_to=html_base)
        return responder.done(
            request, message="Employee deleted successfully", redirect_to=html_base
        )

    return router
