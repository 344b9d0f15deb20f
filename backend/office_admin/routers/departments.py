"""Department endpoints, mounted as HTML pages and as a JSON API."""
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, protect
from ..errors import AppError, NotFoundError
from ..repositories import DepartmentRepository, EmployeeRepository
from ..responses import Responder, ResponseFormat, boundary_route, parse_id, read_payload
from ..schemas import DepartmentRead, EmployeeRead, EmployeeSummary, dump

NOT_FOUND = "Department not found"


def build_router(fmt: ResponseFormat) -> APIRouter:
    responder = Responder(fmt)
    html_base = "/departments"
    router = APIRouter(
        prefix="/api/departments" if fmt is ResponseFormat.JSON else html_base,
        tags=["departments"],
        dependencies=[Depends(protect)],
        route_class=boundary_route(responder, fallback=html_base),
    )

    @router.get("")
    async def list_departments(
        request: Request, session: AsyncSession = Depends(get_db_session)
    ) -> Response:
        """Active departments with their active employee counts."""

        listings = await DepartmentRepository(session).list()
        data = [
            dump(
                DepartmentRead.model_validate(item.department).model_copy(
                    update={"employee_count": item.employee_count}
                )
            )
            for item in listings
        ]
        return responder.show(request, "departments/index.html", title="Departments", data=data)

    if fmt is ResponseFormat.HTML:

        @router.get("/new")
        async def new_department_form(
            request: Request, session: AsyncSession = Depends(get_db_session)
        ) -> Response:
            employees = await EmployeeRepository(session).active_employees()
            return responder.show(
                request,
                "departments/form.html",
                title="Add New Department",
                data=None,
                employees=[dump(EmployeeSummary.model_validate(e)) for e in employees],
            )

        @router.get("/{department_id}/edit")
        async def edit_department_form(
            request: Request, department_id: str, session: AsyncSession = Depends(get_db_session)
        ) -> Response:
            try:
                department = await DepartmentRepository(session).get(
                    parse_id(department_id, not_found=NOT_FOUND)
                )
            except AppError as exc:
                return responder.fail(request, exc, redirect_to=html_base)
            # head candidates are the department's own active members
            members = await EmployeeRepository(session).in_department(department.id)
            return responder.show(
                request,
                "departments/form.html",
                title="Edit Department",
                data=dump(DepartmentRead.model_validate(department)),
                employees=[dump(EmployeeSummary.model_validate(e)) for e in members],
            )

    @router.post("")
    async def create_department(
        request: Request, session: AsyncSession = Depends(get_db_session)
    ) -> Response:
        try:
            department = await DepartmentRepository(session).create(await read_payload(request))
        except AppError as exc:
            return responder.fail(request, exc, redirect_to=f"{html_base}/new")
        return responder.done(
            request,
            message="Department created successfully",
            redirect_to=html_base,
            data=dump(DepartmentRead.model_validate(department)),
            status_code=status.HTTP_201_CREATED,
        )

    @router.get("/{department_id}")
    async def show_department(
        request: Request, department_id: str, session: AsyncSession = Depends(get_db_session)
    ) -> Response:
        """A department together with its active employees."""

        repo = DepartmentRepository(session)
        try:
            department = await repo.get(parse_id(department_id, not_found=NOT_FOUND))
        except AppError as exc:
            return responder.fail(request, exc, redirect_to=html_base)

        members = await EmployeeRepository(session).in_department(department.id)
        read = DepartmentRead.model_validate(department).model_copy(
            update={"employee_count": len(members)}
        )
        return responder.show(
            request,
            "departments/show.html",
            title=department.name,
            data={
                "department": dump(read),
                "employees": [dump(EmployeeRead.model_validate(e)) for e in members],
            },
        )

    @router.api_route("/{department_id}", methods=["PUT", "PATCH"])
    async def update_department(
        request: Request, department_id: str, session: AsyncSession = Depends(get_db_session)
    ) -> Response:
        try:
            target = parse_id(department_id, not_found=NOT_FOUND)
            department = await DepartmentRepository(session).update(
                target, await read_payload(request)
            )
        except NotFoundError as exc:
            return responder.fail(request, exc, redirect_to=html_base)
        except AppError as exc:
            return responder.fail(request, exc, redirect_to=f"{html_base}/{department_id}/edit")
        return responder.done(
            request,
            message="Department updated successfully",
            redirect_to=f"{html_base}/{department.id}",
            data=dump(DepartmentRead.model_validate(department)),
        )

    @router.delete("/{department_id}")
    async def delete_department(
        request: Request, department_id: str, session: AsyncSession = Depends(get_db_session)
    ) -> Response:
        try:
            await DepartmentRepository(session).soft_delete(
                parse_id(department_id, not_found=NOT_FOUND)
            )
        except AppError as exc:
            return responder.fail(request, exc, redirect_to=html_base)
        return responder.done(
            request, message="Department deleted successfully", redirect_to=html_base
        )

    return router
