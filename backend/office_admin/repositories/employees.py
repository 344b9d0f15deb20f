"""Employee persistence: listing, lookup, create/update and soft delete."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..errors import FieldViolation, NotFoundError, ValidationError
from ..integrity import ensure_employee_deletable
from ..models import Department, Employee
from ..pagination import Page, Pagination
from ..schemas import MAX_ID, EmployeeInput
from ..validation import validate_employee

logger = logging.getLogger(__name__)


def _like(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@dataclass(frozen=True)
class EmployeeFilters:
    search: Optional[str] = None
    department: Optional[int] = None
    job_title: Optional[str] = None

    @classmethod
    def from_query(
        cls,
        search: Optional[str] = None,
        department: Optional[str] = None,
        job_title: Optional[str] = None,
    ) -> "EmployeeFilters":
        try:
            department_id = int(department) if department not in (None, "") else None
        except ValueError:
            department_id = None
        if department_id is not None and not 0 < department_id <= MAX_ID:
            department_id = None
        return cls(
            search=(search or "").strip() or None,
            department=department_id,
            job_title=(job_title or "").strip() or None,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "search": self.search or "",
            "department": self.department or "",
            "jobTitle": self.job_title or "",
        }


class EmployeeRepository:
    """Queries and mutations over the `employees` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _relations():
        return (selectinload(Employee.department), selectinload(Employee.supervisor))

    async def list(
        self, filters: EmployeeFilters = EmployeeFilters(), *, page: int = 1, limit: int = 10
    ) -> Page[Employee]:
        """Active employees matching `filters`, one page at a time."""

        conditions = [Employee.is_active.is_(True)]
        if filters.search:
            pattern = _like(filters.search)
            conditions.append(
                or_(
                    Employee.first_name.ilike(pattern, escape="\\"),
                    Employee.last_name.ilike(pattern, escape="\\"),
                    Employee.email.ilike(pattern, escape="\\"),
                )
            )
        if filters.department is not None:
            conditions.append(Employee.department_id == filters.department)
        if filters.job_title:
            conditions.append(Employee.job_title.ilike(_like(filters.job_title), escape="\\"))

        total = await self.session.scalar(select(func.count(Employee.id)).where(*conditions))
        pagination = Pagination(current_page=page, limit=limit, total=total or 0)
        result = await self.session.execute(
            select(Employee)
            .options(*self._relations())
            .where(*conditions)
            .order_by(Employee.first_name, Employee.last_name, Employee.id)
            .offset(pagination.offset)
            .limit(limit)
        )
        return Page(items=list(result.scalars().all()), pagination=pagination)

    async def get(self, employee_id: int) -> Employee:
        """Fetch one employee (active or not) with department and supervisor loaded."""

        result = await self.session.execute(
            select(Employee)
            .options(*self._relations())
            .where(Employee.id == employee_id)
            .execution_options(populate_existing=True)
        )
        employee = result.scalar_one_or_none()
        if employee is None:
            raise NotFoundError("Employee not found")
        return employee

    async def active_subordinates(self, employee_id: int) -> Sequence[Employee]:
        result = await self.session.execute(
            select(Employee)
            .where(Employee.supervisor_id == employee_id, Employee.is_active.is_(True))
            .order_by(Employee.first_name, Employee.last_name)
        )
        return list(result.scalars().all())

    async def active_employees(self, *, exclude_id: Optional[int] = None) -> Sequence[Employee]:
        """Supervisor / head-of-department picker options."""

        stmt = select(Employee).where(Employee.is_active.is_(True))
        if exclude_id is not None:
            stmt = stmt.where(Employee.id != exclude_id)
        result = await self.session.execute(stmt.order_by(Employee.first_name, Employee.last_name))
        return list(result.scalars().all())

    async def in_department(self, department_id: int) -> Sequence[Employee]:
        result = await self.session.execute(
            select(Employee)
            .options(*self._relations())
            .where(Employee.department_id == department_id, Employee.is_active.is_(True))
            .order_by(Employee.first_name, Employee.last_name)
        )
        return list(result.scalars().all())

    async def count_active_subordinates(self, employee_id: int) -> int:
        count = await self.session.scalar(
            select(func.count(Employee.id)).where(
                Employee.supervisor_id == employee_id, Employee.is_active.is_(True)
            )
        )
        return count or 0

    async def _check_references(
        self, payload: EmployeeInput, *, employee_id: Optional[int] = None
    ) -> None:
        violations: list[FieldViolation] = []

        department = await self.session.get(Department, payload.department)
        if department is None or not department.is_active:
            violations.append(FieldViolation("department", "Department not found"))

        if payload.supervisor is not None:
            supervisor = await self.session.get(Employee, payload.supervisor)
            if supervisor is None or not supervisor.is_active:
                violations.append(FieldViolation("supervisor", "Supervisor not found"))

        # uniqueness spans active and inactive records alike
        stmt = select(Employee.id).where(Employee.email == payload.email)
        if employee_id is not None:
            stmt = stmt.where(Employee.id != employee_id)
        if await self.session.scalar(stmt.limit(1)) is not None:
            violations.append(FieldViolation("email", "Email already exists"))

        if violations:
            raise ValidationError(violations)

    @staticmethod
    def _apply(employee: Employee, payload: EmployeeInput) -> None:
        employee.first_name = payload.first_name
        employee.last_name = payload.last_name
        employee.email = payload.email
        employee.phone = payload.phone
        employee.job_title = payload.job_title
        employee.department_id = payload.department
        employee.supervisor_id = payload.supervisor
        employee.salary = payload.salary
        employee.hire_date = payload.hire_date
        employee.country = payload.country
        employee.state = payload.state
        employee.city = payload.city
        employee.address = payload.address

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.warning("Employee write rejected by the database: %s", exc.orig)
            raise ValidationError.single("email", "Email already exists") from exc

    async def create(self, data: Mapping[str, Any]) -> Employee:
        payload = validate_employee(data)
        await self._check_references(payload)

        employee = Employee()
        self._apply(employee, payload)
        self.session.add(employee)
        await self._commit()
        logger.info("Created employee id=%s email=%s", employee.id, employee.email)
        return await self.get(employee.id)

    async def update(self, employee_id: int, data: Mapping[str, Any]) -> Employee:
        """Full replace of the mutable fields, re-validated."""

        employee = await self.get(employee_id)
        payload = validate_employee(data, employee_id=employee_id)
        await self._check_references(payload, employee_id=employee_id)

        self._apply(employee, payload)
        await self._commit()
        return await self.get(employee_id)

    async def soft_delete(self, employee_id: int) -> Employee:
        employee = await self.get(employee_id)
        ensure_employee_deletable(await self.count_active_subordinates(employee_id))

        employee.is_active = False
        await self.session.commit()
        logger.info("Deactivated employee id=%s", employee_id)
        return employee
