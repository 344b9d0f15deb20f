"""Department persistence: listing, lookup, create/update and soft delete."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..errors import FieldViolation, NotFoundError, ValidationError
from ..integrity import ensure_department_deletable
from ..models import Department, Employee
from ..schemas import DepartmentInput
from ..validation import validate_department

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepartmentListing:
    department: Department
    employee_count: int


class DepartmentRepository:
    """Queries and mutations over the `departments` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list(self) -> list[DepartmentListing]:
        """Active departments sorted by name, with their active head count."""

        result = await self.session.execute(
            select(Department, func.count(Employee.id))
            .outerjoin(
                Employee,
                and_(Employee.department_id == Department.id, Employee.is_active.is_(True)),
            )
            .options(selectinload(Department.head_of_department))
            .where(Department.is_active.is_(True))
            .group_by(Department.id)
            .order_by(Department.name)
        )
        return [DepartmentListing(department, count) for department, count in result.all()]

    async def active_departments(self) -> Sequence[Department]:
        result = await self.session.execute(
            select(Department).where(Department.is_active.is_(True)).order_by(Department.name)
        )
        return list(result.scalars().all())

    async def get(self, department_id: int) -> Department:
        result = await self.session.execute(
            select(Department)
            .options(selectinload(Department.head_of_department))
            .where(Department.id == department_id)
            .execution_options(populate_existing=True)
        )
        department = result.scalar_one_or_none()
        if department is None:
            raise NotFoundError("Department not found")
        return department

    async def count_active_employees(self, department_id: int) -> int:
        count = await self.session.scalar(
            select(func.count(Employee.id)).where(
                Employee.department_id == department_id, Employee.is_active.is_(True)
            )
        )
        return count or 0

    async def _check_references(
        self, payload: DepartmentInput, *, department_id: Optional[int] = None
    ) -> None:
        violations: list[FieldViolation] = []

        stmt = select(Department.id).where(Department.name == payload.name)
        if department_id is not None:
            stmt = stmt.where(Department.id != department_id)
        if await self.session.scalar(stmt.limit(1)) is not None:
            violations.append(FieldViolation("name", "Department name already exists"))

        # membership of the head in this department is deliberately not checked
        if payload.head_of_department is not None:
            head = await self.session.get(Employee, payload.head_of_department)
            if head is None or not head.is_active:
                violations.append(
                    FieldViolation("head_of_department", "Head of department not found")
                )

        if violations:
            raise ValidationError(violations)

    @staticmethod
    def _apply(department: Department, payload: DepartmentInput) -> None:
        department.name = payload.name
        department.description = payload.description
        department.budget = payload.budget
        department.head_of_department_id = payload.head_of_department

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.warning("Department write rejected by the database: %s", exc.orig)
            raise ValidationError.single("name", "Department name already exists") from exc

    async def create(self, data: Mapping[str, Any]) -> Department:
        payload = validate_department(data)
        await self._check_references(payload)

        department = Department()
        self._apply(department, payload)
        self.session.add(department)
        await self._commit()
        logger.info("Created department id=%s name=%s", department.id, department.name)
        return await self.get(department.id)

    async def update(self, department_id: int, data: Mapping[str, Any]) -> Department:
        """Full replace; an empty head clears the reference."""

        department = await self.get(department_id)
        payload = validate_department(data)
        await self._check_references(payload, department_id=department_id)

        self._apply(department, payload)
        await self._commit()
        return await self.get(department_id)

    async def soft_delete(self, department_id: int) -> Department:
        department = await self.get(department_id)
        ensure_department_deletable(await self.count_active_employees(department_id))

        department.is_active = False
        await self.session.commit()
        logger.info("Deactivated department id=%s", department_id)
        return department
