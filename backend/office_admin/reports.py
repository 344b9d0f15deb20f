"""Read-only reporting over active employees and departments.

Every section is a single aggregate query issued through the SQLAlchemy
query builder; nothing here mutates state. Time windows ("last 30 days",
"last 6 months", tenure) are evaluated against the clock at call time.
"""
from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Any, Callable, Optional, Sequence

from sqlalchemy import and_, case, extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .models import Department, Employee

SALARY_BOUNDARIES: tuple[float, ...] = (0, 50_000, 75_000, 100_000, 125_000, 150_000, 200_000)
TENURE_BOUNDARIES: tuple[float, ...] = (0, 1, 3, 5, 10, 15, 20)
DAYS_PER_YEAR = 365.25
RECENT_HIRE_DAYS = 30
GROWTH_WINDOW_MONTHS = 6
TREND_WINDOW_MONTHS = 12
JOB_TITLE_LIMIT = 15
TOP_EARNER_LIMIT = 10
DASHBOARD_TOP_LIMIT = 10


def months_before(moment: datetime, months: int) -> datetime:
    """Shift `moment` back by calendar months, clamping the day to the target month."""

    index = moment.year * 12 + (moment.month - 1) - months
    year, month0 = divmod(index, 12)
    day = min(moment.day, calendar.monthrange(year, month0 + 1)[1])
    return moment.replace(year=year, month=month0 + 1, day=day)


def tenure_cutoff(now: datetime, years: float) -> date:
    """Latest hire date whose tenure, measured at `now`, is at least `years`."""

    return (now - timedelta(days=years * DAYS_PER_YEAR)).date()


def _bucket_label(lower: float, upper: Optional[float]) -> str:
    return f"{lower:g}+" if upper is None else f"{lower:g}-{upper:g}"


def _fill_buckets(boundaries: Sequence[float], rows: dict[float, Any]) -> list[dict[str, Any]]:
    """One entry per bucket, empty buckets included, so counts always add up."""

    buckets = []
    uppers: list[Optional[float]] = list(boundaries[1:]) + [None]
    for lower, upper in zip(boundaries, uppers):
        row = rows.get(lower)
        buckets.append(
            {
                "min": lower,
                "max": upper,
                "label": _bucket_label(lower, upper),
                "count": row.count if row is not None else 0,
                "avgSalary": float(row.avgSalary) if row is not None else 0.0,
            }
        )
    return buckets


def _rows(result) -> list[dict[str, Any]]:
    return [dict(row._mapping) for row in result.all()]


class ReportService:
    """Aggregation queries backing the dashboard and the report pages."""

    def __init__(self, session: AsyncSession, *, clock: Callable[[], datetime] = datetime.now) -> None:
        self.session = session
        self._clock = clock

    # -- shared building blocks -------------------------------------------------

    @staticmethod
    def _active_employee():
        return Employee.is_active.is_(True)

    def _staffed_departments(self, *columns, employee_filter=None):
        """Active departments outer-joined to their active employees, grouped per department."""

        join_on = and_(Employee.department_id == Department.id, self._active_employee())
        if employee_filter is not None:
            join_on = and_(join_on, employee_filter)
        return (
            select(
                Department.id.label("id"),
                Department.name.label("name"),
                Department.budget.label("budget"),
                *columns,
            )
            .outerjoin(Employee, join_on)
            .where(Department.is_active.is_(True))
            .group_by(Department.id, Department.name, Department.budget)
        )

    @staticmethod
    def _headcount():
        return func.count(Employee.id)

    @staticmethod
    def _total_salary():
        return func.coalesce(func.sum(Employee.salary), 0.0)

    @staticmethod
    def _avg_salary():
        return func.coalesce(func.avg(Employee.salary), 0.0)

    async def _salary_by_job_title(self) -> list[dict[str, Any]]:
        avg_salary = func.avg(Employee.salary).label("avgSalary")
        result = await self.session.execute(
            select(
                Employee.job_title.label("jobTitle"),
                func.count(Employee.id).label("count"),
                avg_salary,
                func.min(Employee.salary).label("minSalary"),
                func.max(Employee.salary).label("maxSalary"),
                func.sum(Employee.salary).label("totalSalary"),
            )
            .where(self._active_employee())
            .group_by(Employee.job_title)
            .order_by(avg_salary.desc(), Employee.job_title)
            .limit(JOB_TITLE_LIMIT)
        )
        return _rows(result)

    # -- overview / dashboard ---------------------------------------------------

    async def overview(self) -> dict[str, Any]:
        """Head counts, hires in the trailing 30 days and the total salary bill."""

        now = self._clock()
        recent_since = (now - timedelta(days=RECENT_HIRE_DAYS)).date()
        employees = await self.session.execute(
            select(
                func.count(Employee.id).label("totalEmployees"),
                func.count(case((Employee.hire_date >= recent_since, Employee.id))).label(
                    "recentHires"
                ),
                self._total_salary().label("totalSalaryBudget"),
            ).where(self._active_employee())
        )
        totals = employees.one()
        departments = await self.session.scalar(
            select(func.count(Department.id)).where(Department.is_active.is_(True))
        )
        return {
            "totalEmployees": totals.totalEmployees,
            "totalDepartments": departments or 0,
            "recentHires": totals.recentHires,
            "totalSalaryBudget": float(totals.totalSalaryBudget),
        }

    async def dashboard(self) -> dict[str, Any]:
        now = self._clock()
        overview = await self.overview()

        headcount = self._headcount().label("employeeCount")
        department_stats = _rows(
            await self.session.execute(
                self._staffed_departments(headcount, self._total_salary().label("totalSalary"))
                .order_by(headcount.desc(), Department.name)
            )
        )

        title_count = func.count(Employee.id).label("count")
        job_title_stats = _rows(
            await self.session.execute(
                select(Employee.job_title.label("jobTitle"), title_count)
                .where(self._active_employee())
                .group_by(Employee.job_title)
                .order_by(title_count.desc(), Employee.job_title)
                .limit(DASHBOARD_TOP_LIMIT)
            )
        )

        country_count = func.count(Employee.id).label("count")
        location_stats = _rows(
            await self.session.execute(
                select(Employee.country.label("country"), country_count)
                .where(self._active_employee())
                .group_by(Employee.country)
                .order_by(country_count.desc(), Employee.country)
                .limit(DASHBOARD_TOP_LIMIT)
            )
        )

        trend_since = months_before(now, TREND_WINDOW_MONTHS).date()
        year = extract("year", Employee.hire_date).label("year")
        month = extract("month", Employee.hire_date).label("month")
        hire_trends = _rows(
            await self.session.execute(
                select(year, month, func.count(Employee.id).label("count"))
                .where(self._active_employee(), Employee.hire_date >= trend_since)
                .group_by(year, month)
                .order_by(year, month)
            )
        )

        return {
            "overview": overview,
            "departmentStats": department_stats,
            "jobTitleStats": job_title_stats,
            "locationStats": location_stats,
            "hireTrends": hire_trends,
        }

    # -- employee analytics -----------------------------------------------------

    async def salary_stats(self) -> dict[str, Any]:
        result = await self.session.execute(
            select(
                func.count(Employee.id).label("count"),
                func.avg(Employee.salary).label("avgSalary"),
                func.min(Employee.salary).label("minSalary"),
                func.max(Employee.salary).label("maxSalary"),
                func.sum(Employee.salary).label("totalSalary"),
            ).where(self._active_employee())
        )
        row = result.one()
        if not row.count:
            return {}
        return {
            "avgSalary": float(row.avgSalary),
            "minSalary": float(row.minSalary),
            "maxSalary": float(row.maxSalary),
            "totalSalary": float(row.totalSalary),
        }

    async def salary_histogram(self) -> list[dict[str, Any]]:
        """Active employees bucketed by salary over SALARY_BOUNDARIES."""

        bounds = SALARY_BOUNDARIES
        bucket = case(
            *[(Employee.salary < upper, lower) for lower, upper in zip(bounds, bounds[1:])],
            else_=bounds[-1],
        ).label("bucket")
        result = await self.session.execute(
            select(
                bucket,
                func.count(Employee.id).label("count"),
                func.avg(Employee.salary).label("avgSalary"),
            )
            .where(self._active_employee())
            .group_by(bucket)
        )
        return _fill_buckets(bounds, {float(row.bucket): row for row in result.all()})

    async def tenure_histogram(self) -> list[dict[str, Any]]:
        """Active employees bucketed by years since hire (365.25-day years)."""

        now = self._clock()
        bounds = TENURE_BOUNDARIES
        # tenure < upper  <=>  hired after the cutoff date for `upper` years
        bucket = case(
            *[
                (Employee.hire_date > tenure_cutoff(now, upper), lower)
                for lower, upper in zip(bounds, bounds[1:])
            ],
            else_=bounds[-1],
        ).label("bucket")
        result = await self.session.execute(
            select(
                bucket,
                func.count(Employee.id).label("count"),
                func.avg(Employee.salary).label("avgSalary"),
            )
            .where(self._active_employee())
            .group_by(bucket)
        )
        return _fill_buckets(bounds, {float(row.bucket): row for row in result.all()})

    async def department_distribution(self) -> list[dict[str, Any]]:
        headcount = self._headcount().label("employeeCount")
        result = await self.session.execute(
            self._staffed_departments(
                headcount,
                self._avg_salary().label("avgSalary"),
                self._total_salary().label("totalSalary"),
            ).order_by(headcount.desc(), Department.name)
        )
        return _rows(result)

    async def top_earners(self) -> list[dict[str, Any]]:
        result = await self.session.execute(
            select(Employee)
            .options(selectinload(Employee.department), selectinload(Employee.supervisor))
            .where(self._active_employee())
            .order_by(Employee.salary.desc(), Employee.id)
            .limit(TOP_EARNER_LIMIT)
        )
        return [
            {
                "id": employee.id,
                "firstName": employee.first_name,
                "lastName": employee.last_name,
                "fullName": employee.full_name,
                "jobTitle": employee.job_title,
                "salary": employee.salary,
                "department": (
                    {"id": employee.department.id, "name": employee.department.name}
                    if employee.department is not None
                    else None
                ),
                "supervisor": (
                    {"id": employee.supervisor.id, "fullName": employee.supervisor.full_name}
                    if employee.supervisor is not None
                    else None
                ),
            }
            for employee in result.scalars().all()
        ]

    async def employee_analytics(self) -> dict[str, Any]:
        return {
            "salaryStats": await self.salary_stats(),
            "salaryRanges": await self.salary_histogram(),
            "departmentDistribution": await self.department_distribution(),
            "experienceStats": await self.tenure_histogram(),
            "salaryByJobTitle": await self._salary_by_job_title(),
            "topEarners": await self.top_earners(),
        }

    # -- department performance -------------------------------------------------

    async def budget_utilization(self) -> list[dict[str, Any]]:
        total_salary = self._total_salary()
        utilization = case(
            (Department.budget > 0, total_salary / Department.budget * 100),
            else_=0.0,
        ).label("budgetUtilization")
        result = await self.session.execute(
            self._staffed_departments(
                self._headcount().label("employeeCount"),
                total_salary.label("totalSalary"),
                self._avg_salary().label("avgSalary"),
                utilization,
            ).order_by(utilization.desc(), Department.name)
        )
        return _rows(result)

    async def department_heads(self) -> list[dict[str, Any]]:
        result = await self.session.execute(
            select(Department, Employee)
            .join(Employee, Employee.id == Department.head_of_department_id)
            .where(Department.is_active.is_(True), self._active_employee())
            .order_by(Department.name)
        )
        return [
            {
                "id": department.id,
                "name": department.name,
                "budget": department.budget,
                "headOfDepartment": {
                    "id": head.id,
                    "firstName": head.first_name,
                    "lastName": head.last_name,
                    "fullName": head.full_name,
                    "jobTitle": head.job_title,
                    "salary": head.salary,
                },
            }
            for department, head in result.all()
        ]

    async def department_growth(self) -> list[dict[str, Any]]:
        since = months_before(self._clock(), GROWTH_WINDOW_MONTHS).date()
        hires = self._headcount().label("recentHires")
        result = await self.session.execute(
            self._staffed_departments(hires, employee_filter=Employee.hire_date >= since)
            .order_by(hires.desc(), Department.name)
        )
        return _rows(result)

    async def department_performance(self) -> dict[str, Any]:
        return {
            "departmentPerformance": await self.budget_utilization(),
            "departmentHeads": await self.department_heads(),
            "departmentGrowth": await self.department_growth(),
        }

    # -- financial ----------------------------------------------------------------

    async def salary_costs(self) -> list[dict[str, Any]]:
        total_salary = self._total_salary()
        result = await self.session.execute(
            self._staffed_departments(
                total_salary.label("totalSalary"),
                self._avg_salary().label("avgSalary"),
                self._headcount().label("employeeCount"),
                (Department.budget - total_salary).label("budgetVariance"),
            ).order_by(total_salary.desc(), Department.name)
        )
        return _rows(result)

    async def cost_per_employee(self) -> list[dict[str, Any]]:
        headcount = self._headcount()
        total_salary = self._total_salary()
        cost = case((headcount > 0, total_salary / headcount), else_=0.0).label("costPerEmployee")
        result = await self.session.execute(
            self._staffed_departments(
                headcount.label("employeeCount"),
                total_salary.label("totalSalary"),
                cost,
            ).order_by(cost.desc(), Department.name)
        )
        return _rows(result)

    async def budget_summary(self) -> dict[str, Any]:
        result = await self.session.execute(
            select(
                func.coalesce(func.sum(Department.budget), 0.0).label("totalBudget"),
                func.count(case((Department.budget > 0, Department.id))).label(
                    "departmentsWithBudget"
                ),
                func.count(case((Department.budget <= 0, Department.id))).label(
                    "departmentsWithoutBudget"
                ),
            ).where(Department.is_active.is_(True))
        )
        row = result.one()
        return {
            "totalBudget": float(row.totalBudget),
            "departmentsWithBudget": row.departmentsWithBudget,
            "departmentsWithoutBudget": row.departmentsWithoutBudget,
        }

    async def financial_report(self) -> dict[str, Any]:
        return {
            "salaryCosts": await self.salary_costs(),
            "salaryByJobTitle": await self._salary_by_job_title(),
            "costPerEmployee": await self.cost_per_employee(),
            "budgetSummary": await self.budget_summary(),
        }
