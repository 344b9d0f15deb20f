"""Aggregate reports over a small, fixed data set."""
from datetime import date, datetime

import pytest
import pytest_asyncio

from office_admin.reports import ReportService

NOW = datetime(2024, 6, 15, 12, 0)


@pytest_asyncio.fixture
async def company(session, make_department, make_employee) -> dict:
    alpha = await make_department(name="Alpha", budget=200_000.0)
    beta = await make_department(name="Beta", budget=0.0)
    await make_department(name="Closed", budget=999_999.0, is_active=False)

    newcomer = await make_employee(
        alpha, first_name="Nina", salary=40_000.0, hire_date=date(2024, 6, 1), job_title="Analyst"
    )
    veteran = await make_employee(
        alpha, first_name="Victor", salary=120_000.0, hire_date=date(2015, 1, 1), job_title="Director"
    )
    gone = await make_employee(
        alpha, first_name="Gail", salary=500_000.0, hire_date=date(2010, 1, 1), is_active=False
    )
    middle = await make_employee(
        beta, first_name="Mo", salary=80_000.0, hire_date=date(2022, 1, 10), job_title="Analyst",
        country="Canada",
    )

    alpha.head_of_department_id = veteran.id
    beta.head_of_department_id = gone.id
    await session.commit()
    return {"alpha": alpha, "beta": beta, "newcomer": newcomer, "veteran": veteran, "middle": middle}


@pytest.fixture
def service(session) -> ReportService:
    return ReportService(session, clock=lambda: NOW)


@pytest.mark.asyncio
async def test_overview_counts_only_active_records(company, service) -> None:
    assert await service.overview() == {
        "totalEmployees": 3,
        "totalDepartments": 2,
        "recentHires": 1,
        "totalSalaryBudget": 240_000.0,
    }


@pytest.mark.asyncio
async def test_dashboard_sections(company, service) -> None:
    data = await service.dashboard()

    assert [(row["name"], row["employeeCount"]) for row in data["departmentStats"]] == [
        ("Alpha", 2),
        ("Beta", 1),
    ]
    assert data["departmentStats"][0]["totalSalary"] == 160_000.0
    assert data["jobTitleStats"][0] == {"jobTitle": "Analyst", "count": 2}
    assert {row["country"]: row["count"] for row in data["locationStats"]} == {
        "United States": 2,
        "Canada": 1,
    }
    assert data["hireTrends"] == [{"year": 2024, "month": 6, "count": 1}]


@pytest.mark.asyncio
async def test_histograms_cover_every_active_employee(company, service) -> None:
    analytics = await service.employee_analytics()

    salary = {b["label"]: b["count"] for b in analytics["salaryRanges"]}
    assert salary["0-50000"] == 1
    assert salary["75000-100000"] == 1
    assert salary["100000-125000"] == 1
    assert sum(salary.values()) == 3

    tenure = {b["label"]: b["count"] for b in analytics["experienceStats"]}
    assert tenure["0-1"] == 1
    assert tenure["1-3"] == 1
    assert tenure["5-10"] == 1
    assert sum(tenure.values()) == 3

    assert analytics["salaryStats"] == {
        "avgSalary": 80_000.0,
        "minSalary": 40_000.0,
        "maxSalary": 120_000.0,
        "totalSalary": 240_000.0,
    }
    assert [p["firstName"] for p in analytics["topEarners"]] == ["Victor", "Mo", "Nina"]
    assert analytics["topEarners"][0]["department"]["name"] == "Alpha"
    assert analytics["salaryByJobTitle"][0]["jobTitle"] == "Director"


@pytest.mark.asyncio
async def test_department_performance(company, service) -> None:
    data = await service.department_performance()

    utilization = {row["name"]: row["budgetUtilization"] for row in data["departmentPerformance"]}
    assert utilization == {"Alpha": pytest.approx(80.0), "Beta": 0}

    # Beta's head is inactive, so only Alpha is listed
    assert [(row["name"], row["headOfDepartment"]["fullName"]) for row in data["departmentHeads"]] == [
        ("Alpha", "Victor " + company["veteran"].last_name)
    ]
    assert {row["name"]: row["recentHires"] for row in data["departmentGrowth"]} == {
        "Alpha": 1,
        "Beta": 0,
    }


@pytest.mark.asyncio
async def test_financial_report(company, service) -> None:
    data = await service.financial_report()

    variance = {row["name"]: row["budgetVariance"] for row in data["salaryCosts"]}
    assert variance == {"Alpha": 40_000.0, "Beta": -80_000.0}

    cost = {row["name"]: row["costPerEmployee"] for row in data["costPerEmployee"]}
    assert cost == {"Alpha": 80_000.0, "Beta": 80_000.0}

    assert data["budgetSummary"] == {
        "totalBudget": 200_000.0,
        "departmentsWithBudget": 1,
        "departmentsWithoutBudget": 1,
    }


@pytest.mark.asyncio
async def test_empty_database(session, service) -> None:
    assert await service.salary_stats() == {}
    overview = await service.overview()
    assert overview == {
        "totalEmployees": 0,
        "totalDepartments": 0,
        "recentHires": 0,
        "totalSalaryBudget": 0.0,
    }
    histogram = await service.salary_histogram()
    assert len(histogram) == 7
    assert all(bucket["count"] == 0 for bucket in histogram)
