"""Dashboard, report pages and the generic error pages."""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_dashboard_renders_overview(
    auth_client: AsyncClient, make_department, make_employee
) -> None:
    department = await make_department(name="Engineering")
    await make_employee(department)

    response = await auth_client.get("/")

    assert response.status_code == 200
    assert "Dashboard Overview" in response.text
    assert "Engineering" in response.text


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("path", "title"),
    [
        ("/reports", "Reports Dashboard"),
        ("/reports/employee-analytics", "Employee Analytics"),
        ("/reports/department-performance", "Department Performance"),
        ("/reports/financial", "Financial Report"),
    ],
)
async def test_report_pages_render(
    auth_client: AsyncClient, make_department, make_employee, path: str, title: str
) -> None:
    department = await make_department()
    await make_employee(department)

    response = await auth_client.get(path)

    assert response.status_code == 200
    assert title in response.text


@pytest.mark.asyncio
async def test_report_api_envelope(auth_client: AsyncClient, make_department, make_employee) -> None:
    department = await make_department(budget=0.0)
    await make_employee(department, salary=50_000.0)

    analytics = (await auth_client.get("/api/reports/employee-analytics")).json()
    assert analytics["success"] is True
    assert sum(b["count"] for b in analytics["data"]["salaryRanges"]) == 1

    performance = (await auth_client.get("/api/reports/department-performance")).json()
    assert performance["data"]["departmentPerformance"][0]["budgetUtilization"] == 0

    overview = (await auth_client.get("/api/reports")).json()
    assert overview["data"]["overview"]["totalEmployees"] == 1


@pytest.mark.asyncio
async def test_unknown_path_renders_not_found(client: AsyncClient) -> None:
    response = await client.get("/no/such/page")

    assert response.status_code == 404
    assert "Page not found" in response.text
