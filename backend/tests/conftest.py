"""Test fixtures for the backend."""
import itertools
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from office_admin.config import Settings
from office_admin.dependencies import TOKEN_COOKIE
from office_admin.main import create_app
from office_admin.models import Department, Employee
from office_admin.repositories import CredentialStore

ADMIN_EMAIL = "admin@company.com"
ADMIN_PASSWORD = "admin123"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file per test."""

    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test_backend.db'}",
        jwt_secret="test-secret",
        session_secret="test-session-secret",
        environment="test",
    )


@pytest_asyncio.fixture
async def app(settings):
    """Application with its schema created (ASGITransport skips lifespan)."""

    application = create_app(settings)
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def session(app):
    async with app.state.database.sessionmaker() as db_session:
        yield db_session


@pytest_asyncio.fixture
async def client(app) -> AsyncClient:
    """Provide an HTTP client for integration tests."""

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http


@pytest_asyncio.fixture
async def admin(session):
    return await CredentialStore(session).create(ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest_asyncio.fixture
async def auth_client(client, admin) -> AsyncClient:
    """The client after a successful sign-in (token cookie in its jar)."""

    response = await client.post(
        "/auth/login", data={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 302
    assert TOKEN_COOKIE in client.cookies
    return client


@pytest.fixture
def make_department(session):
    """Insert a department directly, bypassing validation."""

    counter = itertools.count(1)

    async def factory(**overrides) -> Department:
        n = next(counter)
        values = {"name": f"Department {n}", "description": "Test department", "budget": 100_000.0}
        values.update(overrides)
        department = Department(**values)
        session.add(department)
        await session.commit()
        return department

    return factory


@pytest.fixture
def make_employee(session):
    """Insert an employee directly, bypassing validation."""

    counter = itertools.count(1)

    async def factory(department: Department, **overrides) -> Employee:
        n = next(counter)
        values = {
            "first_name": "Test",
            "last_name": f"Person{n:03d}",
            "email": f"person{n}@example.com",
            "job_title": "Engineer",
            "department_id": department.id,
            "salary": 60_000.0,
            "hire_date": date(2020, 1, 1),
            "country": "United States",
            "state": "California",
            "city": "San Francisco",
        }
        values.update(overrides)
        employee = Employee(**values)
        session.add(employee)
        await session.commit()
        return employee

    return factory


def employee_form(department_id: int, **overrides) -> dict:
    """A valid camelCase employee payload."""

    payload = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "phone": "+1 555 0100",
        "jobTitle": "Engineer",
        "department": str(department_id),
        "salary": "85000",
        "hireDate": "2021-05-03",
        "country": "United Kingdom",
        "state": "England",
        "city": "London",
        "address": "12 St James's Square",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def employee_payload():
    return employee_form
