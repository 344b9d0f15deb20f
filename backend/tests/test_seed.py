"""The sample-data seeder."""
import pytest
from sqlalchemy import func, select

from office_admin.models import Admin, Department, Employee
from office_admin.repositories import CredentialStore
from office_admin.seed import main, seed_database


@pytest.mark.asyncio
async def test_seed_replaces_existing_data(app, session, make_department) -> None:
    await make_department(name="Temporary")

    counts = await seed_database(app.state.database)

    assert counts == {"departments": 5, "employees": 8, "admins": 1}
    names = (await session.scalars(select(Department.name).order_by(Department.name))).all()
    assert "Temporary" not in names
    assert len(names) == 5
    assert await session.scalar(select(func.count(Employee.id))) == 8
    assert await session.scalar(select(func.count(Admin.id))) == 1
    assert await CredentialStore(session).verify("admin@company.com", "admin123")


@pytest.mark.asyncio
async def test_seed_links_heads_and_supervisors(app, session) -> None:
    await seed_database(app.state.database)

    it = await session.scalar(select(Department).where(Department.name == "Information Technology"))
    sarah = await session.scalar(select(Employee).where(Employee.email == "sarah.johnson@company.com"))
    lisa = await session.scalar(select(Employee).where(Employee.email == "lisa.anderson@company.com"))

    assert it.head_of_department_id == sarah.id
    assert lisa.supervisor_id == sarah.id
    assert lisa.department_id == it.id


def test_cancelled_without_confirmation(monkeypatch: pytest.MonkeyPatch, settings) -> None:
    monkeypatch.setenv("DATABASE_URL", settings.database_url)
    monkeypatch.setattr("builtins.input", lambda prompt="": "no")

    assert main([]) == 1
