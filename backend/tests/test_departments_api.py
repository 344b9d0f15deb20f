"""Department endpoints and the delete guard."""
import pytest
from httpx import AsyncClient

from conftest import employee_form


@pytest.mark.asyncio
async def test_create_list_and_show(auth_client: AsyncClient, make_employee) -> None:
    created = await auth_client.post(
        "/api/departments", json={"name": "Research", "description": "R&D", "budget": 150000}
    )
    assert created.status_code == 201
    department = created.json()["data"]
    assert department["name"] == "Research"
    assert department["budget"] == 150000.0
    assert department["headOfDepartment"] is None

    listing = await auth_client.get("/api/departments")
    assert [(d["name"], d["employeeCount"]) for d in listing.json()["data"]] == [("Research", 0)]


@pytest.mark.asyncio
async def test_show_includes_active_employees(
    auth_client: AsyncClient, make_department, make_employee
) -> None:
    department = await make_department(name="Support")
    head = await make_employee(department, first_name="Hana")
    await make_employee(department, first_name="Ivan", supervisor_id=head.id)
    await make_employee(department, first_name="Gone", is_active=False)

    updated = await auth_client.put(
        f"/api/departments/{department.id}",
        json={"name": "Support", "budget": 1000, "headOfDepartment": head.id},
    )
    assert updated.json()["data"]["headOfDepartment"]["firstName"] == "Hana"

    shown = (await auth_client.get(f"/api/departments/{department.id}")).json()["data"]
    assert shown["department"]["employeeCount"] == 2
    assert [e["firstName"] for e in shown["employees"]] == ["Hana", "Ivan"]
    assert shown["employees"][1]["supervisor"]["id"] == head.id


@pytest.mark.asyncio
async def test_duplicate_name_is_rejected(auth_client: AsyncClient, make_department) -> None:
    await make_department(name="Finance")

    response = await auth_client.post("/api/departments", json={"name": "Finance"})

    assert response.status_code == 400
    assert response.json()["error"] == "Department name already exists"


@pytest.mark.asyncio
async def test_delete_blocked_until_employees_move(
    auth_client: AsyncClient, make_department, make_employee
) -> None:
    department = await make_department(name="Legacy")
    target = await make_department(name="Modern")
    member = await make_employee(department)

    blocked = await auth_client.delete(f"/api/departments/{department.id}")
    assert blocked.status_code == 400
    assert blocked.json() == {
        "success": False,
        "error": "Cannot delete department with active employees",
    }

    moved = await auth_client.put(
        f"/api/employees/{member.id}", json=employee_form(target.id, email=member.email)
    )
    assert moved.status_code == 200

    deleted = await auth_client.delete(f"/api/departments/{department.id}")
    assert deleted.status_code == 200
    assert deleted.json()["message"] == "Department deleted successfully"

    names = [d["name"] for d in (await auth_client.get("/api/departments")).json()["data"]]
    assert names == ["Modern"]

    # still readable by id after the soft delete
    shown = await auth_client.get(f"/api/departments/{department.id}")
    assert shown.json()["data"]["department"]["isActive"] is False


@pytest.mark.asyncio
async def test_html_delete_flashes_the_conflict(
    auth_client: AsyncClient, make_department, make_employee
) -> None:
    department = await make_department(name="Busy")
    await make_employee(department)

    response = await auth_client.post(
        f"/departments/{department.id}", params={"_method": "DELETE"}
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/departments"
    page = await auth_client.get("/departments")
    assert "Cannot delete department with active employees" in page.text


@pytest.mark.asyncio
async def test_edit_form_offers_department_members(
    auth_client: AsyncClient, make_department, make_employee
) -> None:
    department = await make_department(name="Ops")
    other = await make_department(name="Elsewhere")
    await make_employee(department, first_name="Olga")
    await make_employee(other, first_name="Xavier")

    page = await auth_client.get(f"/departments/{department.id}/edit")

    assert page.status_code == 200
    assert "Olga" in page.text
    assert "Xavier" not in page.text
