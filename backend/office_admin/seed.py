"""
Reset the database to a small sample company.

WARNING: everything in the admins, departments and employees tables is
deleted first. Run with --yes to skip the confirmation prompt.
"""
from __future__ import annotations

import argparse
import asyncio
from datetime import date
from typing import Optional, Sequence

from sqlalchemy import delete, update

from .config import Settings
from .database import Database
from .models import Admin, Department, Employee
from .security import hash_password

ADMIN_EMAIL = "admin@company.com"
ADMIN_PASSWORD = "admin123"

DEPARTMENTS = [
    ("Human Resources", "Manages employee relations, recruitment, and company policies", 500_000),
    ("Information Technology", "Handles all technical infrastructure and software development", 800_000),
    ("Finance", "Manages company finances, accounting, and financial planning", 300_000),
    ("Marketing", "Responsible for brand promotion and customer acquisition", 400_000),
    ("Operations", "Oversees daily business operations and process optimization", 600_000),
]

# (first, last, phone suffix, job title, department, salary, hire date, address)
EMPLOYEES = [
    ("John", "Smith", "0101", "HR Manager", "Human Resources", 75_000, date(2020, 1, 15),
     "123 Main St, San Francisco, CA 94102"),
    ("Sarah", "Johnson", "0102", "Senior Software Engineer", "Information Technology", 95_000,
     date(2019, 6, 1), "456 Tech Ave, San Francisco, CA 94105"),
    ("Michael", "Brown", "0103", "Financial Analyst", "Finance", 65_000, date(2021, 3, 10),
     "789 Finance Blvd, San Francisco, CA 94108"),
    ("Emily", "Davis", "0104", "Marketing Specialist", "Marketing", 55_000, date(2022, 1, 20),
     "321 Marketing St, San Francisco, CA 94103"),
    ("David", "Wilson", "0105", "Operations Manager", "Operations", 80_000, date(2018, 9, 15),
     "654 Operations Way, San Francisco, CA 94107"),
    ("Lisa", "Anderson", "0106", "Software Developer", "Information Technology", 70_000,
     date(2021, 8, 1), "987 Code Lane, San Francisco, CA 94104"),
    ("Robert", "Taylor", "0107", "Accountant", "Finance", 60_000, date(2020, 11, 30),
     "147 Accounting Ave, San Francisco, CA 94109"),
    ("Jennifer", "Martinez", "0108", "Marketing Coordinator", "Marketing", 45_000,
     date(2023, 2, 14), "258 Brand Blvd, San Francisco, CA 94106"),
]

DEPARTMENT_HEADS = {
    "Human Resources": "john.smith@company.com",
    "Information Technology": "sarah.johnson@company.com",
    "Finance": "michael.brown@company.com",
    "Marketing": "emily.davis@company.com",
    "Operations": "david.wilson@company.com",
}

# subordinate -> supervisor
SUPERVISORS = {
    "lisa.anderson@company.com": "sarah.johnson@company.com",
    "robert.taylor@company.com": "michael.brown@company.com",
    "jennifer.martinez@company.com": "emily.davis@company.com",
}


def _email(first: str, last: str) -> str:
    return f"{first}.{last}@company.com".lower()


async def seed_database(database: Database) -> dict[str, int]:
    """Wipe the three tables and insert the sample data. Returns row counts."""

    await database.create_all()
    async with database.sessionmaker() as session:
        await session.execute(update(Department).values(head_of_department_id=None))
        await session.execute(update(Employee).values(supervisor_id=None))
        await session.execute(delete(Employee))
        await session.execute(delete(Department))
        await session.execute(delete(Admin))
        await session.flush()
        print("Existing data cleared")

        departments = {
            name: Department(name=name, description=description, budget=budget)
            for name, description, budget in DEPARTMENTS
        }
        session.add_all(departments.values())
        session.add(Admin(email=ADMIN_EMAIL, password_hash=hash_password(ADMIN_PASSWORD)))
        await session.flush()
        print(f"Created {len(departments)} departments and the admin user")

        employees: dict[str, Employee] = {}
        for first, last, phone, title, department, salary, hired, address in EMPLOYEES:
            employee = Employee(
                first_name=first,
                last_name=last,
                email=_email(first, last),
                phone=f"+1-555-{phone}",
                job_title=title,
                department_id=departments[department].id,
                salary=float(salary),
                hire_date=hired,
                country="United States",
                state="California",
                city="San Francisco",
                address=address,
            )
            employees[employee.email] = employee
        session.add_all(employees.values())
        await session.flush()
        print(f"Created {len(employees)} employees")

        for department, email in DEPARTMENT_HEADS.items():
            departments[department].head_of_department_id = employees[email].id
        for subordinate, supervisor in SUPERVISORS.items():
            employees[subordinate].supervisor_id = employees[supervisor].id
        await session.commit()
        print("Department heads and supervisor relationships set")

    return {"departments": len(departments), "employees": len(employees), "admins": 1}


async def _run(settings: Settings) -> dict[str, int]:
    database = Database(settings.database_url)
    try:
        return await seed_database(database)
    finally:
        await database.dispose()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Reset the database with sample data.")
    parser.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    if not args.yes:
        print("This will DELETE all admins, departments and employees in")
        print(f"  {settings.database_url}")
        answer = input("Are you sure you want to continue? (yes/no): ").strip().lower()
        if answer not in {"yes", "y"}:
            print("Seeding cancelled")
            return 1

    counts = asyncio.run(_run(settings))
    print(
        f"Seeded {counts['departments']} departments, {counts['employees']} employees "
        f"and {counts['admins']} admin user"
    )
    print(f"Admin login: {ADMIN_EMAIL} / {ADMIN_PASSWORD} (change it after first login)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
