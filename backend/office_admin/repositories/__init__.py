"""Persistence access for employees, departments and administrators."""
from .admins import CredentialStore
from .departments import DepartmentListing, DepartmentRepository
from .employees import EmployeeFilters, EmployeeRepository

__all__ = [
    "CredentialStore",
    "DepartmentListing",
    "DepartmentRepository",
    "EmployeeFilters",
    "EmployeeRepository",
]
