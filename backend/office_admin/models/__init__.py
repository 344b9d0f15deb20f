"""SQLAlchemy models exposed by the backend."""
from .admin import Admin
from .base import Base
from .department import Department
from .employee import Employee

__all__ = ["Admin", "Base", "Department", "Employee"]
