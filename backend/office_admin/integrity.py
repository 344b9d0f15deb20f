"""Referential-integrity rules checked before mutating records.

These are plain functions over values the repositories have already
fetched, so they can be reasoned about (and tested) without a database.
"""
from __future__ import annotations

from typing import Optional

from .errors import ConflictError


def is_self_reference(employee_id: Optional[int], supervisor_id: Optional[int]) -> bool:
    return employee_id is not None and supervisor_id is not None and employee_id == supervisor_id


def ensure_department_deletable(active_employee_count: int) -> None:
    if active_employee_count > 0:
        raise ConflictError("Cannot delete department with active employees")


def ensure_employee_deletable(active_subordinate_count: int) -> None:
    if active_subordinate_count > 0:
        raise ConflictError("Cannot delete employee who is supervising other employees")
