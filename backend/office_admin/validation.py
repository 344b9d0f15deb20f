"""Field-level validation for employee and department payloads.

Runs the pydantic input models in one pass and turns every failure into a
:class:`~office_admin.errors.FieldViolation`, so callers get the complete list
of problems instead of only the first one.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Type, TypeVar

import pydantic

from .errors import FieldViolation, ValidationError
from .integrity import is_self_reference
from .schemas import DepartmentInput, EmployeeInput

InputT = TypeVar("InputT", bound=pydantic.BaseModel)

FIELD_LABELS = {
    "first_name": "First name",
    "last_name": "Last name",
    "email": "Email",
    "phone": "Phone number",
    "job_title": "Job title",
    "department": "Department",
    "supervisor": "Supervisor",
    "salary": "Salary",
    "hire_date": "Hire date",
    "country": "Country",
    "state": "State",
    "city": "City",
    "address": "Address",
    "name": "Department name",
    "description": "Description",
    "budget": "Budget",
    "head_of_department": "Head of department",
}

# ids that must point at an existing row; out-of-range values cannot
REFERENCE_FIELDS = {"department", "supervisor", "head_of_department"}


def _field_name(model: Type[pydantic.BaseModel], loc: tuple) -> str:
    if not loc:
        return "__all__"
    key = str(loc[0])
    if key in model.model_fields:
        return key
    for name, info in model.model_fields.items():
        if info.alias == key:
            return name
    return key


def _message(field: str, error: Mapping[str, Any]) -> str:
    label = FIELD_LABELS.get(field, field.replace("_", " ").capitalize())
    kind = error["type"]
    ctx = error.get("ctx") or {}
    if field in REFERENCE_FIELDS and kind in {"greater_than", "less_than_equal"}:
        return f"{label} not found"
    if kind == "missing":
        return f"{label} is required"
    if kind == "string_too_short":
        return f"{label} must be at least {ctx.get('min_length')} characters long"
    if kind == "string_too_long":
        return f"{label} must be less than {ctx.get('max_length')} characters"
    if kind == "string_pattern_mismatch":
        return f"Please enter a valid {label.lower()}"
    if kind in {"greater_than_equal", "greater_than"}:
        return f"{label} cannot be negative"
    if kind in {"float_parsing", "float_type", "int_parsing", "int_type", "int_from_float"}:
        return f"{label} must be a valid number"
    if kind.startswith("date"):
        return f"{label} must be a valid date"
    if kind == "value_error" and "error" in ctx:
        return str(ctx["error"])
    return f"{label}: {error['msg']}"


def collect_violations(
    model: Type[InputT], data: Mapping[str, Any]
) -> tuple[Optional[InputT], list[FieldViolation]]:
    """Validate `data` against `model`; return the parsed value and all violations."""

    try:
        return model.model_validate(dict(data)), []
    except pydantic.ValidationError as exc:
        violations = []
        for error in exc.errors():
            field = _field_name(model, error["loc"])
            violations.append(FieldViolation(field, _message(field, error)))
        return None, violations


def _raw_reference(data: Mapping[str, Any], *keys: str) -> Optional[int]:
    for key in keys:
        value = data.get(key)
        if value in (None, ""):
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
    return None


def validate_employee(
    data: Mapping[str, Any], *, employee_id: Optional[int] = None
) -> EmployeeInput:
    """Validate an employee payload; raise ValidationError listing every violation."""

    parsed, violations = collect_violations(EmployeeInput, data)
    supervisor = _raw_reference(data, "supervisor")
    if is_self_reference(employee_id, supervisor):
        violations.append(
            FieldViolation("supervisor", "Employee cannot be their own supervisor")
        )
    if violations or parsed is None:
        raise ValidationError(violations)
    return parsed


def validate_department(data: Mapping[str, Any]) -> DepartmentInput:
    """Validate a department payload; raise ValidationError listing every violation."""

    parsed, violations = collect_violations(DepartmentInput, data)
    if violations or parsed is None:
        raise ValidationError(violations)
    return parsed
