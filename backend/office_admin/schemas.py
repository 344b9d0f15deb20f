"""Pydantic schemas used across the backend.

Input models declare the field rules for forms and JSON bodies; they are
run through :mod:`office_admin.validation` rather than used directly by routes.
Read models shape ORM rows into the camelCase JSON the API returns.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$"
PHONE_PATTERN = r"^\+?[\d\s\-()]+$"

# largest value a SQLite INTEGER column holds
MAX_ID = 2**63 - 1


class _InputModel(BaseModel):
    """Common behaviour for form / JSON payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, data: Any) -> Any:
        # HTML forms submit "" for untouched inputs; treat those as absent.
        if isinstance(data, dict):
            return {
                key: value
                for key, value in data.items()
                if not (value is None or (isinstance(value, str) and not value.strip()))
            }
        return data


class EmployeeInput(_InputModel):
    """Mutable employee fields (create and full-replace update)."""

    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    email: str = Field(pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    job_title: str = Field(max_length=100)
    department: int = Field(gt=0, le=MAX_ID)
    supervisor: Optional[int] = Field(default=None, gt=0, le=MAX_ID)
    salary: float = Field(ge=0)
    hire_date: date
    country: str
    state: str
    city: str
    address: Optional[str] = Field(default=None, max_length=200)

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("hire_date")
    @classmethod
    def _not_in_future(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("Hire date cannot be in the future")
        return value


class DepartmentInput(_InputModel):
    """Mutable department fields (create and full-replace update)."""

    name: str = Field(min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    budget: float = Field(default=0.0, ge=0)
    head_of_department: Optional[int] = Field(default=None, gt=0, le=MAX_ID)


class LoginInput(BaseModel):
    """Credentials supplied during login."""

    email: str = ""
    password: str = ""

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, value: str) -> str:
        return value.strip().lower()


class _ReadModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Token(_ReadModel):
    """JWT response payload."""

    token: str
    token_type: str = "bearer"
    expires_at: datetime


class TokenData(BaseModel):
    """Information encoded into JWTs."""

    id: int = Field(gt=0, le=MAX_ID)


class AdminRead(_ReadModel):
    """Public representation of an administrator (no password hash)."""

    id: int
    email: EmailStr
    created_at: Optional[datetime] = None


class DepartmentSummary(_ReadModel):
    id: int
    name: str
    description: Optional[str] = None


class EmployeeSummary(_ReadModel):
    id: int
    first_name: str
    last_name: str
    full_name: str
    email: str
    job_title: str


class EmployeeRead(_ReadModel):
    """Employee representation returned by the API."""

    id: int
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: Optional[str] = None
    job_title: str
    department_id: int
    department: Optional[DepartmentSummary] = None
    supervisor_id: Optional[int] = None
    supervisor: Optional[EmployeeSummary] = None
    salary: float
    hire_date: date
    country: str
    state: str
    city: str
    address: Optional[str] = None
    profile_image: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class EmployeeDetail(EmployeeRead):
    """Single-employee view, with the people they supervise."""

    subordinates: list[EmployeeSummary] = Field(default_factory=list)


class DepartmentRead(_ReadModel):
    """Department representation returned by the API."""

    id: int
    name: str
    description: Optional[str] = None
    budget: float
    head_of_department_id: Optional[int] = None
    head_of_department: Optional[EmployeeSummary] = None
    is_active: bool
    employee_count: int = 0
    created_at: datetime
    updated_at: datetime


def dump(model: BaseModel) -> dict[str, Any]:
    """Serialise a read model the way the JSON API exposes it."""

    return model.model_dump(by_alias=True, mode="json")


def compute_expiry(minutes: int) -> datetime:
    """Return an absolute expiration timestamp for tokens."""

    return datetime.now(timezone.utc) + timedelta(minutes=minutes)
