"""Employee model."""
from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from .department import Department


class Employee(TimestampMixin, SoftDeleteMixin, Base):
    """A member of staff, attached to one department and optionally a supervisor."""

    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(50))
    last_name: Mapped[str] = mapped_column(String(50))
    email: Mapped[str] = mapped_column(String(255), unique=True)
    phone: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    job_title: Mapped[str] = mapped_column(String(100), index=True)
    department_id: Mapped[int] = mapped_column(ForeignKey("departments.id"), index=True)
    supervisor_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("employees.id"), nullable=True, index=True
    )
    salary: Mapped[float] = mapped_column(Float)
    hire_date: Mapped[date] = mapped_column(Date)
    country: Mapped[str] = mapped_column(String(100))
    state: Mapped[str] = mapped_column(String(100))
    city: Mapped[str] = mapped_column(String(100))
    address: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    profile_image: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    department: Mapped["Department"] = relationship(
        back_populates="employees", foreign_keys=[department_id]
    )
    supervisor: Mapped[Optional["Employee"]] = relationship(
        remote_side=[id], back_populates="subordinates"
    )
    subordinates: Mapped[list["Employee"]] = relationship(back_populates="supervisor")

    __table_args__ = (Index("ix_employees_name", "first_name", "last_name"),)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Employee id={self.id} email={self.email!r}>"
