"""Department model."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from .employee import Employee


class Department(TimestampMixin, SoftDeleteMixin, Base):
    """Organisational unit that employees belong to."""

    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    budget: Mapped[float] = mapped_column(Float, default=0.0)
    # departments and employees reference each other, so this FK is added after both tables
    head_of_department_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("employees.id", use_alter=True), nullable=True
    )

    head_of_department: Mapped[Optional["Employee"]] = relationship(
        foreign_keys=[head_of_department_id], post_update=True
    )
    employees: Mapped[list["Employee"]] = relationship(
        back_populates="department", foreign_keys="Employee.department_id"
    )

    def __repr__(self) -> str:
        return f"<Department id={self.id} name={self.name!r}>"
