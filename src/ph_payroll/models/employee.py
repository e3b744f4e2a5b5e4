"""Employee, position and benefit reference models."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ph_payroll.models.base import MONEY, Base, TimestampMixin

if TYPE_CHECKING:
    from ph_payroll.models.timekeeping import (
        AttendanceRecord,
        LeaveRequest,
        OvertimeRequest,
    )


class EmployeeStatus(str, Enum):
    """Employment status values."""

    PROBATIONARY = "Probationary"
    REGULAR = "Regular"
    TERMINATED = "Terminated"


class Position(Base):
    """Job position with its department."""

    __tablename__ = "position"

    position_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    department: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)

    # Relationships
    benefits: Mapped[list[PositionBenefit]] = relationship(back_populates="position")

    @property
    def is_rank_and_file(self) -> bool:
        """Rank-and-file classification by department/title name matching."""
        department = (self.department or "").lower()
        if department == "rank-and-file":
            return True
        for name in (department, (self.title or "").lower()):
            if "rank" in name and "file" in name:
                return True
        return False


class BenefitType(Base):
    """Benefit type (Rice Subsidy, Phone Allowance, ...)."""

    __tablename__ = "benefit_type"

    benefit_type_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)


class PositionBenefit(Base):
    """Benefit amount granted to every holder of a position."""

    __tablename__ = "position_benefit"

    position_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("position.position_id", ondelete="CASCADE"),
        primary_key=True,
    )
    benefit_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("benefit_type.benefit_type_id", ondelete="CASCADE"),
        primary_key=True,
    )
    value: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))

    __table_args__ = (
        CheckConstraint("value >= 0", name="position_benefit_value_check"),
    )

    # Relationships
    position: Mapped[Position] = relationship(back_populates="benefits")
    benefit_type: Mapped[BenefitType] = relationship(lazy="joined")


class Employee(Base, TimestampMixin):
    """Employee record. Read-only to the payroll engine."""

    __tablename__ = "employee"

    employee_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    basic_salary: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    hourly_rate: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    position_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("position.position_id"),
        nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=EmployeeStatus.PROBATIONARY.value
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('Probationary', 'Regular', 'Terminated')",
            name="employee_status_check",
        ),
    )

    # Relationships
    position: Mapped[Position | None] = relationship()
    attendance: Mapped[list[AttendanceRecord]] = relationship(back_populates="employee")
    overtime_requests: Mapped[list[OvertimeRequest]] = relationship(back_populates="employee")
    leave_requests: Mapped[list[LeaveRequest]] = relationship(back_populates="employee")

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"

    @property
    def is_active(self) -> bool:
        return self.status != EmployeeStatus.TERMINATED.value
