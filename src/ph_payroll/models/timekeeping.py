"""Attendance, overtime and leave request models.

These tables are written by the timekeeping side of the system; the payroll
engine only reads them.
"""

from __future__ import annotations

from datetime import date, datetime, time
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ph_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from ph_payroll.models.employee import Employee


class ApprovalStatus(str, Enum):
    """Approval workflow status shared by overtime and leave requests."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


_APPROVAL_CHECK = "approval_status IN ('Pending', 'Approved', 'Rejected')"


class AttendanceRecord(Base):
    """One day of clock-in/clock-out for an employee."""

    __tablename__ = "attendance"

    attendance_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    work_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    time_in: Mapped[time | None] = mapped_column(Time, nullable=True)
    time_out: Mapped[time | None] = mapped_column(Time, nullable=True)

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="attendance")


class OvertimeRequest(Base, TimestampMixin):
    """Overtime request spanning a start and end timestamp."""

    __tablename__ = "overtime_request"

    overtime_request_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    overtime_start: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    overtime_end: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    approval_status: Mapped[str] = mapped_column(
        String, nullable=False, default=ApprovalStatus.PENDING.value
    )
    reason: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint(_APPROVAL_CHECK, name="overtime_request_status_check"),
        CheckConstraint(
            "overtime_end >= overtime_start", name="overtime_request_dates_check"
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="overtime_requests")

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED.value


class LeaveType(Base):
    """Leave type reference (Sick, Vacation, ...)."""

    __tablename__ = "leave_type"

    leave_type_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)


class LeaveRequest(Base, TimestampMixin):
    """Leave request over an inclusive date range."""

    __tablename__ = "leave_request"

    leave_request_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    leave_type_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("leave_type.leave_type_id"),
        nullable=True,
    )
    leave_start: Mapped[date] = mapped_column(Date, nullable=False)
    leave_end: Mapped[date] = mapped_column(Date, nullable=False)
    approval_status: Mapped[str] = mapped_column(
        String, nullable=False, default=ApprovalStatus.PENDING.value
    )

    __table_args__ = (
        CheckConstraint(_APPROVAL_CHECK, name="leave_request_status_check"),
        CheckConstraint("leave_end >= leave_start", name="leave_request_dates_check"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="leave_requests")
    leave_type: Mapped[LeaveType | None] = relationship()

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED.value
