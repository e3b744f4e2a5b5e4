"""ORM models for the payroll engine."""

from ph_payroll.models.base import MONEY, RATE, Base, TimestampMixin
from ph_payroll.models.employee import (
    BenefitType,
    Employee,
    EmployeeStatus,
    Position,
    PositionBenefit,
)
from ph_payroll.models.payroll import (
    DeductionRule,
    DeductionType,
    PayPeriod,
    Payroll,
    PayrollAttendance,
    PayrollBenefit,
    PayrollLeave,
    PayrollOvertime,
    Payslip,
)
from ph_payroll.models.timekeeping import (
    ApprovalStatus,
    AttendanceRecord,
    LeaveRequest,
    LeaveType,
    OvertimeRequest,
)

__all__ = [
    "MONEY",
    "RATE",
    "ApprovalStatus",
    "AttendanceRecord",
    "Base",
    "BenefitType",
    "DeductionRule",
    "DeductionType",
    "Employee",
    "EmployeeStatus",
    "LeaveRequest",
    "LeaveType",
    "OvertimeRequest",
    "PayPeriod",
    "Payroll",
    "PayrollAttendance",
    "PayrollBenefit",
    "PayrollLeave",
    "PayrollOvertime",
    "Payslip",
    "Position",
    "PositionBenefit",
    "TimestampMixin",
]
