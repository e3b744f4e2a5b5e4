"""Repositories: persistence only, no business rules."""

from ph_payroll.repositories.base import Repository
from ph_payroll.repositories.employee import EmployeeRepository, PositionRepository
from ph_payroll.repositories.payroll import (
    DETAIL_TABLES,
    DeductionRuleRepository,
    PayPeriodRepository,
    PayrollDetails,
    PayrollRepository,
    PayrollSummary,
    PayslipRepository,
    PayslipSummary,
)
from ph_payroll.repositories.timekeeping import (
    AttendanceRepository,
    LeaveRequestRepository,
    OvertimeRequestRepository,
)

__all__ = [
    "DETAIL_TABLES",
    "AttendanceRepository",
    "DeductionRuleRepository",
    "EmployeeRepository",
    "LeaveRequestRepository",
    "OvertimeRequestRepository",
    "PayPeriodRepository",
    "PayrollDetails",
    "PayrollRepository",
    "PayrollSummary",
    "PayslipRepository",
    "PayslipSummary",
    "PositionRepository",
    "Repository",
]
