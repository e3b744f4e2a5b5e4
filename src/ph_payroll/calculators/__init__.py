"""Payroll calculation pipeline."""

from ph_payroll.calculators.attendance import (
    attendance_hours,
    attendance_lines,
    leave_lines,
    leave_overlap_days,
)
from ph_payroll.calculators.benefit_resolver import itemize_benefits, resolve_benefits
from ph_payroll.calculators.deduction_resolver import DeductionResolver
from ph_payroll.calculators.engine import PayrollCalculator, PayrollInputs
from ph_payroll.calculators.overtime_calculator import compute_overtime_pay
from ph_payroll.calculators.types import (
    AttendanceLine,
    BenefitBreakdown,
    BenefitItem,
    DeductionBreakdown,
    LeaveLine,
    OvertimeAllocation,
    OvertimeComputation,
    PayrollComputation,
    round_money,
)

__all__ = [
    "AttendanceLine",
    "BenefitBreakdown",
    "BenefitItem",
    "DeductionBreakdown",
    "DeductionResolver",
    "LeaveLine",
    "OvertimeAllocation",
    "OvertimeComputation",
    "PayrollCalculator",
    "PayrollComputation",
    "PayrollInputs",
    "attendance_hours",
    "attendance_lines",
    "compute_overtime_pay",
    "itemize_benefits",
    "leave_lines",
    "leave_overlap_days",
    "resolve_benefits",
    "round_money",
]
