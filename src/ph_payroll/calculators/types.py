"""Type definitions for the calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
CENT = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    """Round to centavos, half-up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class BenefitItem:
    """One position benefit paid in a period."""

    benefit_type_id: int
    name: str
    amount: Decimal


@dataclass
class BenefitBreakdown:
    """Benefits for a position, itemized by the three known allowance types."""

    rice_subsidy: Decimal = ZERO
    phone_allowance: Decimal = ZERO
    clothing_allowance: Decimal = ZERO
    total_benefit: Decimal = ZERO
    items: list[BenefitItem] = field(default_factory=list)


@dataclass
class DeductionBreakdown:
    """Statutory deductions for one employee-period."""

    sss: Decimal = ZERO
    philhealth: Decimal = ZERO
    pagibig: Decimal = ZERO
    withholding_tax: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.sss + self.philhealth + self.pagibig + self.withholding_tax


@dataclass
class OvertimeAllocation:
    """Share of the period's overtime attributed to a single request."""

    overtime_request_id: int
    minutes: int
    hours: Decimal
    pay: Decimal


@dataclass
class OvertimeComputation:
    """Approved overtime for one employee-period."""

    total_minutes: int = 0
    hours: Decimal = ZERO
    pay: Decimal = ZERO
    allocations: list[OvertimeAllocation] = field(default_factory=list)


@dataclass
class AttendanceLine:
    attendance_id: int
    hours: Decimal
    amount: Decimal


@dataclass
class LeaveLine:
    leave_request_id: int
    hours: Decimal


@dataclass
class PayrollComputation:
    """Everything needed to persist one Payroll row and its details."""

    employee_id: int
    pay_period_id: int
    basic_salary: Decimal
    overtime: OvertimeComputation
    benefits: BenefitBreakdown
    deductions: DeductionBreakdown
    gross_income: Decimal
    net_salary: Decimal
    attendance_lines: list[AttendanceLine] = field(default_factory=list)
    leave_lines: list[LeaveLine] = field(default_factory=list)

    @property
    def overtime_pay(self) -> Decimal:
        return self.overtime.pay

    @property
    def total_benefit(self) -> Decimal:
        return self.benefits.total_benefit

    @property
    def total_deduction(self) -> Decimal:
        return self.deductions.total
