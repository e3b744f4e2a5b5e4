"""Pure payroll computation for one employee in one pay period."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Sequence

from ph_payroll.calculators.attendance import attendance_lines, leave_lines
from ph_payroll.calculators.benefit_resolver import resolve_benefits
from ph_payroll.calculators.overtime_calculator import compute_overtime_pay
from ph_payroll.calculators.types import OvertimeComputation, PayrollComputation, round_money
from ph_payroll.exceptions import IneligibleEmployeeError, PositionNotFoundError
from ph_payroll.models import (
    AttendanceRecord,
    Employee,
    LeaveRequest,
    OvertimeRequest,
    PayPeriod,
    Position,
    PositionBenefit,
)

if TYPE_CHECKING:
    from ph_payroll.calculators.deduction_resolver import DeductionResolver
    from ph_payroll.config import Settings


@dataclass
class PayrollInputs:
    """Everything loaded from storage for one employee-period."""

    employee: Employee
    pay_period: PayPeriod
    position: Position | None = None
    position_benefits: Sequence[PositionBenefit] = field(default_factory=list)
    attendance: Sequence[AttendanceRecord] = field(default_factory=list)
    overtime_requests: Sequence[OvertimeRequest] = field(default_factory=list)
    leave_requests: Sequence[LeaveRequest] = field(default_factory=list)


class PayrollCalculator:
    """Turns loaded inputs into a PayrollComputation. Does no I/O.

    Pipeline (stable order):
    1) Eligibility: positive basic salary and hourly rate, known position
    2) Benefits from the position
    3) Overtime from approved requests starting in the period
    4) Gross = basic + overtime + benefits
    5) Statutory deductions (contributions on basic, tax on gross)
    6) Net = gross - deductions
    """

    def __init__(self, deductions: DeductionResolver, settings: Settings):
        self.deductions = deductions
        self.settings = settings

    def check_eligibility(self, employee: Employee) -> tuple[Decimal, Decimal]:
        """Return (basic_salary, hourly_rate) or raise IneligibleEmployeeError."""
        basic = employee.basic_salary
        rate = employee.hourly_rate
        if basic is None or basic <= 0:
            raise IneligibleEmployeeError(employee.employee_id, "basic salary must be positive")
        if rate is None or rate <= 0:
            raise IneligibleEmployeeError(employee.employee_id, "hourly rate must be positive")
        return round_money(Decimal(basic)), Decimal(rate)

    def calculate(self, inputs: PayrollInputs) -> PayrollComputation:
        employee = inputs.employee
        period = inputs.pay_period
        basic, hourly_rate = self.check_eligibility(employee)

        if employee.position_id is not None and inputs.position is None:
            raise PositionNotFoundError(employee.employee_id, employee.position_id)

        benefits = resolve_benefits(inputs.position_benefits if inputs.position else None)

        overtime = self.compute_overtime(
            inputs.position, inputs.overtime_requests, period, hourly_rate
        )

        gross = basic + overtime.pay + benefits.total_benefit
        deductions = self.deductions.compute_statutory(basic, gross)
        net = gross - deductions.total

        return PayrollComputation(
            employee_id=employee.employee_id,
            pay_period_id=period.pay_period_id,
            basic_salary=basic,
            overtime=overtime,
            benefits=benefits,
            deductions=deductions,
            gross_income=gross,
            net_salary=net,
            attendance_lines=attendance_lines(
                inputs.attendance, hourly_rate, self.settings.lunch_break_hours
            ),
            leave_lines=leave_lines(
                inputs.leave_requests,
                period.start_date,
                period.end_date,
                self.settings.leave_hours_per_day,
            ),
        )

    def compute_overtime(
        self,
        position: Position | None,
        requests: Sequence[OvertimeRequest],
        period: PayPeriod,
        hourly_rate: Decimal,
    ) -> OvertimeComputation:
        """Overtime for the period, subject to the rank-and-file setting."""
        if not self._overtime_allowed(position):
            return OvertimeComputation()
        return compute_overtime_pay(
            requests,
            period.start_date,
            period.end_date,
            hourly_rate,
            self.settings.overtime_multiplier,
        )

    def _overtime_allowed(self, position: Position | None) -> bool:
        if not self.settings.overtime_rank_and_file_only:
            return True
        return position is not None and position.is_rank_and_file
