"""Pay period, deduction rule, payroll and payslip repositories."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Sequence

from sqlalchemy import delete, func, select, update

from ph_payroll.calculators.types import ZERO, round_money
from ph_payroll.models import (
    BenefitType,
    DeductionRule,
    LeaveRequest,
    LeaveType,
    PayPeriod,
    Payroll,
    PayrollAttendance,
    PayrollBenefit,
    PayrollLeave,
    PayrollOvertime,
    Payslip,
)
from ph_payroll.repositories.base import Repository

# Detail tables in deletion order, keyed by the name reported to callers.
DETAIL_TABLES: dict[str, Any] = {
    "payroll_attendance": PayrollAttendance,
    "payroll_benefit": PayrollBenefit,
    "payroll_leave": PayrollLeave,
    "payroll_overtime": PayrollOvertime,
}


def _money(value: Any) -> Decimal:
    if value is None:
        return ZERO
    return round_money(Decimal(str(value)))


@dataclass(frozen=True)
class PayrollSummary:
    """Aggregate totals over one pay period's payroll rows."""

    pay_period_id: int
    employee_count: int = 0
    total_gross_income: Decimal = ZERO
    total_net_salary: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_benefits: Decimal = ZERO


@dataclass(frozen=True)
class PayslipSummary:
    """Aggregate totals over one pay period's payslips."""

    pay_period_id: int
    payslip_count: int = 0
    total_gross_income: Decimal = ZERO
    total_take_home_pay: Decimal = ZERO
    total_deductions: Decimal = ZERO


@dataclass(frozen=True)
class PayrollDetails:
    """Detail rows of one payroll, aggregated for display.

    benefits maps benefit name to amount and leave_hours maps leave type
    name to hours. Leave without a type counts toward total_leave_hours only.
    """

    payroll_id: int
    benefits: dict[str, Decimal] = field(default_factory=dict)
    leave_hours: dict[str, Decimal] = field(default_factory=dict)
    total_leave_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    overtime_pay: Decimal = ZERO
    attendance_hours: Decimal = ZERO
    attendance_amount: Decimal = ZERO


def _sum_for_payroll(column: Any, payroll_id: int) -> Any:
    return (
        select(func.coalesce(func.sum(column), 0))
        .where(column.class_.payroll_id == payroll_id)
        .scalar_subquery()
    )


class PayPeriodRepository(Repository[PayPeriod]):
    model = PayPeriod


class DeductionRuleRepository(Repository[DeductionRule]):
    model = DeductionRule

    async def global_rules(self) -> Sequence[DeductionRule]:
        """Rules not bound to a specific payroll, in bracket order."""
        result = await self.session.execute(
            select(DeductionRule)
            .where(DeductionRule.payroll_id.is_(None))
            .order_by(
                DeductionRule.type_name,
                DeductionRule.lower_limit,
                DeductionRule.deduction_rule_id,
            )
        )
        return result.scalars().all()


class PayrollRepository(Repository[Payroll]):
    model = Payroll

    async def find(self, employee_id: int, pay_period_id: int) -> Payroll | None:
        result = await self.session.execute(
            select(Payroll).where(
                Payroll.employee_id == employee_id,
                Payroll.pay_period_id == pay_period_id,
            )
        )
        return result.scalar_one_or_none()

    async def exists(self, employee_id: int, pay_period_id: int) -> bool:
        result = await self.session.execute(
            select(Payroll.payroll_id).where(
                Payroll.employee_id == employee_id,
                Payroll.pay_period_id == pay_period_id,
            )
        )
        return result.first() is not None

    async def find_by_pay_period(self, pay_period_id: int) -> Sequence[Payroll]:
        result = await self.session.execute(
            select(Payroll)
            .where(Payroll.pay_period_id == pay_period_id)
            .order_by(Payroll.employee_id)
        )
        return result.scalars().all()

    async def count_by_pay_period(self, pay_period_id: int) -> int:
        result = await self.session.execute(
            select(func.count(Payroll.payroll_id)).where(Payroll.pay_period_id == pay_period_id)
        )
        return int(result.scalar_one())

    async def history(self, employee_id: int, limit: int) -> Sequence[Payroll]:
        """Most recent payrolls first, by pay period start date."""
        result = await self.session.execute(
            select(Payroll)
            .join(PayPeriod, PayPeriod.pay_period_id == Payroll.pay_period_id)
            .where(Payroll.employee_id == employee_id)
            .order_by(PayPeriod.start_date.desc(), Payroll.payroll_id.desc())
            .limit(limit)
        )
        return result.scalars().all()

    async def benefit_details(self, payroll_id: int) -> Sequence[PayrollBenefit]:
        result = await self.session.execute(
            select(PayrollBenefit)
            .where(PayrollBenefit.payroll_id == payroll_id)
            .order_by(PayrollBenefit.benefit_type_id)
        )
        return result.scalars().all()

    async def details(self, payroll_id: int) -> PayrollDetails:
        """Benefit and leave breakdowns plus overtime and attendance totals."""
        benefits = await self.session.execute(
            select(BenefitType.name, PayrollBenefit.benefit_amount)
            .join(BenefitType, BenefitType.benefit_type_id == PayrollBenefit.benefit_type_id)
            .where(PayrollBenefit.payroll_id == payroll_id)
            .order_by(BenefitType.name)
        )
        leave = await self.session.execute(
            select(LeaveType.name, func.sum(PayrollLeave.leave_hours))
            .join(LeaveRequest, LeaveRequest.leave_request_id == PayrollLeave.leave_request_id)
            .join(LeaveType, LeaveType.leave_type_id == LeaveRequest.leave_type_id)
            .where(PayrollLeave.payroll_id == payroll_id)
            .group_by(LeaveType.leave_type_id, LeaveType.name)
            .order_by(LeaveType.name)
        )
        totals = await self.session.execute(
            select(
                _sum_for_payroll(PayrollLeave.leave_hours, payroll_id),
                _sum_for_payroll(PayrollOvertime.overtime_hours, payroll_id),
                _sum_for_payroll(PayrollOvertime.overtime_pay, payroll_id),
                _sum_for_payroll(PayrollAttendance.computed_hours, payroll_id),
                _sum_for_payroll(PayrollAttendance.computed_amount, payroll_id),
            )
        )
        leave_total, ot_hours, ot_pay, att_hours, att_amount = totals.one()
        return PayrollDetails(
            payroll_id=payroll_id,
            benefits={name: _money(amount) for name, amount in benefits.all()},
            leave_hours={name: _money(hours) for name, hours in leave.all()},
            total_leave_hours=_money(leave_total),
            overtime_hours=_money(ot_hours),
            overtime_pay=_money(ot_pay),
            attendance_hours=_money(att_hours),
            attendance_amount=_money(att_amount),
        )

    async def summary(self, pay_period_id: int) -> PayrollSummary:
        result = await self.session.execute(
            select(
                func.count(Payroll.payroll_id),
                func.sum(Payroll.gross_income),
                func.sum(Payroll.net_salary),
                func.sum(Payroll.total_deduction),
                func.sum(Payroll.total_benefit),
            ).where(Payroll.pay_period_id == pay_period_id)
        )
        count, gross, net, deductions, benefits = result.one()
        return PayrollSummary(
            pay_period_id=pay_period_id,
            employee_count=int(count or 0),
            total_gross_income=_money(gross),
            total_net_salary=_money(net),
            total_deductions=_money(deductions),
            total_benefits=_money(benefits),
        )

    async def touch(self, pay_period_id: int) -> int:
        """Bump updated_at on every payroll row of the period."""
        result = await self.session.execute(
            update(Payroll)
            .where(Payroll.pay_period_id == pay_period_id)
            .values(updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_details(self, pay_period_id: int) -> dict[str, int]:
        """Delete the four detail row sets for a period. Returns rows per table."""
        payroll_ids = select(Payroll.payroll_id).where(Payroll.pay_period_id == pay_period_id)
        deleted: dict[str, int] = {}
        for name, detail in DETAIL_TABLES.items():
            result = await self.session.execute(
                delete(detail)
                .where(detail.payroll_id.in_(payroll_ids))
                .execution_options(synchronize_session=False)
            )
            deleted[name] = result.rowcount
        return deleted

    async def delete_by_period(self, pay_period_id: int) -> int:
        result = await self.session.execute(
            delete(Payroll)
            .where(Payroll.pay_period_id == pay_period_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount


class PayslipRepository(Repository[Payslip]):
    model = Payslip

    async def find(self, employee_id: int, pay_period_id: int) -> Payslip | None:
        result = await self.session.execute(
            select(Payslip).where(
                Payslip.employee_id == employee_id,
                Payslip.pay_period_id == pay_period_id,
            )
        )
        return result.scalar_one_or_none()

    async def find_by_employee(self, employee_id: int) -> Sequence[Payslip]:
        result = await self.session.execute(
            select(Payslip)
            .where(Payslip.employee_id == employee_id)
            .order_by(Payslip.period_start.desc(), Payslip.payslip_id.desc())
        )
        return result.scalars().all()

    async def find_by_pay_period(self, pay_period_id: int) -> Sequence[Payslip]:
        result = await self.session.execute(
            select(Payslip)
            .where(Payslip.pay_period_id == pay_period_id)
            .order_by(Payslip.employee_id)
        )
        return result.scalars().all()

    async def summary(self, pay_period_id: int) -> PayslipSummary:
        result = await self.session.execute(
            select(
                func.count(Payslip.payslip_id),
                func.sum(Payslip.gross_income),
                func.sum(Payslip.take_home_pay),
                func.sum(Payslip.sss + Payslip.philhealth + Payslip.pagibig + Payslip.withholding_tax),
            ).where(Payslip.pay_period_id == pay_period_id)
        )
        count, gross, take_home, deductions = result.one()
        return PayslipSummary(
            pay_period_id=pay_period_id,
            payslip_count=int(count or 0),
            total_gross_income=_money(gross),
            total_take_home_pay=_money(take_home),
            total_deductions=_money(deductions),
        )

    async def delete_by_period(self, pay_period_id: int) -> int:
        result = await self.session.execute(
            delete(Payslip)
            .where(Payslip.pay_period_id == pay_period_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
