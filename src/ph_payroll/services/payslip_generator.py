"""Payslip snapshots built from generated payroll."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ph_payroll.calculators import (
    BenefitItem,
    DeductionResolver,
    PayrollCalculator,
    itemize_benefits,
    resolve_benefits,
    round_money,
)
from ph_payroll.config import PayslipSource
from ph_payroll.models import Employee, PayPeriod, Payroll, Payslip
from ph_payroll.repositories import (
    AttendanceRepository,
    DeductionRuleRepository,
    EmployeeRepository,
    PayPeriodRepository,
    PayrollRepository,
    PayslipRepository,
    PayslipSummary,
)
from ph_payroll.services.payroll_generator import load_payroll_inputs
from ph_payroll.services.payslip_formatter import format_payslip

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from ph_payroll.calculators import BenefitBreakdown
    from ph_payroll.config import Settings

logger = logging.getLogger(__name__)


class PayslipGenerator:
    """Creates one immutable payslip per (employee, pay period).

    A payslip copies gross income and take-home pay from its Payroll row and
    itemizes overtime, allowances and deductions. The Payroll row is never
    modified.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], settings: Settings):
        self.session_factory = session_factory
        self.settings = settings

    async def generate_payslip(self, employee_id: int, pay_period_id: int) -> Payslip | None:
        """Return the payslip for the pair, creating it from payroll if needed.

        Returns None when no payroll exists for the pair.
        """
        payslip, _ = await self._generate(employee_id, pay_period_id)
        return payslip

    async def generate_all_payslips(self, pay_period_id: int) -> int:
        """Create payslips for every payroll in the period. Returns payslips created."""
        async with self.session_factory() as session:
            payrolls = await PayrollRepository(session).find_by_pay_period(pay_period_id)

        created = 0
        for payroll in payrolls:
            _, was_created = await self._generate(payroll.employee_id, pay_period_id)
            if was_created:
                created += 1

        logger.info(
            "Generated %d payslips for pay period %s (%d payrolls)",
            created,
            pay_period_id,
            len(payrolls),
        )
        return created

    async def _generate(
        self, employee_id: int, pay_period_id: int
    ) -> tuple[Payslip | None, bool]:
        try:
            async with self.session_factory() as session, session.begin():
                existing = await PayslipRepository(session).find(employee_id, pay_period_id)
                if existing is not None:
                    return existing, False

                payroll = await PayrollRepository(session).find(employee_id, pay_period_id)
                employee = await EmployeeRepository(session).get(employee_id)
                period = await PayPeriodRepository(session).get(pay_period_id)
                if payroll is None or employee is None or period is None:
                    logger.info(
                        "No payroll for employee %s in pay period %s; no payslip created",
                        employee_id,
                        pay_period_id,
                    )
                    return None, False

                payslip = await self._build_payslip(session, employee, period, payroll)
                await PayslipRepository(session).add(payslip)
        except IntegrityError:
            logger.info(
                "Payslip for employee %s in pay period %s was created concurrently",
                employee_id,
                pay_period_id,
            )
            async with self.session_factory() as session:
                return await PayslipRepository(session).find(employee_id, pay_period_id), False

        logger.info(
            "Created payslip %s for employee %s in pay period %s",
            payslip.payslip_id,
            employee_id,
            pay_period_id,
        )
        return payslip, True

    async def _build_payslip(
        self,
        session: AsyncSession,
        employee: Employee,
        period: PayPeriod,
        payroll: Payroll,
    ) -> Payslip:
        rules = await DeductionRuleRepository(session).global_rules()
        resolver = DeductionResolver(rules, self.settings)
        calculator = PayrollCalculator(resolver, self.settings)

        monthly_rate = payroll.basic_salary
        daily_rate = round_money(monthly_rate / Decimal(self.settings.standard_work_days))
        days_worked = await self._days_worked(employee.employee_id, period)

        inputs = await load_payroll_inputs(session, employee, period, with_details=False)
        if self.settings.payslip_source is PayslipSource.PAYROLL:
            overtime = payroll.overtime_pay
            benefits = await self._persisted_benefits(session, payroll)
            if benefits is None:
                benefits = resolve_benefits(inputs.position_benefits)
        else:
            hourly_rate = employee.hourly_rate or Decimal("0")
            overtime = calculator.compute_overtime(
                inputs.position, inputs.overtime_requests, period, hourly_rate
            ).pay
            benefits = resolve_benefits(inputs.position_benefits)

        deductions = resolver.compute_statutory(monthly_rate, payroll.gross_income)
        if deductions.total != payroll.total_deduction:
            logger.warning(
                "Payslip deductions for employee %s in pay period %s (%s) differ "
                "from payroll total deduction (%s)",
                employee.employee_id,
                period.pay_period_id,
                deductions.total,
                payroll.total_deduction,
            )

        return Payslip(
            employee_id=employee.employee_id,
            pay_period_id=period.pay_period_id,
            payroll_id=payroll.payroll_id,
            employee_name=employee.full_name,
            position_id=employee.position_id,
            period_start=period.start_date,
            period_end=period.end_date,
            monthly_rate=monthly_rate,
            daily_rate=daily_rate,
            days_worked=days_worked,
            overtime=overtime,
            rice_subsidy=benefits.rice_subsidy,
            phone_allowance=benefits.phone_allowance,
            clothing_allowance=benefits.clothing_allowance,
            sss=deductions.sss,
            philhealth=deductions.philhealth,
            pagibig=deductions.pagibig,
            withholding_tax=deductions.withholding_tax,
            gross_income=payroll.gross_income,
            take_home_pay=payroll.net_salary,
        )

    async def _days_worked(self, employee_id: int, period: PayPeriod) -> int:
        """Complete attendance rows in the period, or the standard month on query failure.

        Runs in its own session so a failed count cannot poison the payslip
        transaction.
        """
        try:
            async with self.session_factory() as session:
                return await AttendanceRepository(session).count_days_worked(
                    employee_id, period.start_date, period.end_date
                )
        except SQLAlchemyError:
            logger.warning(
                "Could not count attendance for employee %s; using %d days",
                employee_id,
                self.settings.standard_work_days,
                exc_info=True,
            )
            return self.settings.standard_work_days

    async def _persisted_benefits(
        self, session: AsyncSession, payroll: Payroll
    ) -> BenefitBreakdown | None:
        """Benefits from the payroll's detail rows, or None if none were written."""
        details = await PayrollRepository(session).benefit_details(payroll.payroll_id)
        if not details and payroll.total_benefit > 0:
            logger.debug(
                "Payroll %s has no benefit details; itemizing from the position",
                payroll.payroll_id,
            )
            return None
        return itemize_benefits(
            BenefitItem(
                benefit_type_id=d.benefit_type_id,
                name=d.benefit_type.name if d.benefit_type is not None else "",
                amount=d.benefit_amount,
            )
            for d in details
        )

    # ===== Queries and maintenance =====

    async def find_by_employee(self, employee_id: int) -> Sequence[Payslip]:
        async with self.session_factory() as session:
            return await PayslipRepository(session).find_by_employee(employee_id)

    async def find_by_pay_period(self, pay_period_id: int) -> Sequence[Payslip]:
        async with self.session_factory() as session:
            return await PayslipRepository(session).find_by_pay_period(pay_period_id)

    async def get_payslip_summary(self, pay_period_id: int) -> PayslipSummary:
        async with self.session_factory() as session:
            return await PayslipRepository(session).summary(pay_period_id)

    async def delete_payslips_by_period(self, pay_period_id: int) -> int:
        async with self.session_factory() as session, session.begin():
            deleted = await PayslipRepository(session).delete_by_period(pay_period_id)
        logger.info("Deleted %d payslips in pay period %s", deleted, pay_period_id)
        return deleted

    async def print_payslip(self, payslip_id: int) -> str:
        """Render a stored payslip as text."""
        async with self.session_factory() as session:
            payslip = await PayslipRepository(session).get(payslip_id)
        if payslip is None:
            return f"Payslip {payslip_id} not found.\n"
        return format_payslip(payslip, self.settings)
