"""Payroll generation for a pay period."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ph_payroll.calculators import DeductionResolver, PayrollCalculator, PayrollInputs
from ph_payroll.exceptions import (
    IneligibleEmployeeError,
    PayPeriodNotFoundError,
    PayrollNotFoundError,
    PayrollPersistenceError,
    PositionNotFoundError,
)
from ph_payroll.models import (
    Employee,
    PayPeriod,
    Payroll,
    PayrollAttendance,
    PayrollBenefit,
    PayrollLeave,
    PayrollOvertime,
)
from ph_payroll.repositories import (
    AttendanceRepository,
    DeductionRuleRepository,
    EmployeeRepository,
    LeaveRequestRepository,
    OvertimeRequestRepository,
    PayPeriodRepository,
    PayrollDetails,
    PayrollRepository,
    PayrollSummary,
    PositionRepository,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from ph_payroll.calculators import PayrollComputation
    from ph_payroll.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of one generation run over a pay period."""

    pay_period_id: int
    generated: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)

    @property
    def count(self) -> int:
        """Payroll rows created by this run."""
        return len(self.generated)


async def load_payroll_inputs(
    session: AsyncSession,
    employee: Employee,
    period: PayPeriod,
    with_details: bool,
) -> PayrollInputs:
    """Load everything the calculator needs for one employee-period.

    Attendance and leave are only loaded when detail rows will be written.
    """
    inputs = PayrollInputs(employee=employee, pay_period=period)

    if employee.position_id is not None:
        positions = PositionRepository(session)
        inputs.position = await positions.get(employee.position_id)
        if inputs.position is not None:
            inputs.position_benefits = await positions.get_benefits(employee.position_id)

    inputs.overtime_requests = await OvertimeRequestRepository(session).approved_in_period(
        employee.employee_id, period.start_date, period.end_date
    )

    if with_details:
        inputs.attendance = await AttendanceRepository(session).in_period(
            employee.employee_id, period.start_date, period.end_date
        )
        inputs.leave_requests = await LeaveRequestRepository(session).approved_overlapping(
            employee.employee_id, period.start_date, period.end_date
        )

    return inputs


class PayrollGenerator:
    """Generates and manages Payroll rows for pay periods.

    Key invariants:
    1. One Payroll per (employee, pay period), enforced by a unique constraint
    2. Each employee is written in its own transaction; the Payroll row and
       its detail rows commit or roll back together
    3. A unique-key collision means another run already wrote the row, so the
       employee is skipped rather than failed. Any other integrity error is a
       persistence failure
    4. A failure for one employee never stops the batch
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], settings: Settings):
        self.session_factory = session_factory
        self.settings = settings

    async def generate_payroll(self, pay_period_id: int) -> int:
        """Generate aggregate Payroll rows only. Returns rows created."""
        result = await self.run(pay_period_id, with_details=False)
        return result.count

    async def generate_payroll_with_details(self, pay_period_id: int) -> int:
        """Generate Payroll rows with attendance, benefit, leave and overtime details."""
        result = await self.run(pay_period_id, with_details=True)
        return result.count

    async def run(self, pay_period_id: int, with_details: bool = False) -> GenerationResult:
        """Generate payroll for every non-terminated employee in the period."""
        result = GenerationResult(pay_period_id=pay_period_id)

        try:
            period, calculator, employee_ids = await self._prepare(pay_period_id)
        except PayPeriodNotFoundError as exc:
            logger.warning("%s; nothing generated", exc)
            return result

        for employee_id in employee_ids:
            await self._generate_for_employee(
                employee_id, period, calculator, with_details, result
            )

        logger.info(
            "Payroll run for pay period %s: %d generated, %d skipped, %d failed",
            pay_period_id,
            len(result.generated),
            len(result.skipped),
            len(result.failed),
        )
        return result

    async def _prepare(
        self, pay_period_id: int
    ) -> tuple[PayPeriod, PayrollCalculator, list[int]]:
        """Load the period, the global deduction rules and the employees to pay."""
        async with self.session_factory() as session:
            period = await PayPeriodRepository(session).get(pay_period_id)
            if period is None:
                raise PayPeriodNotFoundError(pay_period_id)
            rules = await DeductionRuleRepository(session).global_rules()
            employees = await EmployeeRepository(session).list_payable()

        calculator = PayrollCalculator(DeductionResolver(rules, self.settings), self.settings)
        return period, calculator, [e.employee_id for e in employees]

    async def _generate_for_employee(
        self,
        employee_id: int,
        period: PayPeriod,
        calculator: PayrollCalculator,
        with_details: bool,
        result: GenerationResult,
    ) -> None:
        try:
            async with self.session_factory() as session, session.begin():
                payrolls = PayrollRepository(session)
                if await payrolls.exists(employee_id, period.pay_period_id):
                    logger.debug(
                        "Payroll already exists for employee %s in pay period %s",
                        employee_id,
                        period.pay_period_id,
                    )
                    result.skipped.append(employee_id)
                    return

                employee = await EmployeeRepository(session).get(employee_id)
                if employee is None or not employee.is_active:
                    result.skipped.append(employee_id)
                    return

                inputs = await load_payroll_inputs(session, employee, period, with_details)
                computation = calculator.calculate(inputs)
                payroll = await self._write_payroll(session, computation)
                if with_details:
                    await self._write_details(session, payroll, computation)

        except IntegrityError as exc:
            if await self._written_by_another_run(employee_id, period.pay_period_id):
                logger.info(
                    "Payroll for employee %s in pay period %s was written concurrently; skipping",
                    employee_id,
                    period.pay_period_id,
                )
                result.skipped.append(employee_id)
                return
            self._record_persistence_failure(employee_id, period.pay_period_id, exc, result)
            return
        except (PositionNotFoundError, IneligibleEmployeeError) as exc:
            logger.warning("Skipping employee %s: %s", employee_id, exc)
            result.failed[employee_id] = str(exc)
            return
        except SQLAlchemyError as exc:
            self._record_persistence_failure(employee_id, period.pay_period_id, exc, result)
            return
        except Exception as exc:
            logger.exception(
                "Unexpected error generating payroll for employee %s in pay period %s",
                employee_id,
                period.pay_period_id,
            )
            result.failed[employee_id] = f"{type(exc).__name__}: {exc}"
            return

        result.generated.append(employee_id)
        logger.info(
            "Generated payroll for employee %s in pay period %s: gross %s, net %s",
            employee_id,
            period.pay_period_id,
            computation.gross_income,
            computation.net_salary,
        )

    async def _written_by_another_run(self, employee_id: int, pay_period_id: int) -> bool:
        """Whether the (employee, pay period) row exists after a rolled-back write."""
        try:
            async with self.session_factory() as session:
                return await PayrollRepository(session).find(employee_id, pay_period_id) is not None
        except SQLAlchemyError:
            logger.warning(
                "Could not re-check payroll for employee %s in pay period %s",
                employee_id,
                pay_period_id,
                exc_info=True,
            )
            return False

    @staticmethod
    def _record_persistence_failure(
        employee_id: int, pay_period_id: int, exc: SQLAlchemyError, result: GenerationResult
    ) -> None:
        error = PayrollPersistenceError(employee_id, pay_period_id, exc)
        logger.error("%s", error, exc_info=exc)
        result.failed[employee_id] = str(error)

    async def _write_payroll(
        self, session: AsyncSession, computation: PayrollComputation
    ) -> Payroll:
        payroll = Payroll(
            employee_id=computation.employee_id,
            pay_period_id=computation.pay_period_id,
            basic_salary=computation.basic_salary,
            overtime_pay=computation.overtime_pay,
            gross_income=computation.gross_income,
            total_benefit=computation.total_benefit,
            total_deduction=computation.total_deduction,
            net_salary=computation.net_salary,
        )
        # Flush raises IntegrityError here if another run holds the unique key.
        return await PayrollRepository(session).add(payroll)

    async def _write_details(
        self,
        session: AsyncSession,
        payroll: Payroll,
        computation: PayrollComputation,
    ) -> None:
        rows: list[
            PayrollAttendance | PayrollBenefit | PayrollLeave | PayrollOvertime
        ] = []
        rows.extend(
            PayrollAttendance(
                payroll_id=payroll.payroll_id,
                attendance_id=line.attendance_id,
                computed_hours=line.hours,
                computed_amount=line.amount,
            )
            for line in computation.attendance_lines
        )
        rows.extend(
            PayrollBenefit(
                payroll_id=payroll.payroll_id,
                benefit_type_id=item.benefit_type_id,
                benefit_amount=item.amount,
            )
            for item in computation.benefits.items
        )
        rows.extend(
            PayrollLeave(
                payroll_id=payroll.payroll_id,
                leave_request_id=line.leave_request_id,
                leave_hours=line.hours,
            )
            for line in computation.leave_lines
        )
        rows.extend(
            PayrollOvertime(
                payroll_id=payroll.payroll_id,
                overtime_request_id=allocation.overtime_request_id,
                overtime_hours=allocation.hours,
                overtime_pay=allocation.pay,
            )
            for allocation in computation.overtime.allocations
        )
        session.add_all(rows)
        await session.flush()

    # ===== Queries and maintenance =====

    async def touch_payrolls(self, pay_period_id: int) -> int:
        """Refresh updated_at on the period's payroll rows. Returns rows touched."""
        async with self.session_factory() as session, session.begin():
            touched = await PayrollRepository(session).touch(pay_period_id)
        logger.info("Touched %d payroll rows in pay period %s", touched, pay_period_id)
        return touched

    async def get_payroll_history(self, employee_id: int, limit: int = 12) -> Sequence[Payroll]:
        async with self.session_factory() as session:
            return await PayrollRepository(session).history(employee_id, limit)

    async def find_by_pay_period(self, pay_period_id: int) -> Sequence[Payroll]:
        async with self.session_factory() as session:
            return await PayrollRepository(session).find_by_pay_period(pay_period_id)

    async def is_payroll_generated(self, pay_period_id: int) -> bool:
        async with self.session_factory() as session:
            return await PayrollRepository(session).count_by_pay_period(pay_period_id) > 0

    async def get_payroll_summary(self, pay_period_id: int) -> PayrollSummary:
        """Totals over the period's payroll rows; zeros when none exist."""
        async with self.session_factory() as session:
            return await PayrollRepository(session).summary(pay_period_id)

    async def get_payroll_details(self, payroll_id: int) -> PayrollDetails:
        """Breakdown of a payroll's detail rows.

        A payroll generated without details reports empty breakdowns and zero
        totals.

        Raises:
            PayrollNotFoundError: If the payroll does not exist
        """
        async with self.session_factory() as session:
            payrolls = PayrollRepository(session)
            if await payrolls.get(payroll_id) is None:
                raise PayrollNotFoundError(payroll_id)
            return await payrolls.details(payroll_id)

    async def regenerate_payroll(
        self, pay_period_id: int, with_details: bool = False
    ) -> GenerationResult:
        """Delete the period's payroll, then generate it again from current data.

        The delete and the new run are separate transactions; payslips already
        issued for the period are left as they are.
        """
        deleted = await self.delete_payroll_by_period(pay_period_id)
        logger.info(
            "Regenerating payroll for pay period %s after deleting %d rows",
            pay_period_id,
            deleted,
        )
        return await self.run(pay_period_id, with_details=with_details)

    async def delete_payroll_details_by_period(self, pay_period_id: int) -> dict[str, int]:
        async with self.session_factory() as session, session.begin():
            deleted = await PayrollRepository(session).delete_details(pay_period_id)
        logger.info("Deleted payroll details for pay period %s: %s", pay_period_id, deleted)
        return deleted

    async def delete_payroll_by_period(self, pay_period_id: int) -> int:
        """Delete detail rows then Payroll rows in one transaction."""
        async with self.session_factory() as session, session.begin():
            payrolls = PayrollRepository(session)
            await payrolls.delete_details(pay_period_id)
            deleted = await payrolls.delete_by_period(pay_period_id)
        logger.info("Deleted %d payroll rows in pay period %s", deleted, pay_period_id)
        return deleted
