"""Pytest fixtures for payroll tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from ph_payroll.api import create_app
from ph_payroll.calculators import DeductionResolver, PayrollCalculator
from ph_payroll.config import Settings
from ph_payroll.database import Database
from ph_payroll.models import (
    ApprovalStatus,
    AttendanceRecord,
    BenefitType,
    Employee,
    EmployeeStatus,
    LeaveRequest,
    LeaveType,
    OvertimeRequest,
    PayPeriod,
    Position,
    PositionBenefit,
)
from ph_payroll.rules import default_deduction_rules, seed_default_deduction_rules
from ph_payroll.services import PayrollGenerator, PayslipGenerator

JUNE_START = date(2024, 6, 1)
JUNE_END = date(2024, 6, 30)


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite+aiosqlite:///:memory:")


@pytest.fixture
def resolver(settings: Settings) -> DeductionResolver:
    return DeductionResolver(default_deduction_rules(), settings)


@pytest.fixture
def calculator(resolver: DeductionResolver, settings: Settings) -> PayrollCalculator:
    return PayrollCalculator(resolver, settings)


@pytest.fixture
def june() -> PayPeriod:
    return PayPeriod(pay_period_id=1, name="June 2024", start_date=JUNE_START, end_date=JUNE_END)


# ============================================================================
# Database fixtures
# ============================================================================


@pytest.fixture
def db_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file.

    A file is used instead of :memory: so every session sees the same data.
    """
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'payroll.db'}")


@pytest_asyncio.fixture
async def database(db_settings: Settings) -> AsyncGenerator[Database, None]:
    db = Database(db_settings)
    await db.create_all()
    async with db.session() as session:
        await seed_default_deduction_rules(session)
    yield db
    await db.dispose()


@dataclass
class Scenario:
    """Ids of the rows seeded by the scenario fixture."""

    june_id: int
    july_id: int
    regular_id: int
    no_position_id: int
    terminated_id: int
    zero_salary_id: int


@pytest_asyncio.fixture
async def scenario(database: Database) -> Scenario:
    """A small workforce with one June pay period.

    - regular: 25,000 basic, 150/hour, rank-and-file with rice 1,500 and
      phone 500, 120 approved overtime minutes in June
    - no_position: 30,000 basic, no position, no overtime
    - terminated: never paid
    - zero_salary: ineligible
    """
    async with database.session() as session:
        june = PayPeriod(name="June 2024", start_date=JUNE_START, end_date=JUNE_END)
        july = PayPeriod(name="July 2024", start_date=date(2024, 7, 1), end_date=date(2024, 7, 31))
        rice = BenefitType(name="Rice Subsidy")
        phone = BenefitType(name="Phone Allowance")
        position = Position(department="Rank-and-file", title="Customer Service")
        sick = LeaveType(name="Sick Leave")
        session.add_all([june, july, rice, phone, position, sick])
        await session.flush()

        session.add_all(
            [
                PositionBenefit(
                    position_id=position.position_id,
                    benefit_type_id=rice.benefit_type_id,
                    value=Decimal("1500.00"),
                ),
                PositionBenefit(
                    position_id=position.position_id,
                    benefit_type_id=phone.benefit_type_id,
                    value=Decimal("500.00"),
                ),
            ]
        )

        regular = Employee(
            first_name="Maria",
            last_name="Santos",
            basic_salary=Decimal("25000.00"),
            hourly_rate=Decimal("150.00"),
            position_id=position.position_id,
            status=EmployeeStatus.REGULAR.value,
        )
        no_position = Employee(
            first_name="Jose",
            last_name="Reyes",
            basic_salary=Decimal("30000.00"),
            hourly_rate=Decimal("178.57"),
            status=EmployeeStatus.PROBATIONARY.value,
        )
        terminated = Employee(
            first_name="Ana",
            last_name="Cruz",
            basic_salary=Decimal("20000.00"),
            hourly_rate=Decimal("120.00"),
            status=EmployeeStatus.TERMINATED.value,
        )
        zero_salary = Employee(
            first_name="Pedro",
            last_name="Garcia",
            basic_salary=Decimal("0.00"),
            hourly_rate=Decimal("0.00"),
            status=EmployeeStatus.REGULAR.value,
        )
        session.add_all([regular, no_position, terminated, zero_salary])
        await session.flush()

        approved = ApprovalStatus.APPROVED.value
        session.add_all(
            [
                OvertimeRequest(
                    employee_id=regular.employee_id,
                    overtime_start=datetime(2024, 6, 10, 18, 0),
                    overtime_end=datetime(2024, 6, 10, 20, 0),
                    approval_status=approved,
                ),
                OvertimeRequest(
                    employee_id=regular.employee_id,
                    overtime_start=datetime(2024, 6, 11, 18, 0),
                    overtime_end=datetime(2024, 6, 11, 21, 0),
                    approval_status=ApprovalStatus.PENDING.value,
                ),
                OvertimeRequest(
                    employee_id=regular.employee_id,
                    overtime_start=datetime(2024, 7, 1, 18, 0),
                    overtime_end=datetime(2024, 7, 1, 19, 0),
                    approval_status=approved,
                ),
                AttendanceRecord(
                    employee_id=regular.employee_id,
                    work_date=date(2024, 6, 3),
                    time_in=time(8, 0),
                    time_out=time(17, 0),
                ),
                AttendanceRecord(
                    employee_id=regular.employee_id,
                    work_date=date(2024, 6, 4),
                    time_in=time(8, 30),
                    time_out=time(17, 0),
                ),
                AttendanceRecord(
                    employee_id=regular.employee_id,
                    work_date=date(2024, 6, 5),
                    time_in=time(8, 0),
                    time_out=None,
                ),
                AttendanceRecord(
                    employee_id=regular.employee_id,
                    work_date=date(2024, 7, 1),
                    time_in=time(8, 0),
                    time_out=time(17, 0),
                ),
                LeaveRequest(
                    employee_id=regular.employee_id,
                    leave_type_id=sick.leave_type_id,
                    leave_start=date(2024, 5, 30),
                    leave_end=date(2024, 6, 2),
                    approval_status=approved,
                ),
                LeaveRequest(
                    employee_id=regular.employee_id,
                    leave_type_id=sick.leave_type_id,
                    leave_start=date(2024, 6, 20),
                    leave_end=date(2024, 6, 21),
                    approval_status=ApprovalStatus.PENDING.value,
                ),
            ]
        )

        return Scenario(
            june_id=june.pay_period_id,
            july_id=july.pay_period_id,
            regular_id=regular.employee_id,
            no_position_id=no_position.employee_id,
            terminated_id=terminated.employee_id,
            zero_salary_id=zero_salary.employee_id,
        )


@pytest.fixture
def payroll_generator(database: Database) -> PayrollGenerator:
    return PayrollGenerator(database.session_factory, database.settings)


@pytest.fixture
def payslip_generator(database: Database) -> PayslipGenerator:
    return PayslipGenerator(database.session_factory, database.settings)


@pytest_asyncio.fixture
async def client(db_settings: Settings, scenario: Scenario) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for an app bound to the seeded scenario database."""
    app = create_app(db_settings)
    await app.state.database.create_all()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    await app.state.database.dispose()
