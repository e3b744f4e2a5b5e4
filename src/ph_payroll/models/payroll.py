"""Pay period, deduction rule, payroll, payroll detail and payslip models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ph_payroll.models.base import MONEY, RATE, Base, TimestampMixin

if TYPE_CHECKING:
    from ph_payroll.models.employee import BenefitType, Employee


# ===== Pay Periods =====


class PayPeriod(Base, TimestampMixin):
    """Pay period with an inclusive date range."""

    __tablename__ = "pay_period"

    pay_period_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="pay_period_dates_check"),
    )


# ===== Deduction Rules =====


class DeductionType(str, Enum):
    """Statutory deduction kinds."""

    SSS = "SSS"
    PHILHEALTH = "PhilHealth"
    PAGIBIG = "PagIbig"
    WITHHOLDING_TAX = "WithholdingTax"


class DeductionRule(Base):
    """Bracket or rate rule for a statutory deduction.

    Rules with a null payroll_id are global and apply to every run.
    """

    __tablename__ = "deduction_rule"

    deduction_rule_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type_name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    lower_limit: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    upper_limit: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    base_tax: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    rate: Mapped[Decimal | None] = mapped_column(RATE, nullable=True)
    fixed_amount: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    payroll_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "type_name IN ('SSS', 'PhilHealth', 'PagIbig', 'WithholdingTax')",
            name="deduction_rule_type_check",
        ),
    )

    @property
    def is_global(self) -> bool:
        return self.payroll_id is None


# ===== Payroll =====


class Payroll(Base, TimestampMixin):
    """Computed pay for one employee in one pay period."""

    __tablename__ = "payroll"

    payroll_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_id"),
        nullable=False,
    )
    pay_period_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("pay_period.pay_period_id"),
        nullable=False,
        index=True,
    )
    basic_salary: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    overtime_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    gross_income: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    total_benefit: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    total_deduction: Mapped[Decimal] = mapped_column(
        MONEY, nullable=False, default=Decimal("0")
    )
    net_salary: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("employee_id", "pay_period_id", name="payroll_employee_period_unique"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship()
    pay_period: Mapped[PayPeriod] = relationship()
    attendance_details: Mapped[list[PayrollAttendance]] = relationship(
        back_populates="payroll"
    )
    benefit_details: Mapped[list[PayrollBenefit]] = relationship(back_populates="payroll")
    leave_details: Mapped[list[PayrollLeave]] = relationship(back_populates="payroll")
    overtime_details: Mapped[list[PayrollOvertime]] = relationship(back_populates="payroll")


class PayrollAttendance(Base):
    """Attendance row counted toward a payroll."""

    __tablename__ = "payroll_attendance"

    payroll_attendance_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    payroll_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("payroll.payroll_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    attendance_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("attendance.attendance_id"),
        nullable=False,
    )
    computed_hours: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    computed_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    payroll: Mapped[Payroll] = relationship(back_populates="attendance_details")


class PayrollBenefit(Base):
    """Position benefit paid in a payroll."""

    __tablename__ = "payroll_benefit"

    payroll_benefit_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    payroll_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("payroll.payroll_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    benefit_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("benefit_type.benefit_type_id"),
        nullable=False,
    )
    benefit_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    payroll: Mapped[Payroll] = relationship(back_populates="benefit_details")
    benefit_type: Mapped[BenefitType] = relationship(lazy="joined")


class PayrollLeave(Base):
    """Approved leave overlapping a payroll's period."""

    __tablename__ = "payroll_leave"

    payroll_leave_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    payroll_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("payroll.payroll_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    leave_request_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("leave_request.leave_request_id"),
        nullable=False,
    )
    leave_hours: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    payroll: Mapped[Payroll] = relationship(back_populates="leave_details")


class PayrollOvertime(Base):
    """Approved overtime request paid in a payroll."""

    __tablename__ = "payroll_overtime"

    payroll_overtime_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    payroll_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("payroll.payroll_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    overtime_request_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("overtime_request.overtime_request_id"),
        nullable=False,
    )
    overtime_hours: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    overtime_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    payroll: Mapped[Payroll] = relationship(back_populates="overtime_details")


# ===== Payslip =====


class Payslip(Base, TimestampMixin):
    """Printable snapshot of a payroll.

    payroll_id is kept as a plain reference so a payslip outlives a deleted
    payroll.
    """

    __tablename__ = "payslip"

    payslip_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_id"),
        nullable=False,
    )
    pay_period_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("pay_period.pay_period_id"),
        nullable=False,
        index=True,
    )
    payroll_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    employee_name: Mapped[str] = mapped_column(String, nullable=False)
    position_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)

    monthly_rate: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    daily_rate: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    days_worked: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    overtime: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))

    # Benefits
    rice_subsidy: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    phone_allowance: Mapped[Decimal] = mapped_column(
        MONEY, nullable=False, default=Decimal("0")
    )
    clothing_allowance: Mapped[Decimal] = mapped_column(
        MONEY, nullable=False, default=Decimal("0")
    )

    # Deductions
    sss: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    philhealth: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    pagibig: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    withholding_tax: Mapped[Decimal] = mapped_column(
        MONEY, nullable=False, default=Decimal("0")
    )

    gross_income: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    take_home_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    __table_args__ = (
        UniqueConstraint("employee_id", "pay_period_id", name="payslip_employee_period_unique"),
    )

    @property
    def total_benefits(self) -> Decimal:
        return self.rice_subsidy + self.phone_allowance + self.clothing_allowance

    @property
    def total_deductions(self) -> Decimal:
        return self.sss + self.philhealth + self.pagibig + self.withholding_tax
