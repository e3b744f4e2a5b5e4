"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, PlainSerializer

# Money crosses the API as a two-place decimal string.
Money = Annotated[Decimal, PlainSerializer(lambda v: f"{v:.2f}", return_type=str)]
# Hours are stored to two places and serialized the same way.
Hours = Money


# ============================================================================
# Payroll schemas
# ============================================================================


class GenerationResponse(BaseModel):
    """Outcome of a payroll generation run."""

    model_config = ConfigDict(from_attributes=True)

    pay_period_id: int
    count: int
    generated: list[int]
    skipped: list[int]
    failed: dict[int, str]


class PayrollResponse(BaseModel):
    """Schema for a payroll row."""

    model_config = ConfigDict(from_attributes=True)

    payroll_id: int
    employee_id: int
    pay_period_id: int
    basic_salary: Money
    overtime_pay: Money
    total_benefit: Money
    gross_income: Money
    total_deduction: Money
    net_salary: Money
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PayrollSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pay_period_id: int
    employee_count: int
    total_gross_income: Money
    total_net_salary: Money
    total_deductions: Money
    total_benefits: Money


class PayrollDetailsResponse(BaseModel):
    """Benefit and leave breakdowns and overtime and attendance totals for one payroll."""

    model_config = ConfigDict(from_attributes=True)

    payroll_id: int
    benefits: dict[str, Money]
    leave_hours: dict[str, Hours]
    total_leave_hours: Hours
    overtime_hours: Hours
    overtime_pay: Money
    attendance_hours: Hours
    attendance_amount: Money


class DeleteResponse(BaseModel):
    deleted: int


# ============================================================================
# Payslip schemas
# ============================================================================


class PayslipBatchResponse(BaseModel):
    pay_period_id: int
    created: int


class PayslipResponse(BaseModel):
    """Schema for a payslip snapshot."""

    model_config = ConfigDict(from_attributes=True)

    payslip_id: int
    employee_id: int
    pay_period_id: int
    payroll_id: int | None
    employee_name: str
    position_id: int | None
    period_start: date
    period_end: date
    monthly_rate: Money
    daily_rate: Money
    days_worked: int
    overtime: Money
    rice_subsidy: Money
    phone_allowance: Money
    clothing_allowance: Money
    sss: Money
    philhealth: Money
    pagibig: Money
    withholding_tax: Money
    gross_income: Money
    take_home_pay: Money


class PayslipSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pay_period_id: int
    payslip_count: int
    total_gross_income: Money
    total_take_home_pay: Money
    total_deductions: Money


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
