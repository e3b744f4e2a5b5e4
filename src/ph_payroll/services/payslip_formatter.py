"""Plain-text payslip rendering."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from ph_payroll.calculators.types import round_money

if TYPE_CHECKING:
    from ph_payroll.config import Settings
    from ph_payroll.models import Payslip

WIDTH = 60
LABEL_WIDTH = 44
HEAVY_RULE = "═" * WIDTH
LIGHT_RULE = "─" * WIDTH


def _peso(amount: Decimal) -> str:
    return f"₱{round_money(amount):,.2f}"


def _line(label: str, amount: Decimal) -> str:
    return f"{label:<{LABEL_WIDTH}}{_peso(amount):>{WIDTH - LABEL_WIDTH}}"


def _day(value: date) -> str:
    return value.strftime("%b %d, %Y")


def format_payslip(
    payslip: Payslip,
    settings: Settings,
    generated_at: datetime | None = None,
) -> str:
    """Render a payslip as fixed-width text.

    Overtime and allowance lines appear only when non-zero. The footer
    timestamp is shown in the configured timezone.
    """
    tz = ZoneInfo(settings.timezone)
    stamp = generated_at.astimezone(tz) if generated_at else datetime.now(tz)
    basic_earned = payslip.daily_rate * payslip.days_worked

    lines = [
        HEAVY_RULE,
        f"{settings.company_name.upper()} PAYSLIP".center(WIDTH).rstrip(),
        HEAVY_RULE,
        f"Employee: {payslip.employee_name}",
        f"Pay Period: {_day(payslip.period_start)} - {_day(payslip.period_end)}",
        f"Payslip ID: {payslip.payslip_id}",
        LIGHT_RULE,
        "EARNINGS:",
        _line(
            f"Basic Salary ({payslip.days_worked} days @ {_peso(payslip.daily_rate)})",
            basic_earned,
        ),
    ]

    optional = [
        ("Overtime Pay", payslip.overtime),
        ("Rice Subsidy", payslip.rice_subsidy),
        ("Phone Allowance", payslip.phone_allowance),
        ("Clothing Allowance", payslip.clothing_allowance),
    ]
    lines.extend(_line(label, amount) for label, amount in optional if amount > 0)

    lines += [
        LIGHT_RULE,
        _line("GROSS INCOME", payslip.gross_income),
        LIGHT_RULE,
        "DEDUCTIONS:",
        _line("SSS Contribution", payslip.sss),
        _line("PhilHealth Contribution", payslip.philhealth),
        _line("Pag-IBIG Contribution", payslip.pagibig),
        _line("Withholding Tax", payslip.withholding_tax),
        LIGHT_RULE,
        _line("TOTAL DEDUCTIONS", payslip.total_deductions),
        LIGHT_RULE,
        _line("NET PAY", payslip.take_home_pay),
        HEAVY_RULE,
        "This is a computer-generated payslip.",
        f"Generated on: {stamp:%Y-%m-%d %H:%M:%S} ({settings.timezone})",
    ]
    return "\n".join(lines) + "\n"
