"""Overtime pay from approved overtime requests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable

from ph_payroll.calculators.types import (
    ZERO,
    OvertimeAllocation,
    OvertimeComputation,
    round_money,
)
from ph_payroll.models import OvertimeRequest

_SIXTY = Decimal("60")


def request_minutes(request: OvertimeRequest) -> int:
    """Whole minutes between start and end, never negative."""
    seconds = (request.overtime_end - request.overtime_start).total_seconds()
    return max(0, int(seconds // 60))


def is_payable(request: OvertimeRequest, period_start: date, period_end: date) -> bool:
    """Approved, and the request starts on a day inside the period."""
    if not request.is_approved:
        return False
    return period_start <= request.overtime_start.date() <= period_end


def compute_overtime_pay(
    requests: Iterable[OvertimeRequest],
    period_start: date,
    period_end: date,
    hourly_rate: Decimal,
    multiplier: Decimal,
) -> OvertimeComputation:
    """Overtime for one employee-period.

    Minutes are summed first and converted to hours once, so the aggregate
    does not accumulate per-request rounding. Each allocation is the step
    between rounded running totals, so allocations are never negative and
    always sum to the aggregate hours and pay.
    """
    payable = [r for r in requests if is_payable(r, period_start, period_end)]
    minutes = [request_minutes(r) for r in payable]
    total_minutes = sum(minutes)
    if total_minutes == 0:
        return OvertimeComputation()

    allocations: list[OvertimeAllocation] = []
    running_minutes = 0
    hours = ZERO
    pay = ZERO
    for request, request_mins in zip(payable, minutes):
        running_minutes += request_mins
        running_hours = round_money(Decimal(running_minutes) / _SIXTY)
        running_pay = round_money(running_hours * hourly_rate * multiplier)
        allocations.append(
            OvertimeAllocation(
                overtime_request_id=request.overtime_request_id,
                minutes=request_mins,
                hours=running_hours - hours,
                pay=running_pay - pay,
            )
        )
        hours, pay = running_hours, running_pay

    return OvertimeComputation(
        total_minutes=total_minutes,
        hours=hours,
        pay=pay,
        allocations=allocations,
    )
