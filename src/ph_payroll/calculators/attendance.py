"""Worked hours from attendance and leave hours from leave requests."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

from ph_payroll.calculators.types import ZERO, AttendanceLine, LeaveLine, round_money
from ph_payroll.models import AttendanceRecord, LeaveRequest

_SECONDS_PER_HOUR = Decimal("3600")


def attendance_hours(record: AttendanceRecord, lunch_break_hours: Decimal) -> Decimal:
    """Hours between clock-in and clock-out less the lunch break.

    A row missing either time counts as zero hours.
    """
    if record.time_in is None or record.time_out is None:
        return ZERO
    elapsed = datetime.combine(record.work_date, record.time_out) - datetime.combine(
        record.work_date, record.time_in
    )
    hours = Decimal(int(elapsed.total_seconds())) / _SECONDS_PER_HOUR - lunch_break_hours
    return round_money(max(ZERO, hours))


def attendance_lines(
    records: Iterable[AttendanceRecord],
    hourly_rate: Decimal,
    lunch_break_hours: Decimal,
) -> list[AttendanceLine]:
    lines = []
    for record in records:
        hours = attendance_hours(record, lunch_break_hours)
        lines.append(
            AttendanceLine(
                attendance_id=record.attendance_id,
                hours=hours,
                amount=round_money(hours * hourly_rate),
            )
        )
    return lines


def leave_overlap_days(leave: LeaveRequest, period_start: date, period_end: date) -> int:
    """Inclusive count of leave days falling inside the period."""
    start = max(leave.leave_start, period_start)
    end = min(leave.leave_end, period_end)
    if end < start:
        return 0
    return (end - start).days + 1


def leave_lines(
    requests: Iterable[LeaveRequest],
    period_start: date,
    period_end: date,
    hours_per_day: int,
) -> list[LeaveLine]:
    """Approved leave overlapping the period, in hours."""
    lines = []
    for leave in requests:
        if not leave.is_approved:
            continue
        days = leave_overlap_days(leave, period_start, period_end)
        if days == 0:
            continue
        lines.append(
            LeaveLine(
                leave_request_id=leave.leave_request_id,
                hours=Decimal(days * hours_per_day),
            )
        )
    return lines
