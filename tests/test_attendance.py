"""Unit tests for attendance hours and leave overlap."""

from datetime import date, time
from decimal import Decimal

from factories import make_attendance, make_leave

from ph_payroll.calculators import (
    attendance_hours,
    attendance_lines,
    leave_lines,
    leave_overlap_days,
)
from ph_payroll.models import ApprovalStatus

LUNCH = Decimal("1")
JUNE_START = date(2024, 6, 1)
JUNE_END = date(2024, 6, 30)


class TestAttendanceHours:
    def test_full_day_less_lunch(self):
        record = make_attendance(1, date(2024, 6, 3), time(8, 0), time(17, 0))
        assert attendance_hours(record, LUNCH) == Decimal("8.00")

    def test_partial_hours(self):
        record = make_attendance(1, date(2024, 6, 3), time(8, 30), time(17, 0))
        assert attendance_hours(record, LUNCH) == Decimal("7.50")

    def test_shorter_than_lunch_is_zero(self):
        record = make_attendance(1, date(2024, 6, 3), time(8, 0), time(8, 45))
        assert attendance_hours(record, LUNCH) == Decimal("0")

    def test_missing_time_out_is_zero(self):
        record = make_attendance(1, date(2024, 6, 3), time(8, 0), None)
        assert attendance_hours(record, LUNCH) == Decimal("0")

    def test_lines_price_hours_at_hourly_rate(self):
        records = [
            make_attendance(1, date(2024, 6, 3), time(8, 0), time(17, 0)),
            make_attendance(2, date(2024, 6, 4), time(8, 0), None),
        ]

        lines = attendance_lines(records, Decimal("150.00"), LUNCH)

        assert [(line.attendance_id, line.hours, line.amount) for line in lines] == [
            (1, Decimal("8.00"), Decimal("1200.00")),
            (2, Decimal("0"), Decimal("0.00")),
        ]


class TestLeave:
    def test_overlap_clipped_to_period(self):
        leave = make_leave(1, date(2024, 5, 30), date(2024, 6, 2))
        assert leave_overlap_days(leave, JUNE_START, JUNE_END) == 2

    def test_single_day_leave(self):
        leave = make_leave(1, date(2024, 6, 14), date(2024, 6, 14))
        assert leave_overlap_days(leave, JUNE_START, JUNE_END) == 1

    def test_outside_period(self):
        leave = make_leave(1, date(2024, 7, 1), date(2024, 7, 3))
        assert leave_overlap_days(leave, JUNE_START, JUNE_END) == 0

    def test_lines_use_hours_per_day_and_skip_unapproved(self):
        requests = [
            make_leave(1, date(2024, 5, 30), date(2024, 6, 2)),
            make_leave(2, date(2024, 6, 20), date(2024, 6, 21), status=ApprovalStatus.PENDING.value),
            make_leave(3, date(2024, 7, 1), date(2024, 7, 2)),
        ]

        lines = leave_lines(requests, JUNE_START, JUNE_END, hours_per_day=8)

        assert [(line.leave_request_id, line.hours) for line in lines] == [(1, Decimal("16"))]
