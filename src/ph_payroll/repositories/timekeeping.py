"""Read access to attendance, overtime and leave ledgers."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Sequence

from sqlalchemy import func, select

from ph_payroll.models import (
    ApprovalStatus,
    AttendanceRecord,
    LeaveRequest,
    OvertimeRequest,
)
from ph_payroll.repositories.base import Repository


class AttendanceRepository(Repository[AttendanceRecord]):
    model = AttendanceRecord

    async def in_period(
        self, employee_id: int, start: date, end: date
    ) -> Sequence[AttendanceRecord]:
        result = await self.session.execute(
            select(AttendanceRecord)
            .where(
                AttendanceRecord.employee_id == employee_id,
                AttendanceRecord.work_date >= start,
                AttendanceRecord.work_date <= end,
            )
            .order_by(AttendanceRecord.work_date, AttendanceRecord.attendance_id)
        )
        return result.scalars().all()

    async def count_days_worked(self, employee_id: int, start: date, end: date) -> int:
        """Attendance rows in the period with both clock-in and clock-out recorded."""
        result = await self.session.execute(
            select(func.count(AttendanceRecord.attendance_id)).where(
                AttendanceRecord.employee_id == employee_id,
                AttendanceRecord.work_date >= start,
                AttendanceRecord.work_date <= end,
                AttendanceRecord.time_in.is_not(None),
                AttendanceRecord.time_out.is_not(None),
            )
        )
        return int(result.scalar_one())


class OvertimeRequestRepository(Repository[OvertimeRequest]):
    model = OvertimeRequest

    async def approved_in_period(
        self, employee_id: int, start: date, end: date
    ) -> Sequence[OvertimeRequest]:
        """Approved requests whose start date falls inside [start, end]."""
        window_start = datetime.combine(start, time.min)
        window_end = datetime.combine(end + timedelta(days=1), time.min)
        result = await self.session.execute(
            select(OvertimeRequest)
            .where(
                OvertimeRequest.employee_id == employee_id,
                OvertimeRequest.approval_status == ApprovalStatus.APPROVED.value,
                OvertimeRequest.overtime_start >= window_start,
                OvertimeRequest.overtime_start < window_end,
            )
            .order_by(OvertimeRequest.overtime_start, OvertimeRequest.overtime_request_id)
        )
        return result.scalars().all()


class LeaveRequestRepository(Repository[LeaveRequest]):
    model = LeaveRequest

    async def approved_overlapping(
        self, employee_id: int, start: date, end: date
    ) -> Sequence[LeaveRequest]:
        result = await self.session.execute(
            select(LeaveRequest)
            .where(
                LeaveRequest.employee_id == employee_id,
                LeaveRequest.approval_status == ApprovalStatus.APPROVED.value,
                LeaveRequest.leave_start <= end,
                LeaveRequest.leave_end >= start,
            )
            .order_by(LeaveRequest.leave_start, LeaveRequest.leave_request_id)
        )
        return result.scalars().all()
