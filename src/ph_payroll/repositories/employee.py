"""Employee and position repositories."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import select

from ph_payroll.models import Employee, EmployeeStatus, Position, PositionBenefit
from ph_payroll.repositories.base import Repository


class EmployeeRepository(Repository[Employee]):
    model = Employee

    async def list_payable(self) -> Sequence[Employee]:
        """Employees that are not terminated, ordered by id."""
        result = await self.session.execute(
            select(Employee)
            .where(Employee.status != EmployeeStatus.TERMINATED.value)
            .order_by(Employee.employee_id)
        )
        return result.scalars().all()


class PositionRepository(Repository[Position]):
    model = Position

    async def get_benefits(self, position_id: int) -> Sequence[PositionBenefit]:
        """Benefit rows for a position with their benefit types loaded."""
        result = await self.session.execute(
            select(PositionBenefit)
            .where(PositionBenefit.position_id == position_id)
            .order_by(PositionBenefit.benefit_type_id)
        )
        return result.scalars().unique().all()
