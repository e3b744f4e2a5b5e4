"""Payroll engine exceptions."""

from __future__ import annotations


class PayrollError(Exception):
    """Base class for payroll engine errors."""


class PayPeriodNotFoundError(PayrollError):
    """Raised when a pay period id does not exist."""

    def __init__(self, pay_period_id: int):
        self.pay_period_id = pay_period_id
        super().__init__(f"Pay period {pay_period_id} not found")


class PositionNotFoundError(PayrollError):
    """Raised when an employee references a position that does not exist."""

    def __init__(self, employee_id: int, position_id: int):
        self.employee_id = employee_id
        self.position_id = position_id
        super().__init__(
            f"Employee {employee_id} references missing position {position_id}"
        )


class IneligibleEmployeeError(PayrollError):
    """Raised when an employee cannot be paid (missing or non-positive rates)."""

    def __init__(self, employee_id: int, reason: str):
        self.employee_id = employee_id
        self.reason = reason
        super().__init__(f"Employee {employee_id} is not eligible for payroll: {reason}")


class PayrollPersistenceError(PayrollError):
    """Raised when writing an employee's payroll fails for a non-duplicate reason."""

    def __init__(self, employee_id: int, pay_period_id: int, cause: Exception):
        self.employee_id = employee_id
        self.pay_period_id = pay_period_id
        self.cause = cause
        super().__init__(
            f"Failed to persist payroll for employee {employee_id} "
            f"in pay period {pay_period_id}: {cause}"
        )


class PayrollNotFoundError(PayrollError):
    """Raised when a payroll id does not exist."""

    def __init__(self, payroll_id: int):
        self.payroll_id = payroll_id
        super().__init__(f"Payroll {payroll_id} not found")
