"""Philippine payroll computation and payslip generation."""

__version__ = "0.1.0"
