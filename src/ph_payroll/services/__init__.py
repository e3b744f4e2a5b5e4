"""Payroll and payslip generation services."""

from ph_payroll.services.payroll_generator import (
    GenerationResult,
    PayrollGenerator,
    load_payroll_inputs,
)
from ph_payroll.services.payslip_formatter import format_payslip
from ph_payroll.services.payslip_generator import PayslipGenerator

__all__ = [
    "GenerationResult",
    "PayrollGenerator",
    "PayslipGenerator",
    "format_payslip",
    "load_payroll_inputs",
]
