"""API routes."""

from ph_payroll.api.routes.health import router as health_router
from ph_payroll.api.routes.payroll import router as payroll_router
from ph_payroll.api.routes.payslips import router as payslips_router

__all__ = ["health_router", "payroll_router", "payslips_router"]
