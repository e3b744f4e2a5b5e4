"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ph_payroll.config import Settings
from ph_payroll.services import PayrollGenerator, PayslipGenerator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with request.app.state.database.session_factory() as session:
        yield session


def get_payroll_generator(request: Request) -> PayrollGenerator:
    return request.app.state.payroll_generator


def get_payslip_generator(request: Request) -> PayslipGenerator:
    return request.app.state.payslip_generator


# Type aliases for cleaner dependency injection
AppSettings = Annotated[Settings, Depends(get_settings)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
PayrollGen = Annotated[PayrollGenerator, Depends(get_payroll_generator)]
PayslipGen = Annotated[PayslipGenerator, Depends(get_payslip_generator)]
