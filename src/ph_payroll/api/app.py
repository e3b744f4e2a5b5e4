"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ph_payroll import __version__
from ph_payroll.api.routes import health_router, payroll_router, payslips_router
from ph_payroll.api.schemas import ErrorResponse
from ph_payroll.config import Settings
from ph_payroll.database import Database
from ph_payroll.exceptions import PayPeriodNotFoundError, PayrollError, PayrollNotFoundError
from ph_payroll.logging_config import configure_logging
from ph_payroll.services import PayrollGenerator, PayslipGenerator

logger = logging.getLogger(__name__)

# Domain errors that reach the HTTP layer: (status, code, attributes echoed as context).
# Per-employee errors are absorbed by the generators and never get here.
ERROR_MAP: dict[type[PayrollError], tuple[int, str, tuple[str, ...]]] = {
    PayPeriodNotFoundError: (
        status.HTTP_404_NOT_FOUND,
        "PAY_PERIOD_NOT_FOUND",
        ("pay_period_id",),
    ),
    PayrollNotFoundError: (
        status.HTTP_404_NOT_FOUND,
        "PAYROLL_NOT_FOUND",
        ("payroll_id",),
    ),
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create missing tables on startup and release connections on shutdown."""
    await app.state.database.create_all()
    logger.info("Payroll API started against %s", app.state.settings.database_url)
    yield
    await app.state.database.dispose()


def _error_body(exc: PayrollError) -> tuple[int, ErrorResponse]:
    for error_type, (status_code, code, fields) in ERROR_MAP.items():
        if isinstance(exc, error_type):
            context = {name: getattr(exc, name) for name in fields}
            return status_code, ErrorResponse(detail=str(exc), code=code, context=context)
    return status.HTTP_400_BAD_REQUEST, ErrorResponse(detail=str(exc), code="PAYROLL_ERROR")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API around one Database and one pair of generators.

    State is attached here rather than in the lifespan so the app is usable
    by transports that do not run lifespan events.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="PH Payroll API",
        description="Philippine payroll computation and payslip generation",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    database = Database(settings)
    app.state.settings = settings
    app.state.database = database
    app.state.payroll_generator = PayrollGenerator(database.session_factory, settings)
    app.state.payslip_generator = PayslipGenerator(database.session_factory, settings)

    @app.exception_handler(PayrollError)
    async def payroll_error_handler(request: Request, exc: PayrollError) -> JSONResponse:
        status_code, body = _error_body(exc)
        logger.warning("%s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body = ErrorResponse(detail="An unexpected error occurred", code="INTERNAL_ERROR")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(exclude_none=True),
        )

    app.include_router(health_router)
    app.include_router(payroll_router, prefix="/api/v1")
    app.include_router(payslips_router, prefix="/api/v1")

    return app
