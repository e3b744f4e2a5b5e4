"""Health check endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from ph_payroll import __version__
from ph_payroll.api.dependencies import DbSession
from ph_payroll.repositories import DeductionRuleRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: datetime
    database: str
    deduction_rules: int


async def _count_rules(db: DbSession) -> int | None:
    """Global deduction rules loaded, or None when the database is unreachable."""
    try:
        return len(await DeductionRuleRepository(db).global_rules())
    except SQLAlchemyError:
        logger.warning("Database health check failed", exc_info=True)
        return None


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession) -> HealthResponse:
    """Database reachability and whether deduction rules are seeded.

    Payroll computed without rules has zero deductions, so an empty rule
    table reports "degraded".
    """
    rules = await _count_rules(db)
    healthy = rules is not None and rules > 0
    return HealthResponse(
        status="healthy" if healthy else "degraded",
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        database="unhealthy" if rules is None else "healthy",
        deduction_rules=rules or 0,
    )


@router.get("/ready", responses={503: {"description": "Not ready to run payroll"}})
async def readiness_check(db: DbSession) -> JSONResponse:
    """Ready once the database answers and deduction rules exist."""
    rules = await _count_rules(db)
    if not rules:
        reason = "database unavailable" if rules is None else "no deduction rules seeded"
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": reason},
        )
    return JSONResponse(content={"status": "ready"})


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
