"""Payroll generation endpoints."""

from fastapi import APIRouter, Query, status

from ph_payroll.api.dependencies import DbSession, PayrollGen
from ph_payroll.api.schemas import (
    DeleteResponse,
    GenerationResponse,
    PayrollDetailsResponse,
    PayrollResponse,
    PayrollSummaryResponse,
)
from ph_payroll.exceptions import PayPeriodNotFoundError
from ph_payroll.repositories import PayPeriodRepository

router = APIRouter(tags=["payroll"])

PERIOD_PAYROLL = "/pay-periods/{pay_period_id}/payroll"


async def _require_pay_period(db: DbSession, pay_period_id: int) -> None:
    if await PayPeriodRepository(db).get(pay_period_id) is None:
        raise PayPeriodNotFoundError(pay_period_id)


@router.post(
    PERIOD_PAYROLL,
    response_model=GenerationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_payroll(
    pay_period_id: int,
    db: DbSession,
    generator: PayrollGen,
    with_details: bool = Query(default=False),
) -> GenerationResponse:
    """Generate payroll for every eligible employee in the pay period."""
    await _require_pay_period(db, pay_period_id)
    result = await generator.run(pay_period_id, with_details=with_details)
    return GenerationResponse.model_validate(result)


@router.post(
    f"{PERIOD_PAYROLL}/regenerate",
    response_model=GenerationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def regenerate_payroll(
    pay_period_id: int,
    db: DbSession,
    generator: PayrollGen,
    with_details: bool = Query(default=False),
) -> GenerationResponse:
    """Replace the period's payroll with a fresh run over current data."""
    await _require_pay_period(db, pay_period_id)
    result = await generator.regenerate_payroll(pay_period_id, with_details=with_details)
    return GenerationResponse.model_validate(result)


@router.get(PERIOD_PAYROLL, response_model=list[PayrollResponse])
async def list_payroll(pay_period_id: int, generator: PayrollGen) -> list[PayrollResponse]:
    payrolls = await generator.find_by_pay_period(pay_period_id)
    return [PayrollResponse.model_validate(p) for p in payrolls]


@router.get(f"{PERIOD_PAYROLL}/summary", response_model=PayrollSummaryResponse)
async def payroll_summary(pay_period_id: int, generator: PayrollGen) -> PayrollSummaryResponse:
    summary = await generator.get_payroll_summary(pay_period_id)
    return PayrollSummaryResponse.model_validate(summary)


@router.delete(PERIOD_PAYROLL, response_model=DeleteResponse)
async def delete_payroll(pay_period_id: int, generator: PayrollGen) -> DeleteResponse:
    """Delete the period's payroll rows and their details."""
    deleted = await generator.delete_payroll_by_period(pay_period_id)
    return DeleteResponse(deleted=deleted)


@router.get("/payrolls/{payroll_id}/details", response_model=PayrollDetailsResponse)
async def payroll_details(payroll_id: int, generator: PayrollGen) -> PayrollDetailsResponse:
    details = await generator.get_payroll_details(payroll_id)
    return PayrollDetailsResponse.model_validate(details)
