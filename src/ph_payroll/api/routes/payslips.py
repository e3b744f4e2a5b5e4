"""Payslip endpoints."""

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import PlainTextResponse

from ph_payroll.api.dependencies import AppSettings, DbSession, PayslipGen
from ph_payroll.api.schemas import (
    PayslipBatchResponse,
    PayslipResponse,
    PayslipSummaryResponse,
)
from ph_payroll.repositories import PayslipRepository
from ph_payroll.services import format_payslip

router = APIRouter(tags=["payslips"])


@router.post(
    "/pay-periods/{pay_period_id}/payslips",
    response_model=PayslipBatchResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_all_payslips(
    pay_period_id: int, generator: PayslipGen
) -> PayslipBatchResponse:
    created = await generator.generate_all_payslips(pay_period_id)
    return PayslipBatchResponse(pay_period_id=pay_period_id, created=created)


@router.get("/pay-periods/{pay_period_id}/payslips", response_model=list[PayslipResponse])
async def list_payslips(pay_period_id: int, generator: PayslipGen) -> list[PayslipResponse]:
    payslips = await generator.find_by_pay_period(pay_period_id)
    return [PayslipResponse.model_validate(p) for p in payslips]


@router.get(
    "/pay-periods/{pay_period_id}/payslips/summary",
    response_model=PayslipSummaryResponse,
)
async def payslip_summary(pay_period_id: int, generator: PayslipGen) -> PayslipSummaryResponse:
    summary = await generator.get_payslip_summary(pay_period_id)
    return PayslipSummaryResponse.model_validate(summary)


@router.post(
    "/pay-periods/{pay_period_id}/employees/{employee_id}/payslip",
    response_model=PayslipResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_payslip(
    pay_period_id: int, employee_id: int, generator: PayslipGen
) -> PayslipResponse:
    """Create (or return the existing) payslip for one employee."""
    payslip = await generator.generate_payslip(employee_id, pay_period_id)
    if payslip is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No payroll for employee {employee_id} in pay period {pay_period_id}",
        )
    return PayslipResponse.model_validate(payslip)


@router.get("/payslips/{payslip_id}/text", response_class=PlainTextResponse)
async def payslip_text(payslip_id: int, db: DbSession, settings: AppSettings) -> str:
    payslip = await PayslipRepository(db).get(payslip_id)
    if payslip is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Payslip {payslip_id} not found",
        )
    return format_payslip(payslip, settings)
