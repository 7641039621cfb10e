"""
DiagnoCenter HR - Salary Router

API endpoints for salary disbursement, due queries and the salary sheet.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query

from app.dependencies import get_salary_service, require_center_admin
from app.models.user import User
from app.schemas.salary import (
    SalaryPaymentRequest,
    SalaryPaymentResponse,
    SalaryLedgerEntryResponse,
    CenterRevenueResponse,
    DueResponse,
    SalarySheetResponse,
)
from app.services.salary_service import SalaryService


router = APIRouter()


@router.post(
    "/salary/payments",
    response_model=SalaryPaymentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Pay salary",
    description=(
        "Charge and record a full or partial salary payment for the current month. "
        "Receipt delivery is best effort and reported in `notification`."
    ),
)
async def pay_salary(
    request: SalaryPaymentRequest,
    service: SalaryService = Depends(get_salary_service),
    current_user: User = Depends(require_center_admin()),
):
    center_id = request.center_id or current_user.center_id
    if center_id != current_user.center_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only pay salaries for your own center",
        )

    result = await service.post_salary_payment(
        employee_id=request.employee_id,
        center_id=center_id,
        amount=request.amount,
        payment_method=request.payment_method,
        payment_token=request.payment_token,
        payee_email=request.email,
        employee_name=request.employee_name,
        paid_by_id=current_user.id,
    )

    message = "Salary paid successfully"
    if result.notification.delivered:
        message = "Salary paid, salary slip generated, and email sent."

    return SalaryPaymentResponse(
        message=message,
        amount_charged=result.amount_charged,
        charge_id=result.charge_id,
        salary=SalaryLedgerEntryResponse.model_validate(result.entry),
        revenue=CenterRevenueResponse.model_validate(result.revenue),
        notification=result.notification,
    )


@router.get(
    "/salary/due",
    response_model=DueResponse,
    summary="Salary due for a month",
)
async def get_due_salary(
    employee_id: uuid.UUID = Query(...),
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    service: SalaryService = Depends(get_salary_service),
    current_user: User = Depends(require_center_admin()),
):
    summary = await service.get_due(employee_id, year, month, center_id=current_user.center_id)
    return DueResponse(
        employee_name=summary.employee_name,
        total_salary=summary.total_salary,
        paid_amount=summary.paid_amount,
        due_amount=summary.due_amount,
    )


@router.get(
    "/salary/sheet",
    response_model=SalarySheetResponse,
    summary="Center salary sheet",
)
async def get_salary_sheet(
    name: Optional[str] = Query(None),
    position: Optional[str] = Query(None),
    month: Optional[str] = Query(None, description="Month name, e.g. March"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    service: SalaryService = Depends(get_salary_service),
    current_user: User = Depends(require_center_admin()),
):
    sheet = await service.get_salary_sheet(
        current_user.center_id,
        name=name,
        position=position,
        month=month,
        page=page,
        limit=limit,
    )
    return SalarySheetResponse(**sheet)
