"""
DiagnoCenter HR - Leaves Router

API endpoints for leave requests.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import (
    ensure_own_employee,
    get_leave_service,
    require_center_admin,
    require_employee,
)
from app.models.user import User
from app.schemas.leave import (
    LeaveApplyRequest,
    LeaveStatusUpdate,
    LeaveResponse,
    LeaveEnvelope,
    LeaveReviewEnvelope,
    CenterLeaveListEnvelope,
    EmployeeLeaveListEnvelope,
)
from app.services.leave_service import LeaveService


router = APIRouter()


@router.post(
    "/leaves",
    response_model=LeaveEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Apply for leave",
)
async def apply_leave(
    request: LeaveApplyRequest,
    service: LeaveService = Depends(get_leave_service),
    current_user: User = Depends(require_employee()),
):
    leave = await service.apply_leave(
        employee_id=current_user.employee_id,
        leave_type=request.leave_type,
        start_date=request.start_date,
        end_date=request.end_date,
        reason=request.reason,
        center_id=current_user.center_id,
    )
    return LeaveEnvelope(
        message="Leave applied successfully",
        leave=LeaveResponse.model_validate(leave),
    )


@router.get(
    "/leaves/center/{center_id}",
    response_model=CenterLeaveListEnvelope,
    summary="List center leave requests",
)
async def list_center_leaves(
    center_id: uuid.UUID,
    service: LeaveService = Depends(get_leave_service),
    current_user: User = Depends(require_center_admin()),
):
    if center_id != current_user.center_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view leave requests of your own center",
        )
    return CenterLeaveListEnvelope(leaves=await service.list_center_leaves(center_id))


@router.patch(
    "/leaves/{leave_id}/status",
    response_model=LeaveReviewEnvelope,
    summary="Approve or reject a leave request",
    description="Pending requests only. The employee is emailed on a best-effort basis.",
)
async def review_leave(
    leave_id: uuid.UUID,
    request: LeaveStatusUpdate,
    service: LeaveService = Depends(get_leave_service),
    current_user: User = Depends(require_center_admin()),
):
    leave, notification = await service.review_leave(
        leave_id,
        request.status,
        reviewer_id=current_user.id,
        center_id=current_user.center_id,
    )
    return LeaveReviewEnvelope(
        message=f"Leave {leave.status.value} successfully",
        leave=LeaveResponse.model_validate(leave),
        notification=notification,
    )


@router.get(
    "/leaves/employee/{employee_id}",
    response_model=EmployeeLeaveListEnvelope,
    summary="List own leave requests",
)
async def list_employee_leaves(
    employee_id: uuid.UUID,
    service: LeaveService = Depends(get_leave_service),
    current_user: User = Depends(require_employee()),
):
    ensure_own_employee(current_user, employee_id)
    return EmployeeLeaveListEnvelope(leaves=await service.list_employee_leaves(employee_id))
