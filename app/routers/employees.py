"""
DiagnoCenter HR - Employees Router

API endpoints for employee records and the employee dashboard.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.dependencies import (
    ensure_own_employee,
    require_center_admin,
    require_employee,
    require_super_admin,
)
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.employee import (
    EmployeeCreate,
    EmployeeUpdate,
    EmployeeWithCenterResponse,
    EmployeeEnvelope,
    EmployeeListEnvelope,
    EmployeeDashboardResponse,
    SalaryHistoryItem,
)
from app.services.employee_service import EmployeeService


router = APIRouter()


@router.post(
    "/employees",
    response_model=EmployeeEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Hire an employee",
    description="Create an employee in the administrator's center together with the employee's login account.",
)
async def create_employee(
    data: EmployeeCreate,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_center_admin()),
):
    service = EmployeeService(db)
    employee = await service.create_employee(
        center_id=current_user.center_id,
        data=data.model_dump(),
        created_by_id=current_user.id,
    )
    return EmployeeEnvelope(
        message="Employee created successfully",
        employee=EmployeeWithCenterResponse.model_validate(employee),
    )


@router.get(
    "/employees",
    response_model=EmployeeListEnvelope,
    summary="List center employees",
)
async def list_center_employees(
    name: Optional[str] = Query(None, description="Case-insensitive name filter"),
    position: Optional[str] = Query(None, description="Case-insensitive position filter"),
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_center_admin()),
):
    employees = await EmployeeService(db).list_center_employees(
        current_user.center_id, name=name, position=position,
    )
    return EmployeeListEnvelope(
        message="Employees fetched successfully",
        total=len(employees),
        employees=[EmployeeWithCenterResponse.model_validate(e) for e in employees],
    )


@router.get(
    "/employees/all",
    response_model=EmployeeListEnvelope,
    summary="List all employees (super admin)",
)
async def list_all_employees(
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_super_admin()),
):
    employees = await EmployeeService(db).list_all_employees()
    return EmployeeListEnvelope(
        message="All employees fetched successfully",
        total=len(employees),
        employees=[EmployeeWithCenterResponse.model_validate(e) for e in employees],
    )


@router.get(
    "/employees/{employee_id}",
    response_model=EmployeeEnvelope,
    summary="Get employee",
)
async def get_employee(
    employee_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_center_admin()),
):
    employee = await EmployeeService(db).get_employee(employee_id, current_user.center_id)
    return EmployeeEnvelope(
        message="Employee fetched successfully",
        employee=EmployeeWithCenterResponse.model_validate(employee),
    )


@router.put(
    "/employees/{employee_id}",
    response_model=EmployeeEnvelope,
    summary="Update employee",
    description="Only provided, non-empty fields are changed.",
)
async def update_employee(
    employee_id: uuid.UUID,
    data: EmployeeUpdate,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_center_admin()),
):
    employee = await EmployeeService(db).update_employee(
        employee_id,
        data.model_dump(exclude_unset=True),
        center_id=current_user.center_id,
        updated_by_id=current_user.id,
    )
    return EmployeeEnvelope(
        message="Employee updated successfully",
        employee=EmployeeWithCenterResponse.model_validate(employee),
    )


@router.delete(
    "/employees/{employee_id}",
    response_model=MessageResponse,
    summary="Delete employee",
)
async def delete_employee(
    employee_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_center_admin()),
):
    await EmployeeService(db).delete_employee(employee_id, current_user.center_id)
    return MessageResponse(message="Employee deleted successfully")


@router.get(
    "/employees/{employee_id}/dashboard",
    response_model=EmployeeDashboardResponse,
    summary="Employee dashboard",
    description="Own profile, center details and salary history.",
)
async def employee_dashboard(
    employee_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_employee()),
):
    ensure_own_employee(current_user, employee_id)
    data = await EmployeeService(db).get_employee_dashboard(employee_id)
    return EmployeeDashboardResponse(
        employee=EmployeeWithCenterResponse.model_validate(data["employee"]),
        salary_history=[SalaryHistoryItem.model_validate(e) for e in data["salary_history"]],
    )
