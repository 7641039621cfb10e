"""
DiagnoCenter HR - Employee Schemas

Pydantic schemas for employee records and the employee dashboard.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator


EmployeeStatusEnum = Literal["active", "inactive"]


# ===========================================
# REQUEST SCHEMAS
# ===========================================

class EmployeeCreate(BaseModel):
    """Hire an employee and open the linked login account."""
    name: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=30)
    position: str = Field(..., min_length=1, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    salary: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    hire_date: Optional[date] = None
    profile_image: str = Field(..., min_length=1, max_length=500)
    status: EmployeeStatusEnum = "active"

    @field_validator("name", "phone", "position", "profile_image")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class EmployeeUpdate(BaseModel):
    """
    Partial update. Fields left out, null or blank keep their current value.
    """
    name: Optional[str] = Field(None, max_length=150)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    position: Optional[str] = Field(None, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    salary: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    hire_date: Optional[date] = None
    profile_image: Optional[str] = Field(None, max_length=500)
    status: Optional[EmployeeStatusEnum] = None


# ===========================================
# RESPONSE SCHEMAS
# ===========================================

class CenterSummary(BaseModel):
    id: UUID
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True


class EmployeeResponse(BaseModel):
    """Employee record (never carries the password hash)."""
    id: UUID
    center_id: UUID
    name: str
    email: EmailStr
    phone: str
    position: str
    department: Optional[str] = None
    salary: Decimal
    hire_date: date
    profile_image: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EmployeeWithCenterResponse(EmployeeResponse):
    center: Optional[CenterSummary] = None


class SalaryHistoryItem(BaseModel):
    """One ledger period on the employee dashboard."""
    id: UUID
    month: int
    year: int
    total_salary: Decimal
    paid_amount: Decimal
    due_amount: Decimal
    payment_status: str
    payment_method: Optional[str] = None
    payment_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class EmployeeDashboardResponse(BaseModel):
    success: bool = True
    message: str = "Employee dashboard data retrieved successfully"
    employee: EmployeeWithCenterResponse
    salary_history: List[SalaryHistoryItem] = []


class EmployeeEnvelope(BaseModel):
    success: bool = True
    message: str
    employee: EmployeeWithCenterResponse


class EmployeeListEnvelope(BaseModel):
    success: bool = True
    message: str
    total: int
    employees: List[EmployeeWithCenterResponse]
