"""
DiagnoCenter HR - Salary Schemas

Pydantic schemas for salary payments, due queries and the salary sheet.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.schemas.common import NotificationOutcome


# ===========================================
# REQUEST SCHEMAS
# ===========================================

class SalaryPaymentRequest(BaseModel):
    """Post a full or partial salary payment for the current month."""
    employee_id: UUID
    center_id: Optional[UUID] = Field(
        None, description="Defaults to the administrator's own center"
    )
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    payment_method: str = Field("card", min_length=1, max_length=50)
    payment_token: str = Field(..., min_length=1, description="Gateway payment method token")
    email: Optional[EmailStr] = Field(None, description="Receipt recipient, defaults to the employee's email")
    employee_name: Optional[str] = Field(None, max_length=150)


# ===========================================
# RESPONSE SCHEMAS
# ===========================================

class SalaryLedgerEntryResponse(BaseModel):
    id: UUID
    employee_id: Optional[UUID] = None
    employee_name: Optional[str] = None
    center_id: UUID
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


class CenterRevenueResponse(BaseModel):
    center_id: UUID
    month: int
    year: int
    total_revenue: Decimal
    total_cost: Decimal
    net_profit: Decimal

    class Config:
        from_attributes = True


class SalaryPaymentResponse(BaseModel):
    success: bool = True
    message: str = "Salary paid successfully"
    amount_charged: Decimal
    charge_id: Optional[str] = None
    salary: SalaryLedgerEntryResponse
    revenue: CenterRevenueResponse
    notification: NotificationOutcome


class DueResponse(BaseModel):
    success: bool = True
    employee_name: str
    total_salary: Decimal
    paid_amount: Decimal
    due_amount: Decimal


class SalarySheetRow(BaseModel):
    id: UUID
    employee_id: Optional[UUID] = None
    name: str
    email: str
    phone: str
    position: str
    image: str
    paid_amount: Decimal
    due_amount: Decimal
    payment_date: Optional[datetime] = None
    payment_status: str
    month: int
    year: int
    payment_method: Optional[str] = None


class SalarySheetResponse(BaseModel):
    success: bool = True
    message: str = "Salary sheet fetched successfully"
    salaries: List[SalarySheetRow]
    total_salaries: int
    total_pages: int
    current_page: int
