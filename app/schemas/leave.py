"""
DiagnoCenter HR - Leave Schemas
"""

from datetime import date, datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.schemas.common import NotificationOutcome


LeaveTypeEnum = Literal["sick", "casual", "annual"]


class LeaveApplyRequest(BaseModel):
    """Apply for leave."""
    leave_type: LeaveTypeEnum
    start_date: date
    end_date: date
    reason: str = Field(..., min_length=1, max_length=2000)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class LeaveStatusUpdate(BaseModel):
    """
    Review decision. Any value is accepted here; the service rejects
    anything other than approved/rejected with a validation error.
    """
    status: str = Field(..., min_length=1)


class LeaveResponse(BaseModel):
    id: UUID
    employee_id: UUID
    center_id: UUID
    leave_type: str
    start_date: date
    end_date: date
    reason: str
    status: str
    applied_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by_id: Optional[UUID] = None

    class Config:
        from_attributes = True


class CenterLeaveItem(LeaveResponse):
    employee_name: Optional[str] = None
    employee_email: Optional[str] = None


class EmployeeLeaveItem(LeaveResponse):
    days: int


class LeaveEnvelope(BaseModel):
    success: bool = True
    message: str
    leave: LeaveResponse


class LeaveReviewEnvelope(LeaveEnvelope):
    notification: NotificationOutcome


class CenterLeaveListEnvelope(BaseModel):
    success: bool = True
    message: str = "Leaves fetched successfully"
    leaves: List[CenterLeaveItem]


class EmployeeLeaveListEnvelope(BaseModel):
    success: bool = True
    message: str = "Leaves fetched successfully"
    leaves: List[EmployeeLeaveItem]
