"""
DiagnoCenter HR - Schemas Package

Pydantic schemas for request/response validation.
"""

from app.schemas.common import NotificationOutcome, MessageResponse
from app.schemas.auth import LoginRequest, TokenResponse, UserSummary
from app.schemas.employee import (
    EmployeeCreate,
    EmployeeUpdate,
    EmployeeResponse,
    EmployeeWithCenterResponse,
    EmployeeEnvelope,
    EmployeeListEnvelope,
    EmployeeDashboardResponse,
    SalaryHistoryItem,
)
from app.schemas.leave import (
    LeaveApplyRequest,
    LeaveStatusUpdate,
    LeaveResponse,
    LeaveEnvelope,
    LeaveReviewEnvelope,
    CenterLeaveListEnvelope,
    EmployeeLeaveListEnvelope,
)
from app.schemas.salary import (
    SalaryPaymentRequest,
    SalaryPaymentResponse,
    SalaryLedgerEntryResponse,
    CenterRevenueResponse,
    DueResponse,
    SalarySheetRow,
    SalarySheetResponse,
)

__all__ = [
    "NotificationOutcome",
    "MessageResponse",
    "LoginRequest",
    "TokenResponse",
    "UserSummary",
    "EmployeeCreate",
    "EmployeeUpdate",
    "EmployeeResponse",
    "EmployeeWithCenterResponse",
    "EmployeeEnvelope",
    "EmployeeListEnvelope",
    "EmployeeDashboardResponse",
    "SalaryHistoryItem",
    "LeaveApplyRequest",
    "LeaveStatusUpdate",
    "LeaveResponse",
    "LeaveEnvelope",
    "LeaveReviewEnvelope",
    "CenterLeaveListEnvelope",
    "EmployeeLeaveListEnvelope",
    "SalaryPaymentRequest",
    "SalaryPaymentResponse",
    "SalaryLedgerEntryResponse",
    "CenterRevenueResponse",
    "DueResponse",
    "SalarySheetRow",
    "SalarySheetResponse",
]
