"""
DiagnoCenter HR - Services Package

Business logic services.
"""

from app.services.auth_service import AuthService
from app.services.employee_service import EmployeeService
from app.services.leave_service import LeaveService
from app.services.salary_service import SalaryService, SalaryPaymentResult, DueSummary
from app.services.revenue_service import CenterRevenueService
from app.services.payment_gateway import PaymentGateway, StripeGateway, ChargeResult, ChargeStatus
from app.services.email_service import EmailService, EmailMessage
from app.services.salary_slip_pdf_service import SalarySlipPDFService, SalarySlipData
from app.services.notification_service import NotificationService

__all__ = [
    "AuthService",
    "EmployeeService",
    "LeaveService",
    "SalaryService",
    "SalaryPaymentResult",
    "DueSummary",
    "CenterRevenueService",
    "PaymentGateway",
    "StripeGateway",
    "ChargeResult",
    "ChargeStatus",
    "EmailService",
    "EmailMessage",
    "SalarySlipPDFService",
    "SalarySlipData",
    "NotificationService",
]
