"""
DiagnoCenter HR - SQLAlchemy Models Package

This package contains all database models for the application.
"""

from app.models.base import BaseModel, TimestampMixin, AuditMixin
from app.models.center import DiagnosticCenter
from app.models.user import User, UserRole
from app.models.employee import Employee, EmployeeStatus
from app.models.leave import EmployeeLeave, LeaveType, LeaveStatus
from app.models.salary import SalaryLedgerEntry, SalaryPaymentStatus
from app.models.revenue import CenterRevenue

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "AuditMixin",
    "DiagnosticCenter",
    "User",
    "UserRole",
    "Employee",
    "EmployeeStatus",
    "EmployeeLeave",
    "LeaveType",
    "LeaveStatus",
    "SalaryLedgerEntry",
    "SalaryPaymentStatus",
    "CenterRevenue",
]
