"""
DiagnoCenter HR - Routers Package

FastAPI route handlers.

Routers:
- auth: Login and current account
- employees: Employee records and dashboard
- salary: Salary payments, due queries, salary sheet
- leaves: Leave requests and review
"""

from app.routers import auth, employees, salary, leaves

__all__ = ["auth", "employees", "salary", "leaves"]
