"""
DiagnoCenter HR - FastAPI Dependencies

Shared dependencies for authentication, database sessions, RBAC and the
external collaborators of the HR services.

This module provides dependency injection for:
1. Database sessions
2. Current user authentication
3. Role-based access control
4. Payment gateway, notifications and clock
"""

import uuid
from typing import List, Optional

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.models.user import User, UserRole
from app.services.leave_service import LeaveService
from app.services.notification_service import NotificationService, get_notification_service
from app.services.payment_gateway import PaymentGateway, get_payment_gateway
from app.services.salary_service import SalaryService
from app.utils.clock import Clock, SystemClock
from app.utils.security import verify_access_token


# HTTP Bearer token security
security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """
    Get the current authenticated user from JWT token.

    Token can be provided via:
    1. Authorization: Bearer <token> header
    2. access_token cookie

    Raises:
        HTTPException: If token is invalid or user not found
    """
    if credentials:
        token = credentials.credentials
    else:
        token = request.cookies.get("access_token")
        if token and token.startswith("Bearer "):
            token = token[7:]

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = verify_access_token(token)

    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_uuid = uuid.UUID(user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user ID in token",
        )

    user = await db.get(User, user_uuid)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is deactivated",
        )

    return user


def require_role(allowed_roles: List[UserRole]):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/admin-only")
        async def admin_endpoint(user: User = Depends(require_role([UserRole.CENTER_ADMIN]))):
            ...
    """
    async def role_checker(
        current_user: User = Depends(get_current_user),
    ) -> User:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {[r.value for r in allowed_roles]}",
            )
        return current_user

    return role_checker


def require_center_admin():
    """Center administrators with a center assigned."""
    async def checker(
        current_user: User = Depends(require_role([UserRole.CENTER_ADMIN])),
    ) -> User:
        if not current_user.center_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No diagnostic center assigned to this account",
            )
        return current_user

    return checker


def require_super_admin():
    return require_role([UserRole.SUPER_ADMIN])


def require_employee():
    """Employee accounts linked to an employee record."""
    async def checker(
        current_user: User = Depends(require_role([UserRole.EMPLOYEE])),
    ) -> User:
        if not current_user.employee_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is not linked to an employee record",
            )
        return current_user

    return checker


def ensure_own_employee(current_user: User, employee_id: uuid.UUID) -> None:
    """Employees may only read their own records."""
    if current_user.employee_id != employee_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own records",
        )


# ===========================================
# COLLABORATORS
# ===========================================

def get_clock() -> Clock:
    return SystemClock()


def get_gateway() -> PaymentGateway:
    return get_payment_gateway()


def get_notifier() -> NotificationService:
    return get_notification_service()


async def get_salary_service(
    db: AsyncSession = Depends(get_async_session),
    gateway: PaymentGateway = Depends(get_gateway),
    notifier: NotificationService = Depends(get_notifier),
    clock: Clock = Depends(get_clock),
) -> SalaryService:
    return SalaryService(db, gateway, notifier, clock)


async def get_leave_service(
    db: AsyncSession = Depends(get_async_session),
    notifier: NotificationService = Depends(get_notifier),
    clock: Clock = Depends(get_clock),
) -> LeaveService:
    return LeaveService(db, notifier, clock)
