"""
DiagnoCenter HR - Authentication Router

API endpoints for user authentication.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.auth import LoginRequest, TokenResponse, UserSummary
from app.services.auth_service import AuthService


router = APIRouter()


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login",
    description="Exchange email and password for a bearer token.",
)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_async_session),
):
    service = AuthService(db)
    user, token = await service.login(request.email, request.password)
    return TokenResponse(
        access_token=token,
        expires_in=service.token_lifetime_seconds(),
        user=UserSummary.model_validate(user),
    )


@router.get(
    "/me",
    response_model=UserSummary,
    summary="Current user",
)
async def me(current_user: User = Depends(get_current_user)):
    return UserSummary.model_validate(current_user)
