"""
DiagnoCenter HR - Authentication Service

Business logic for account login.
"""

import logging
import uuid
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import User
from app.utils.error_handling import AuthenticationException, AuthorizationException
from app.utils.security import create_access_token, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email address."""
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Get user by ID."""
        return await self.db.get(User, user_id)

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns:
            User if authentication successful, None otherwise
        """
        user = await self.get_user_by_email(email)

        if not user:
            return None

        if not verify_password(password, user.hashed_password):
            return None

        return user

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate and issue an access token whose subject is the user id.

        Raises:
            AuthenticationException: wrong email or password
            AuthorizationException: account deactivated
        """
        user = await self.authenticate_user(email, password)
        if not user:
            logger.info("Failed login attempt")
            raise AuthenticationException("Invalid email or password")

        if not user.is_active:
            raise AuthorizationException("User account is deactivated")

        token = create_access_token({
            "sub": str(user.id),
            "role": user.role.value,
            "center_id": str(user.center_id) if user.center_id else None,
        })
        logger.info(f"User {user.id} logged in ({user.role.value})")
        return user, token

    @staticmethod
    def token_lifetime_seconds() -> int:
        return settings.access_token_expire_minutes * 60
