"""
DiagnoCenter HR - Authentication Schemas

Pydantic schemas for authentication requests and responses.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Schema for login request."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserSummary(BaseModel):
    """Authenticated account details."""
    id: UUID
    name: str
    email: EmailStr
    role: str
    center_id: Optional[UUID] = None
    employee_id: Optional[UUID] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """Schema for token response."""
    success: bool = True
    message: str = "Login successful"
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserSummary
