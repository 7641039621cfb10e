"""
DiagnoCenter HR - Common Schemas

Shared response pieces.
"""

from typing import Optional

from pydantic import BaseModel


class NotificationOutcome(BaseModel):
    """Result of a best-effort email notification."""
    delivered: bool
    recipient: Optional[str] = None
    error: Optional[str] = None


class MessageResponse(BaseModel):
    """Plain success envelope."""
    success: bool = True
    message: str
