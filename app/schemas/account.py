"""
Pydantic schemas for Account authentication.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from app.models.account import AccountRole


class LoginRequest(BaseModel):
    """Request schema for login. `username` accepts a username or an email."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AccountResponse(BaseModel):
    """Account profile response (no sensitive data)."""
    id: int
    username: str
    email: str
    role: AccountRole
    is_active: bool
    person_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    account: AccountResponse
