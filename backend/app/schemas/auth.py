"""
Authentication Pydantic schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional, Union


class LoginRequest(BaseModel):
    """Schema for POST /login."""
    phone: Optional[Union[str, int]] = Field(None, description="Registered phone number")
    password: Optional[str] = Field(None, description="Password")


class LoginResponse(BaseModel):
    """
    Returned by a successful login.

    Identifies the user without exposing the password.
    """
    id: str
    name: str
    phone: str
    role: int
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class LogoutResponse(BaseModel):
    ok: bool = True
