"""
User Pydantic schemas.

Request bodies are deliberately loose (phone may arrive as a number, role
as a string); the services normalize and reject bad values with 400.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List, Union


class UserCreate(BaseModel):
    """Schema for POST /users and POST /register/user."""
    name: Optional[str] = Field(None, description="Display name")
    password: Optional[str] = Field(None, description="Plain password, stored hashed")
    phone: Optional[Union[str, int]] = Field(None, description="Unique phone number")
    picture: Optional[str] = Field(None, description="Picture URL")
    role: Optional[Union[int, str]] = Field(None, description="0 = passenger (default), 1 = rider")


class UserUpdate(BaseModel):
    """
    Schema for PATCH /users/{id}.

    Only keys present in the body are applied; unknown keys are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[Union[str, int]] = None
    picture: Optional[str] = None
    role: Optional[Union[int, str]] = None


class UserResponse(BaseModel):
    """User as returned by the API. The password hash is never included."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    phone: str
    picture: Optional[str] = None
    role: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserListResponse(BaseModel):
    """Schema for a page of users."""
    items: List[UserResponse]
    count: int


class DeleteResponse(BaseModel):
    ok: bool = True
    removed: dict = Field(default_factory=dict, description="Dependent rows removed with the user")
