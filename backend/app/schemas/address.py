"""
Address Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List, Union


class AddressFields(BaseModel):
    """Fields shared by both address creation routes."""
    address: Optional[str] = Field(None, description="Free-text address")
    lat: Optional[Union[float, str]] = Field(None, description="Latitude")
    lng: Optional[Union[float, str]] = Field(None, description="Longitude")


class AddressCreate(AddressFields):
    """Schema for POST /addresses."""
    user_id: Optional[Union[str, int]] = Field(None, description="Owning user ID")


class AddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    address: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    created_at: Optional[datetime] = None


class AddressListResponse(BaseModel):
    items: List[AddressResponse]
    count: int
