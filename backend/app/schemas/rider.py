"""
Rider registration Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, Union

from backend.app.schemas.user import UserResponse


class RiderRegister(BaseModel):
    """
    Schema for POST /register/rider.

    Carries both the user fields and the vehicle fields; role is always 1.
    """
    name: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[Union[str, int]] = None
    picture: Optional[str] = None
    plate_number: Optional[str] = Field(None, description="Licence plate")
    car_type: Optional[str] = Field(None, description="e.g. Sedan, Motorbike")
    image_car: Optional[str] = Field(None, description="Vehicle picture URL")


class RiderCarResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    plate_number: str
    car_type: str
    image_car: Optional[str] = None
    created_at: Optional[datetime] = None


class RiderRegistrationResponse(BaseModel):
    user: UserResponse
    rider_car: RiderCarResponse
