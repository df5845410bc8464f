"""
Registration API endpoints.

Passenger sign-up and the combined rider + vehicle sign-up.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.dependencies import get_sequence_allocator
from backend.app.db.session import get_db
from backend.app.models.enums import UserRole
from backend.app.schemas.rider import RiderRegister, RiderRegistrationResponse, RiderCarResponse
from backend.app.schemas.user import UserCreate, UserResponse
from backend.app.services import rider_service, user_service
from backend.app.services.audit import log_event, AuditAction
from backend.app.services.sequence_allocator import SequenceAllocator

router = APIRouter(prefix="/register", tags=["Registration"])


@router.post("/user", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_passenger(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
    allocator: SequenceAllocator = Depends(get_sequence_allocator)
):
    """
    Register a passenger.

    Any role in the body is ignored; passengers are always role 0.
    """
    user = await user_service.create_user(
        db,
        allocator,
        name=user_data.name,
        password=user_data.password,
        phone=user_data.phone,
        picture=user_data.picture,
        role=UserRole.PASSENGER,
    )
    await log_event(db, AuditAction.USER_CREATED, user_id=user.id, phone=user.phone)
    return UserResponse.model_validate(user)


@router.post("/rider", response_model=RiderRegistrationResponse, status_code=status.HTTP_201_CREATED)
async def register_rider(
    rider_data: RiderRegister,
    db: AsyncSession = Depends(get_db),
    allocator: SequenceAllocator = Depends(get_sequence_allocator)
):
    """
    Register a rider together with the vehicle they drive.

    The user and the vehicle are written in one transaction.
    """
    user, vehicle = await rider_service.register_rider(
        db,
        allocator,
        name=rider_data.name,
        password=rider_data.password,
        phone=rider_data.phone,
        picture=rider_data.picture,
        plate_number=rider_data.plate_number,
        car_type=rider_data.car_type,
        image_car=rider_data.image_car,
    )
    await log_event(
        db,
        AuditAction.RIDER_REGISTERED,
        user_id=user.id,
        phone=user.phone,
        metadata={"rider_car_id": vehicle.id}
    )
    return RiderRegistrationResponse(
        user=UserResponse.model_validate(user),
        rider_car=RiderCarResponse.model_validate(vehicle)
    )
