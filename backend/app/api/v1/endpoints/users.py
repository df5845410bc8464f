"""
User API endpoints.

Create, list, fetch, partially update and delete users.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.dependencies import get_sequence_allocator
from backend.app.db.session import get_db
from backend.app.schemas.address import AddressFields, AddressResponse
from backend.app.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserListResponse,
    DeleteResponse,
)
from backend.app.services import address_service, user_service
from backend.app.services.audit import log_event, AuditAction
from backend.app.services.sequence_allocator import SequenceAllocator

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
    allocator: SequenceAllocator = Depends(get_sequence_allocator)
):
    """
    Create a user.

    Role defaults to 0 (passenger). Returns 409 if the phone is taken.
    """
    user = await user_service.create_user(
        db,
        allocator,
        name=user_data.name,
        password=user_data.password,
        phone=user_data.phone,
        picture=user_data.picture,
        role=user_data.role,
    )
    await log_event(db, AuditAction.USER_CREATED, user_id=user.id, phone=user.phone)
    return UserResponse.model_validate(user)


@router.get("", response_model=UserListResponse)
async def list_users(
    limit: Optional[str] = Query(None, description="Page size"),
    start_after: Optional[str] = Query(None, alias="startAfter", description="Phone cursor"),
    db: AsyncSession = Depends(get_db)
):
    """List users ordered by phone, paged with ``limit`` and ``startAfter``."""
    users, count = await user_service.list_users(db, limit=limit, start_after=start_after)
    return UserListResponse(
        items=[UserResponse.model_validate(user) for user in users],
        count=count
    )


@router.get("/by-phone/{phone}", response_model=UserResponse)
async def get_user_by_phone(phone: str, db: AsyncSession = Depends(get_db)):
    user = await user_service.get_user_by_phone(db, phone)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)):
    user = await user_service.get_user(db, user_id)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    patch: UserUpdate,
    db: AsyncSession = Depends(get_db)
):
    """
    Partially update a user.

    Allowed fields: name, password, phone, picture, role.
    """
    changes = patch.model_dump(exclude_unset=True)
    user = await user_service.update_user(db, user_id, changes)
    await log_event(
        db,
        AuditAction.USER_UPDATED,
        user_id=user.id,
        phone=user.phone,
        metadata={"fields": sorted(changes)}
    )
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=DeleteResponse)
async def delete_user(user_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a user along with its addresses and rider car."""
    removed = await user_service.delete_user(db, user_id)
    await log_event(db, AuditAction.USER_DELETED, user_id=user_id, metadata=removed)
    return DeleteResponse(ok=True, removed=removed)


@router.post("/{user_id}/addresses", response_model=AddressResponse, status_code=status.HTTP_201_CREATED)
async def create_user_address(
    user_id: str,
    address_data: AddressFields,
    db: AsyncSession = Depends(get_db),
    allocator: SequenceAllocator = Depends(get_sequence_allocator)
):
    """Create an address for the user in the path."""
    address = await address_service.create_address(
        db,
        allocator,
        user_id=user_id,
        address=address_data.address,
        lat=address_data.lat,
        lng=address_data.lng,
    )
    await log_event(db, AuditAction.ADDRESS_CREATED, user_id=address.user_id, metadata={"address_id": address.id})
    return AddressResponse.model_validate(address)
