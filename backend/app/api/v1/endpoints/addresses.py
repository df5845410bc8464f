"""
Address API endpoints.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.dependencies import get_sequence_allocator
from backend.app.db.session import get_db
from backend.app.schemas.address import AddressCreate, AddressResponse, AddressListResponse
from backend.app.services import address_service
from backend.app.services.audit import log_event, AuditAction
from backend.app.services.sequence_allocator import SequenceAllocator

router = APIRouter(prefix="/addresses", tags=["Addresses"])


@router.post("", response_model=AddressResponse, status_code=status.HTTP_201_CREATED)
async def create_address(
    address_data: AddressCreate,
    db: AsyncSession = Depends(get_db),
    allocator: SequenceAllocator = Depends(get_sequence_allocator)
):
    """
    Create an address.

    Returns 404 if ``user_id`` does not name an existing user.
    """
    address = await address_service.create_address(
        db,
        allocator,
        user_id=address_data.user_id,
        address=address_data.address,
        lat=address_data.lat,
        lng=address_data.lng,
    )
    await log_event(db, AuditAction.ADDRESS_CREATED, user_id=address.user_id, metadata={"address_id": address.id})
    return AddressResponse.model_validate(address)


@router.get("", response_model=AddressListResponse)
async def list_addresses(
    user_id: Optional[str] = Query(None, description="Only addresses of this user"),
    db: AsyncSession = Depends(get_db)
):
    addresses, count = await address_service.list_addresses(db, user_id=user_id)
    return AddressListResponse(
        items=[AddressResponse.model_validate(address) for address in addresses],
        count=count
    )
