"""
Address service.

Addresses always belong to an existing user.
"""

import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.models.address import Address
from backend.app.models.user import User
from backend.app.services.sequence_allocator import SequenceAllocator, ADDRESS_SEQUENCE, release_connection
from backend.app.services.validation import check_lengths, optional_float, require_text

logger = logging.getLogger(__name__)


async def create_address(
    db: AsyncSession,
    allocator: SequenceAllocator,
    user_id: Any,
    address: Any,
    lat: Any = None,
    lng: Any = None
) -> Address:
    """
    Create an address for ``user_id``.

    Raises:
        InvalidArgumentError: blank or over-long address, blank user_id or non-numeric lat/lng
        ResourceNotFoundError: the user does not exist
    """
    fields = require_text(user_id=user_id, address=address)
    check_lengths(Address, address=fields["address"])
    latitude = optional_float("lat", lat)
    longitude = optional_float("lng", lng)

    if await db.get(User, fields["user_id"]) is None:
        raise ResourceNotFoundError("User", fields["user_id"])
    await release_connection(db)

    address_id = await allocator.allocate(ADDRESS_SEQUENCE)
    record = Address(
        id=str(address_id),
        user_id=fields["user_id"],
        address=fields["address"],
        lat=latitude,
        lng=longitude,
    )

    db.add(record)
    await db.commit()
    await db.refresh(record)

    logger.info("Created address %s for user %s", record.id, record.user_id)
    return record


async def list_addresses(
    db: AsyncSession,
    user_id: Optional[str] = None
) -> Tuple[List[Address], int]:
    """List addresses, optionally only those of ``user_id``, oldest first."""
    # ids are decimal strings; order by length first to keep numeric order
    query = select(Address).order_by(func.length(Address.id), Address.id)
    if user_id:
        query = query.where(Address.user_id == str(user_id))

    result = await db.execute(query)
    addresses = list(result.scalars().all())
    return addresses, len(addresses)
