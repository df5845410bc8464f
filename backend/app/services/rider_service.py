"""
Rider service.

Rider vehicles and the composite rider registration (user + vehicle).
"""

import logging
from typing import Any, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.models.enums import UserRole
from backend.app.models.rider_vehicle import RiderVehicle
from backend.app.models.user import User
from backend.app.services.sequence_allocator import (
    SequenceAllocator,
    USER_SEQUENCE,
    RIDER_SEQUENCE,
    release_connection,
)
from backend.app.services.user_service import (
    build_user,
    ensure_unique_phone,
    translate_phone_integrity_error,
)
from backend.app.services.validation import check_lengths, optional_text, require_text

logger = logging.getLogger(__name__)


async def create_rider_vehicle(
    db: AsyncSession,
    allocator: SequenceAllocator,
    user_id: Any,
    plate_number: Any,
    car_type: Any,
    image_car: Any = None
) -> RiderVehicle:
    """
    Register a vehicle for an existing user.

    Raises:
        InvalidArgumentError: blank or over-long user_id/plate_number/car_type
        ResourceNotFoundError: the user does not exist
    """
    fields = require_text(user_id=user_id, plate_number=plate_number, car_type=car_type)
    car_image = optional_text(image_car)
    check_lengths(
        RiderVehicle, plate_number=fields["plate_number"], car_type=fields["car_type"], image_car=car_image
    )

    if await db.get(User, fields["user_id"]) is None:
        raise ResourceNotFoundError("User", fields["user_id"])
    await release_connection(db)

    vehicle_id = await allocator.allocate(RIDER_SEQUENCE)
    vehicle = RiderVehicle(
        id=str(vehicle_id),
        user_id=fields["user_id"],
        plate_number=fields["plate_number"],
        car_type=fields["car_type"],
        image_car=car_image,
    )

    db.add(vehicle)
    await db.commit()
    await db.refresh(vehicle)

    logger.info("Created rider car %s for user %s", vehicle.id, vehicle.user_id)
    return vehicle


async def register_rider(
    db: AsyncSession,
    allocator: SequenceAllocator,
    name: Any,
    password: Any,
    phone: Any,
    plate_number: Any,
    car_type: Any,
    picture: Any = None,
    image_car: Any = None
) -> Tuple[User, RiderVehicle]:
    """
    Create a rider (role 1) and its vehicle in one transaction.

    Every field is validated and both ids are allocated before anything is
    written, so a failure leaves neither record behind. Ids allocated for
    a failed registration are simply skipped.

    Raises:
        InvalidArgumentError: any required user or vehicle field is blank or too long
        ConflictError: phone already registered
        StoreUnavailableError: id allocation failed
    """
    user_fields = require_text(name=name, password=password, phone=phone)
    car_fields = require_text(plate_number=plate_number, car_type=car_type)
    picture_url = optional_text(picture)
    car_image = optional_text(image_car)
    check_lengths(User, name=user_fields["name"], phone=user_fields["phone"], picture=picture_url)
    check_lengths(
        RiderVehicle, plate_number=car_fields["plate_number"], car_type=car_fields["car_type"], image_car=car_image
    )

    await ensure_unique_phone(db, user_fields["phone"])
    await release_connection(db)

    user_id = str(await allocator.allocate(USER_SEQUENCE))
    vehicle_id = str(await allocator.allocate(RIDER_SEQUENCE))

    user = build_user(
        user_id,
        user_fields["name"],
        str(password),
        user_fields["phone"],
        picture_url,
        UserRole.RIDER,
    )
    vehicle = RiderVehicle(
        id=vehicle_id,
        user_id=user_id,
        plate_number=car_fields["plate_number"],
        car_type=car_fields["car_type"],
        image_car=car_image,
    )

    db.add(user)
    try:
        # user row must exist before the vehicle's foreign key is checked
        await db.flush()
        db.add(vehicle)
        await db.commit()
    except IntegrityError as exc:
        conflict = await translate_phone_integrity_error(db, user_fields["phone"])
        if conflict is None:
            raise
        raise conflict from exc

    await db.refresh(user)
    await db.refresh(vehicle)

    logger.info("Registered rider %s with car %s", user.id, vehicle.id)
    return user, vehicle
