"""
User service.

Creation, lookup, partial update and deletion of users, plus the phone
duplicate guard shared with rider registration.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import settings
from backend.app.core.exceptions import ConflictError, InvalidArgumentError, ResourceNotFoundError
from backend.app.core.security import get_password_hash
from backend.app.models.address import Address
from backend.app.models.enums import UserRole
from backend.app.models.rider_vehicle import RiderVehicle
from backend.app.models.user import User
from backend.app.services.sequence_allocator import SequenceAllocator, USER_SEQUENCE, release_connection
from backend.app.services.validation import (
    check_lengths,
    is_blank,
    normalize_role,
    optional_text,
    require_text,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "password", "phone", "picture", "role")


async def find_user_by_phone(db: AsyncSession, phone: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.phone == str(phone)).limit(1))
    return result.scalars().first()


async def ensure_unique_phone(
    db: AsyncSession,
    phone: str,
    exclude_user_id: Optional[str] = None
) -> None:
    """
    Duplicate guard: fail if another user already owns ``phone``.

    The check is not atomic with the following write; the unique index on
    ``users.phone`` catches the race and callers translate that
    IntegrityError into the same ConflictError.

    Raises:
        ConflictError: carrying the existing user's id, name and phone
    """
    existing = await find_user_by_phone(db, phone)
    if existing is not None and existing.id != exclude_user_id:
        raise phone_conflict(existing)


def phone_conflict(existing: User) -> ConflictError:
    return ConflictError(
        "phone already exists",
        existing={"id": existing.id, "name": existing.name, "phone": existing.phone},
    )


async def translate_phone_integrity_error(db: AsyncSession, phone: str) -> Optional[ConflictError]:
    """
    Roll back after an IntegrityError and describe the user owning ``phone``.

    Returns None when nobody owns it, meaning the violation was something
    other than the phone index and the caller should re-raise.
    """
    await db.rollback()
    existing = await find_user_by_phone(db, phone)
    return phone_conflict(existing) if existing is not None else None


def build_user(
    user_id: str,
    name: str,
    password: str,
    phone: str,
    picture: Optional[str],
    role: UserRole
) -> User:
    return User(
        id=user_id,
        name=name,
        hashed_password=get_password_hash(password),
        phone=phone,
        picture=picture,
        role=int(role),
    )


async def create_user(
    db: AsyncSession,
    allocator: SequenceAllocator,
    name: Any,
    password: Any,
    phone: Any,
    picture: Any = None,
    role: Any = None
) -> User:
    """
    Create a user after validation and the phone duplicate guard.

    Raises:
        InvalidArgumentError: blank or over-long fields, or role outside {0, 1}
        ConflictError: phone already registered
        StoreUnavailableError: id allocation failed
    """
    fields = require_text(name=name, password=password, phone=phone)
    picture_url = optional_text(picture)
    check_lengths(User, name=fields["name"], phone=fields["phone"], picture=picture_url)
    user_role = normalize_role(role)

    await ensure_unique_phone(db, fields["phone"])
    await release_connection(db)

    user_id = await allocator.allocate(USER_SEQUENCE)
    user = build_user(
        str(user_id),
        fields["name"],
        str(password),
        fields["phone"],
        picture_url,
        user_role,
    )

    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        conflict = await translate_phone_integrity_error(db, fields["phone"])
        if conflict is None:
            raise
        raise conflict from exc
    await db.refresh(user)

    logger.info("Created user %s with role %s", user.id, user.role)
    return user


async def get_user(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, str(user_id))
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    return user


async def get_user_by_phone(db: AsyncSession, phone: str) -> User:
    user = await find_user_by_phone(db, phone)
    if user is None:
        raise ResourceNotFoundError("User", phone)
    return user


async def list_users(
    db: AsyncSession,
    limit: Any = None,
    start_after: Optional[str] = None
) -> Tuple[List[User], int]:
    """
    Page through users ordered by phone.

    ``start_after`` is a phone cursor: the page begins with the first
    phone strictly greater than it.
    """
    page_size = _page_size(limit)

    query = select(User).order_by(User.phone.asc()).limit(page_size)
    if start_after:
        query = query.where(User.phone > str(start_after))

    result = await db.execute(query)
    users = list(result.scalars().all())
    return users, len(users)


def _page_size(limit: Any) -> int:
    if limit is None or limit == "":
        return settings.default_page_size
    try:
        page_size = int(limit)
    except (TypeError, ValueError):
        raise InvalidArgumentError("limit must be a positive integer", details={"limit": limit})
    if page_size < 1:
        raise InvalidArgumentError("limit must be a positive integer", details={"limit": limit})
    return min(page_size, settings.max_page_size)


async def update_user(db: AsyncSession, user_id: str, patch: Dict[str, Any]) -> User:
    """
    Apply a partial update. Only UPDATABLE_FIELDS are considered; other
    keys are ignored.

    Raises:
        ResourceNotFoundError: no such user
        InvalidArgumentError: blank or over-long fields, or bad role
        ConflictError: phone belongs to another user
    """
    user = await get_user(db, user_id)
    changes = {key: patch[key] for key in UPDATABLE_FIELDS if key in patch}

    for key in ("name", "password", "phone"):
        if key in changes and is_blank(changes[key]):
            raise InvalidArgumentError(f"{key} must not be empty", details={"field": key})
    check_lengths(User, **{
        key: optional_text(changes[key]) for key in ("name", "phone", "picture") if key in changes
    })

    if "role" in changes:
        user.role = int(normalize_role(changes["role"], default=None))
    if "name" in changes:
        user.name = str(changes["name"]).strip()
    if "password" in changes:
        user.hashed_password = get_password_hash(str(changes["password"]))
    if "picture" in changes:
        user.picture = optional_text(changes["picture"])
    if "phone" in changes:
        phone = str(changes["phone"]).strip()
        await ensure_unique_phone(db, phone, exclude_user_id=user.id)
        user.phone = phone

    try:
        await db.commit()
    except IntegrityError as exc:
        conflict = None
        if "phone" in changes:
            conflict = await translate_phone_integrity_error(db, str(changes["phone"]).strip())
        if conflict is None:
            raise
        raise conflict from exc
    await db.refresh(user)

    logger.info("Updated user %s fields %s", user.id, sorted(changes))
    return user


async def delete_user(db: AsyncSession, user_id: str) -> Dict[str, int]:
    """
    Delete a user together with its addresses and rider vehicles.

    Returns:
        Number of dependent rows removed per kind
    """
    user = await get_user(db, user_id)

    addresses = await db.execute(delete(Address).where(Address.user_id == user.id))
    vehicles = await db.execute(delete(RiderVehicle).where(RiderVehicle.user_id == user.id))
    await db.delete(user)
    await db.commit()

    removed = {"addresses": addresses.rowcount or 0, "rider_cars": vehicles.rowcount or 0}
    logger.info("Deleted user %s (cascade: %s)", user_id, removed)
    return removed
