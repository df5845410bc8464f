"""
Service-level tests for user creation and the phone duplicate guard.
"""

import pytest
from sqlalchemy import select, func

from backend.app.core.exceptions import ConflictError, InvalidArgumentError, ResourceNotFoundError
from backend.app.core.security import verify_password
from backend.app.models.enums import UserRole
from backend.app.models.user import User
from backend.app.services import user_service


@pytest.mark.asyncio
async def test_create_user_defaults_to_passenger(db_session, allocator):
    user = await user_service.create_user(db_session, allocator, name="A", password="x", phone="1")

    assert user.id == "1"
    assert user.role == UserRole.PASSENGER
    assert user.phone == "1"


@pytest.mark.asyncio
async def test_create_user_hashes_password(db_session, allocator):
    user = await user_service.create_user(db_session, allocator, name="A", password="x", phone="1")

    assert user.hashed_password != "x"
    assert verify_password("x", user.hashed_password)


@pytest.mark.asyncio
async def test_create_user_rejects_role_outside_set(db_session, allocator):
    with pytest.raises(InvalidArgumentError):
        await user_service.create_user(db_session, allocator, name="A", password="x", phone="1", role=2)

    # nothing allocated for a rejected request
    assert await allocator.current("user_seq") == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("role, expected", [("1", UserRole.RIDER), (0, UserRole.PASSENGER), (1.0, UserRole.RIDER)])
async def test_create_user_normalizes_role(db_session, allocator, role, expected):
    user = await user_service.create_user(db_session, allocator, name="A", password="x", phone="1", role=role)

    assert user.role == expected


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["name", "password", "phone"])
async def test_create_user_requires_fields(db_session, allocator, missing):
    fields = {"name": "A", "password": "x", "phone": "1"}
    fields[missing] = ""

    with pytest.raises(InvalidArgumentError) as exc_info:
        await user_service.create_user(db_session, allocator, **fields)

    assert exc_info.value.details["missing"] == [missing]


@pytest.mark.asyncio
async def test_duplicate_phone_conflict_carries_existing(db_session, allocator):
    first = await user_service.create_user(
        db_session, allocator, name="Somchai", password="x", phone="0800000001"
    )

    with pytest.raises(ConflictError) as exc_info:
        await user_service.create_user(
            db_session, allocator, name="Other", password="y", phone="0800000001"
        )

    assert exc_info.value.details["existing"] == {
        "id": first.id, "name": "Somchai", "phone": "0800000001"
    }
    count = await db_session.scalar(select(func.count(User.id)))
    assert count == 1


@pytest.mark.asyncio
async def test_numeric_phone_is_stored_as_string(db_session, allocator):
    await user_service.create_user(db_session, allocator, name="A", password="x", phone=812345678)

    user = await user_service.get_user_by_phone(db_session, "812345678")
    assert user.phone == "812345678"


@pytest.mark.asyncio
async def test_guard_allows_own_phone(db_session, allocator):
    user = await user_service.create_user(db_session, allocator, name="A", password="x", phone="1")

    await user_service.ensure_unique_phone(db_session, "1", exclude_user_id=user.id)


@pytest.mark.asyncio
async def test_unique_index_backs_the_guard(db_session, allocator, mocker):
    """A phone that slips past the guard still ends up as a Conflict."""
    await user_service.create_user(db_session, allocator, name="A", password="x", phone="1")
    mocker.patch.object(user_service, "ensure_unique_phone", return_value=None)

    with pytest.raises(ConflictError) as exc_info:
        await user_service.create_user(db_session, allocator, name="B", password="y", phone="1")

    assert exc_info.value.details["existing"]["name"] == "A"


@pytest.mark.asyncio
async def test_delete_missing_user(db_session):
    with pytest.raises(ResourceNotFoundError):
        await user_service.delete_user(db_session, "404")
