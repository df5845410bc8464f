"""
Sequence allocator tests.

Covers lazy counter creation, per-name independence, concurrent callers
and bounded retries.
"""

import asyncio

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from backend.app.core.exceptions import InvalidArgumentError, StoreUnavailableError
from backend.app.db.session import Base
from backend.app.models.sequence_counter import SequenceCounter
from backend.app.services import address_service, rider_service, user_service
from backend.app.services.sequence_allocator import SequenceAllocator, USER_SEQUENCE, ADDRESS_SEQUENCE, RIDER_SEQUENCE


def _locked():
    return OperationalError("UPDATE sequence_counters", {}, Exception("database is locked"))


@pytest.fixture
async def file_session_factory(tmp_path):
    """
    File-backed SQLite with one connection per session, so concurrent
    allocations really contend on the database lock.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'sequences.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def single_connection_factory(tmp_path):
    """File-backed SQLite behind a pool of exactly one connection."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'single.db'}",
        poolclass=AsyncAdaptedQueuePool,
        pool_size=1,
        max_overflow=0,
        pool_timeout=0.5,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.mark.asyncio
async def test_first_allocation_creates_counter(allocator, db_session):
    assert await allocator.current(USER_SEQUENCE) == 0

    assert await allocator.allocate(USER_SEQUENCE) == 1

    counter = await db_session.get(SequenceCounter, USER_SEQUENCE)
    assert counter is not None
    assert counter.value == 1


@pytest.mark.asyncio
async def test_allocations_increase_by_one(allocator):
    values = [await allocator.allocate(USER_SEQUENCE) for _ in range(5)]

    assert values == [1, 2, 3, 4, 5]
    assert await allocator.current(USER_SEQUENCE) == 5


@pytest.mark.asyncio
async def test_sequences_are_independent(allocator):
    await allocator.allocate(USER_SEQUENCE)
    await allocator.allocate(USER_SEQUENCE)

    assert await allocator.allocate(ADDRESS_SEQUENCE) == 1
    assert await allocator.allocate(USER_SEQUENCE) == 3


@pytest.mark.asyncio
async def test_empty_sequence_name_rejected(allocator):
    with pytest.raises(InvalidArgumentError):
        await allocator.allocate("")


@pytest.mark.asyncio
async def test_concurrent_allocations_are_distinct(file_session_factory):
    """N concurrent callers get exactly 1..N, no duplicates."""
    allocator = SequenceAllocator(file_session_factory, max_attempts=10, backoff_seconds=0.01)
    callers = 10

    values = await asyncio.gather(*(allocator.allocate(USER_SEQUENCE) for _ in range(callers)))

    assert sorted(values) == list(range(1, callers + 1))
    assert await allocator.current(USER_SEQUENCE) == callers


@pytest.mark.asyncio
async def test_concurrent_allocations_on_existing_counter(file_session_factory):
    allocator = SequenceAllocator(file_session_factory, max_attempts=10, backoff_seconds=0.01)
    assert await allocator.allocate(USER_SEQUENCE) == 1

    values = await asyncio.gather(*(allocator.allocate(USER_SEQUENCE) for _ in range(8)))

    assert sorted(values) == list(range(2, 10))


@pytest.mark.asyncio
async def test_retries_exhausted_raise_store_unavailable(allocator, mocker):
    increment = mocker.patch.object(allocator, "_increment", side_effect=_locked())

    with pytest.raises(StoreUnavailableError) as exc_info:
        await allocator.allocate(USER_SEQUENCE)

    assert increment.call_count == allocator.max_attempts
    assert exc_info.value.status_code == 503
    assert exc_info.value.details["sequence"] == USER_SEQUENCE


@pytest.mark.asyncio
async def test_transient_failure_is_retried(allocator, mocker):
    increment = mocker.patch.object(allocator, "_increment", side_effect=[_locked(), 7])

    assert await allocator.allocate(USER_SEQUENCE) == 7
    assert increment.call_count == 2


@pytest.mark.asyncio
async def test_exhausted_pool_raises_store_unavailable(single_connection_factory):
    allocator = SequenceAllocator(single_connection_factory, max_attempts=2, backoff_seconds=0)

    async with single_connection_factory() as holder:
        # keeps the only pooled connection checked out
        await holder.execute(text("SELECT 1"))

        with pytest.raises(StoreUnavailableError) as exc_info:
            await allocator.allocate(USER_SEQUENCE)

    assert exc_info.value.details["attempts"] == 2


@pytest.mark.asyncio
async def test_entity_creation_needs_only_one_connection(single_connection_factory):
    """The request session gives its connection back before ids are allocated."""
    allocator = SequenceAllocator(single_connection_factory, max_attempts=2, backoff_seconds=0)

    async with single_connection_factory() as db:
        user = await user_service.create_user(db, allocator, name="A", password="x", phone="1")
        address = await address_service.create_address(db, allocator, user_id=user.id, address="Home")
        rider, car = await rider_service.register_rider(
            db, allocator, name="R", password="y", phone="2", plate_number="P-1", car_type="Van"
        )
        extra_car = await rider_service.create_rider_vehicle(
            db, allocator, user_id=user.id, plate_number="P-2", car_type="Bike"
        )

    assert (user.id, rider.id) == ("1", "2")
    assert address.id == "1"
    assert (car.id, extra_car.id) == ("1", "2")
    assert await allocator.current(RIDER_SEQUENCE) == 2
