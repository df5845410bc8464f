"""
Sequence allocation service.

Issues strictly increasing integer ids per named sequence. Each sequence is
one row in ``sequence_counters``; the increment is a single atomic
``UPDATE ... SET value = value + 1 RETURNING value`` so concurrent callers,
even in separate processes, serialize on the row lock and never observe
the same value.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy import update, insert
from sqlalchemy.exc import DBAPIError, TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.core.config import settings
from backend.app.core.exceptions import InvalidArgumentError, StoreUnavailableError
from backend.app.models.sequence_counter import SequenceCounter

logger = logging.getLogger(__name__)

USER_SEQUENCE = "user_seq"
ADDRESS_SEQUENCE = "address_seq"
RIDER_SEQUENCE = "rider_seq"


class SequenceAllocator:
    """
    Allocates ids from named counters.

    Every allocation runs in its own short transaction, separate from any
    request session, and commits before the value is returned. A value
    handed to a caller that later fails is never reissued (gaps are fine,
    duplicates are not).
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        max_attempts: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
    ):
        self.session_factory = session_factory
        self.max_attempts = max_attempts or settings.sequence_max_attempts
        self.backoff_seconds = (
            settings.sequence_retry_backoff_seconds if backoff_seconds is None else backoff_seconds
        )

    async def allocate(self, sequence_name: str) -> int:
        """
        Allocate the next value of ``sequence_name``.

        Raises:
            InvalidArgumentError: empty sequence name
            StoreUnavailableError: every attempt failed at the store
        """
        if not sequence_name:
            raise InvalidArgumentError("sequence name is required")

        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                async with self.session_factory() as session:
                    async with session.begin():
                        value = await self._increment(session, sequence_name)
                return value
            except (DBAPIError, PoolTimeoutError, OSError) as exc:
                # Lock timeouts, serialization failures, a lost race creating
                # the row, an exhausted pool or a refused connection.
                last_error = exc
                logger.warning(
                    "Sequence %s allocation attempt %d/%d failed: %s",
                    sequence_name, attempt, self.max_attempts, exc.__class__.__name__,
                )
                if attempt < self.max_attempts and self.backoff_seconds:
                    await asyncio.sleep(self.backoff_seconds * attempt)

        logger.error("Sequence %s allocation gave up after %d attempts", sequence_name, self.max_attempts)
        raise StoreUnavailableError(
            message=f"Could not allocate a value from sequence {sequence_name}",
            details={"sequence": sequence_name, "attempts": self.max_attempts, "cause": str(last_error)},
        )

    async def _increment(self, session: AsyncSession, sequence_name: str) -> int:
        result = await session.execute(
            update(SequenceCounter)
            .where(SequenceCounter.name == sequence_name)
            .values(value=SequenceCounter.value + 1)
            .returning(SequenceCounter.value)
            .execution_options(synchronize_session=False)
        )
        value = result.scalar_one_or_none()
        if value is not None:
            return int(value)

        # First allocation for this name. A concurrent creator makes this
        # insert fail with IntegrityError, and the retry takes the update path.
        await session.execute(
            insert(SequenceCounter).values(name=sequence_name, value=1)
        )
        return 1

    async def current(self, sequence_name: str) -> int:
        """Last value issued for ``sequence_name`` (0 if never used)."""
        async with self.session_factory() as session:
            counter = await session.get(SequenceCounter, sequence_name)
            return int(counter.value) if counter else 0


async def release_connection(db: AsyncSession) -> None:
    """
    End the read transaction of a request session before allocating.

    The allocator checks out its own pooled connection; a request still
    holding one while it waits could exhaust the pool under load.
    """
    if db.in_transaction():
        await db.commit()
