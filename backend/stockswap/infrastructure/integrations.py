"""Simulated External Systems — database, message queue and object store stubs.

Invariants:
    - Every operation awaits a fixed latency (ms) multiplied by delay_scale
    - check_for_deadlocks raises DeadlockDetectedError with probability
      deadlock_probability, after its latency elapses
    - No operation retries; failures propagate to the caller

Design Decisions:
    - Injectable random.Random: tests force or suppress the deadlock
    - delay_scale=0 makes every step immediate for tests and dry runs
"""

import asyncio
import logging
import random

from stockswap.core.errors import DeadlockDetectedError

logger = logging.getLogger(__name__)


class _SimulatedSystem:
    """Shared latency handling for the simulated clients."""

    def __init__(self, delay_scale: float = 1.0):
        self.delay_scale = delay_scale

    async def _sleep(self, delay_ms: int) -> None:
        await asyncio.sleep(max(delay_ms / 1000 * self.delay_scale, 0))

    async def init_client(self) -> None:
        await self._sleep(1000)


class SimulatedDatabase(_SimulatedSystem):
    """Database maintenance operations."""

    def __init__(
        self,
        delay_scale: float = 1.0,
        deadlock_probability: float = 1 / 3,
        rng: random.Random | None = None,
    ):
        super().__init__(delay_scale)
        self.deadlock_probability = deadlock_probability
        self.rng = rng or random.Random()

    async def modify_index_triggers(self) -> None:
        await self._sleep(5000)

    async def update_indexes(self) -> None:
        await self._sleep(8000)

    async def stop_hung_queries(self) -> None:
        await self._sleep(8000)

    async def check_for_deadlocks(self) -> None:
        await self._sleep(4000)
        if self.rng.random() < self.deadlock_probability:
            logger.warning("Deadlock detected", extra={"system": "database"})
            raise DeadlockDetectedError()

    async def vacuum_database(self) -> None:
        await self._sleep(3000)


class SimulatedQueue(_SimulatedSystem):
    """Kafka topic maintenance operations."""

    async def clean_topic(self, topic: str) -> None:
        logger.info(f"Cleaning topic: {topic}", extra={"system": "kafka"})
        await self._sleep(2000)

    async def validate_cleaned(self) -> None:
        await self._sleep(8000)

    async def cleanup_topics(self) -> None:
        await self._sleep(1000)

    async def stop_consumers(self) -> None:
        await self._sleep(2000)


class SimulatedObjectStore(_SimulatedSystem):
    """S3 blob maintenance operations."""

    async def move_large_blobs_to_glacier(self) -> None:
        await self._sleep(8000)

    async def clean_up_old_blobs(self) -> None:
        await self._sleep(10000)

    async def stop_hung_uploads(self) -> None:
        await self._sleep(8000)
