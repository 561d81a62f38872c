"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass plain fakes
    - Async in Protocol: implementations do IO (file writes, simulated latency)
"""

from collections.abc import Mapping
from typing import Protocol

from stockswap.core.domain_types import Record


class PersistenceSink(Protocol):
    """Contract for durably writing the whole record store."""
    def load(self) -> dict[str, Record]: ...
    async def save(self, records: Mapping[str, Record]) -> None: ...


class DatabaseClient(Protocol):
    """Capabilities of the simulated database."""
    async def init_client(self) -> None: ...
    async def modify_index_triggers(self) -> None: ...
    async def update_indexes(self) -> None: ...
    async def vacuum_database(self) -> None: ...
    async def check_for_deadlocks(self) -> None: ...
    async def stop_hung_queries(self) -> None: ...


class QueueClient(Protocol):
    """Capabilities of the simulated message queue."""
    async def init_client(self) -> None: ...
    async def clean_topic(self, topic: str) -> None: ...
    async def validate_cleaned(self) -> None: ...
    async def cleanup_topics(self) -> None: ...
    async def stop_consumers(self) -> None: ...


class ObjectStoreClient(Protocol):
    """Capabilities of the simulated object store."""
    async def init_client(self) -> None: ...
    async def move_large_blobs_to_glacier(self) -> None: ...
    async def clean_up_old_blobs(self) -> None: ...
    async def stop_hung_uploads(self) -> None: ...
