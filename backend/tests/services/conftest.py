"""Service test fixtures — record store, fake and file-backed sinks, engine.

Invariants:
    - Every test gets a fresh store built from the root seed records
    - RecordingSink keeps a deep copy of each save for assertions
    - FailingSink raises PersistenceError on every save

Design Decisions:
    - Fakes over mocks: the engine only needs the PersistenceSink protocol
"""

import asyncio
import copy

import pytest

from stockswap.core.errors import PersistenceError
from stockswap.core.record_store import RecordStore
from stockswap.infrastructure.json_document import JsonDocumentSink
from stockswap.services.transfer_engine import TransferEngine


class RecordingSink:
    """Records every saved snapshot; optional delay widens race windows."""

    def __init__(self, delay: float = 0):
        self.saves: list[dict] = []
        self.delay = delay

    def load(self) -> dict:
        return {}

    async def save(self, records) -> None:
        snapshot = copy.deepcopy(dict(records))
        await asyncio.sleep(self.delay)
        self.saves.append(snapshot)


class FailingSink:
    def load(self) -> dict:
        return {}

    async def save(self, records) -> None:
        raise PersistenceError("document write failed", "/readonly/stocks.json")


@pytest.fixture
def store(stock_records):
    return RecordStore(stock_records)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def engine(store, sink):
    return TransferEngine(store, sink)


@pytest.fixture
def file_sink(tmp_path):
    return JsonDocumentSink(tmp_path / "stocks.json")


@pytest.fixture
def failing_engine(store):
    return TransferEngine(store, FailingSink())


@pytest.fixture
def slow_sink():
    return RecordingSink(delay=0.01)


@pytest.fixture
def slow_engine(store, slow_sink):
    return TransferEngine(store, slow_sink)
