"""API test fixtures — FastAPI test clients for the trading and user services.

Invariants:
    - Every test gets its own app, JSON documents under tmp_path and stores
    - Store and engine dependencies overridden, as the lifespan does not run
      under ASGITransport

Design Decisions:
    - Real JsonDocumentSink on tmp_path: route tests also assert the document
"""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from stockswap.api.dependencies import (
    get_record_store,
    get_transfer_engine,
    get_user_store,
)
from stockswap.config import Settings
from stockswap.core.record_store import RecordStore
from stockswap.infrastructure.json_document import JsonDocumentSink
from stockswap.main import create_trading_app, create_user_app
from stockswap.services.transfer_engine import TransferEngine

USERS = {
    "user1": {"id": "user1", "name": "Alice Johnson"},
    "user2": {"id": "user2", "name": "Bob Smith"},
}


@pytest.fixture
def document_path(tmp_path, stock_records):
    path = tmp_path / "stocks.json"
    path.write_text(json.dumps(stock_records, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def users_path(tmp_path):
    path = tmp_path / "users.json"
    path.write_text(json.dumps(USERS), encoding="utf-8")
    return path


@pytest.fixture
def settings(document_path, users_path):
    return Settings(trading_data_path=document_path, user_data_path=users_path)


@pytest.fixture
def trading_store(document_path):
    return RecordStore(JsonDocumentSink(document_path).load())


@pytest.fixture
async def trading_client(settings, document_path, trading_store):
    """Trading service client with store and engine dependencies overridden."""
    app = create_trading_app(settings)
    engine = TransferEngine(trading_store, JsonDocumentSink(document_path))
    app.dependency_overrides[get_record_store] = lambda: trading_store
    app.dependency_overrides[get_transfer_engine] = lambda: engine

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def user_client(settings, users_path):
    app = create_user_app(settings)
    store = RecordStore(JsonDocumentSink(users_path).load())
    app.dependency_overrides[get_user_store] = lambda: store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
