"""Trading Routes — HTTP contract of the trading service.

Tests cover:
    - Root message, list filters, single record lookup and 404
    - /transfer status codes (200/400/404/500) and document write-through
    - /transfer-batch answers 200 for per-item failures, 400 for bad operations
    - Unencodable text is rejected before it reaches the store or the document
    - /portfolio and /sector-stats aggregates
    - Legacy /stocks, /swap and /bulk-swap aliases
"""

import json

from stockswap.core.errors import PersistenceError


def _read(path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


async def test_root_message(trading_client):
    res = await trading_client.get("/")
    assert res.status_code == 200
    assert res.json() == {"message": "Trading Service API"}


# ─── reads ───────────────────────────────────────────────────────

async def test_list_records_returns_all(trading_client):
    res = await trading_client.get("/records")
    assert res.status_code == 200
    assert [r["id"] for r in res.json()] == ["AAPL", "MSFT", "GOOGL", "JPM", "XOM"]


async def test_list_records_sector_and_limit(trading_client):
    res = await trading_client.get("/records", params={"sector": "Technology", "limit": 2})
    body = res.json()
    assert len(body) == 2
    assert all(r["sector"] == "Technology" for r in body)


async def test_list_records_by_owner(trading_client):
    res = await trading_client.get("/records", params={"owned": "user2"})
    assert [r["id"] for r in res.json()] == ["JPM", "XOM"]


async def test_list_records_non_integer_limit_is_400(trading_client):
    res = await trading_client.get("/records", params={"limit": "many"})
    assert res.status_code == 400
    assert res.json()["code"] == "VALIDATION_ERROR"


async def test_get_record(trading_client):
    res = await trading_client.get("/records/AAPL")
    assert res.status_code == 200
    assert res.json()["name"] == "Apple Inc."


async def test_get_missing_record_is_404(trading_client):
    res = await trading_client.get("/records/NONEXISTENT")
    assert res.status_code == 404
    assert res.json()["error"] == "Stock not found"


async def test_legacy_stocks_alias(trading_client):
    res = await trading_client.get("/stocks/MSFT")
    assert res.status_code == 200
    assert res.json()["id"] == "MSFT"


# ─── /transfer ───────────────────────────────────────────────────

async def test_transfer_success_writes_document(trading_client, document_path):
    res = await trading_client.post("/transfer", json={
        "recordId": "AAPL", "fromUserId": "user1", "toUserId": "user2",
    })
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "Stock AAPL transferred from user1 to user2"
    assert body["record"]["owned"] == "user2"
    assert _read(document_path)["AAPL"]["owned"] == "user2"

    follow_up = await trading_client.get("/records/AAPL")
    assert follow_up.json()["owned"] == "user2"


async def test_transfer_missing_parameters_is_400(trading_client):
    res = await trading_client.post("/transfer", json={"recordId": "MSFT"})
    assert res.status_code == 400
    assert res.json()["error"] == "Missing required parameters"


async def test_transfer_unknown_record_is_404(trading_client):
    res = await trading_client.post("/transfer", json={
        "recordId": "NONEXISTENT", "fromUserId": "user1", "toUserId": "user2",
    })
    assert res.status_code == 404
    assert res.json()["error"] == "Stock not found"


async def test_transfer_wrong_owner_is_400_and_unchanged(trading_client, document_path):
    res = await trading_client.post("/transfer", json={
        "recordId": "GOOGL", "fromUserId": "user1", "toUserId": "user2",
    })
    assert res.status_code == 400
    assert res.json()["error"] == "Stock is not owned by the specified user"
    assert _read(document_path)["GOOGL"]["owned"] == "user3"


async def test_transfer_persistence_failure_is_500(trading_client, monkeypatch):
    async def failing_save(self, records):
        raise PersistenceError("document write failed", "stocks.json")

    monkeypatch.setattr(
        "stockswap.infrastructure.json_document.JsonDocumentSink.save", failing_save,
    )
    res = await trading_client.post("/transfer", json={
        "recordId": "AAPL", "fromUserId": "user1", "toUserId": "user2",
    })
    assert res.status_code == 500
    assert res.json()["code"] == "PERSISTENCE_FAILURE"


async def test_legacy_swap_alias_accepts_stock_id(trading_client):
    res = await trading_client.post("/swap", json={
        "stockId": "AAPL", "fromUserId": "user1", "toUserId": "user2",
    })
    assert res.status_code == 200
    assert res.json()["record"]["owned"] == "user2"


async def test_sequence_of_swaps_round_trips_owner(trading_client, document_path):
    owners = ["user1", "user2", "user3", "user1"]
    for current, new in zip(owners, owners[1:]):
        res = await trading_client.post("/transfer", json={
            "recordId": "AAPL", "fromUserId": current, "toUserId": new,
        })
        assert res.status_code == 200
    assert _read(document_path)["AAPL"]["owned"] == "user1"


# ─── /transfer-batch ─────────────────────────────────────────────

async def test_batch_partial_failure_is_200(trading_client, document_path):
    res = await trading_client.post("/transfer-batch", json={"operations": [
        {"recordId": "MSFT", "fromUserId": "user1", "toUserId": "user3"},
        {"recordId": "NOPE", "fromUserId": "user1", "toUserId": "user2"},
    ]})
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert [r["success"] for r in body["results"]] == [True, False]
    assert body["results"][0]["record"]["owned"] == "user3"
    assert body["results"][1] == {"recordId": "NOPE", "success": False, "error": "Stock not found"}
    document = _read(document_path)
    assert document["MSFT"]["owned"] == "user3"
    assert document["AAPL"]["owned"] == "user1"


async def test_batch_empty_operations_is_400(trading_client):
    res = await trading_client.post("/transfer-batch", json={"operations": []})
    assert res.status_code == 400
    assert res.json()["error"] == "Missing or invalid operations array"


async def test_batch_missing_operations_is_400(trading_client):
    res = await trading_client.post("/transfer-batch", json={})
    assert res.status_code == 400


async def test_batch_non_list_operations_is_400(trading_client):
    res = await trading_client.post("/transfer-batch", json={"operations": "AAPL"})
    assert res.status_code == 400


async def test_legacy_bulk_swap_alias(trading_client):
    res = await trading_client.post("/bulk-swap", json={"operations": [
        {"stockId": "JPM", "fromUserId": "user2", "toUserId": "user1"},
    ]})
    assert res.status_code == 200
    assert res.json()["results"][0]["success"] is True


# Raw bodies: the escape must reach the server as a lone surrogate.
_SURROGATE_OWNER_BATCH = (
    b'{"operations": [{"recordId": "AAPL", "fromUserId": "user1", "toUserId": "\\ud800"}]}'
)
_SURROGATE_ID_BATCH = (
    b'{"operations": [{"recordId": "\\udfff", "fromUserId": "user1", "toUserId": "user2"}]}'
)
_JSON = {"content-type": "application/json"}


async def test_batch_unencodable_owner_rejected_per_item(trading_client, document_path, trading_store):
    res = await trading_client.post("/transfer-batch", content=_SURROGATE_OWNER_BATCH, headers=_JSON)
    assert res.status_code == 200
    assert res.json()["results"] == [{
        "recordId": "AAPL", "success": False,
        "error": "Parameters must be valid UTF-8 text",
    }]
    assert trading_store.get("AAPL")["owned"] == "user1"
    assert [p.name for p in document_path.parent.iterdir() if p.suffix == ".tmp"] == []


async def test_batch_unencodable_record_id_not_echoed(trading_client):
    res = await trading_client.post("/transfer-batch", content=_SURROGATE_ID_BATCH, headers=_JSON)
    assert res.status_code == 200
    assert res.json()["results"][0]["recordId"] is None


async def test_transfer_unencodable_owner_is_400(trading_client, document_path):
    res = await trading_client.post("/transfer", headers=_JSON, content=(
        b'{"recordId": "AAPL", "fromUserId": "user1", "toUserId": "\\ud800"}'
    ))
    assert res.status_code == 400
    assert _read(document_path)["AAPL"]["owned"] == "user1"


async def test_writes_continue_after_unencodable_batch(trading_client, document_path):
    await trading_client.post("/transfer-batch", content=_SURROGATE_OWNER_BATCH, headers=_JSON)
    res = await trading_client.post("/transfer", json={
        "recordId": "MSFT", "fromUserId": "user1", "toUserId": "user9",
    })
    assert res.status_code == 200
    assert _read(document_path)["MSFT"]["owned"] == "user9"


# ─── aggregates ──────────────────────────────────────────────────

async def test_portfolio(trading_client):
    res = await trading_client.get("/portfolio/user1")
    body = res.json()
    assert body["ownerId"] == "user1"
    assert body["stockCount"] == 2
    assert body["totalValue"] == 150.25 + 245.75
    assert {s["id"] for s in body["stocks"]} == {"AAPL", "MSFT"}


async def test_empty_portfolio(trading_client):
    res = await trading_client.get("/portfolio/user99")
    assert res.status_code == 200
    assert res.json() == {"ownerId": "user99", "stockCount": 0, "totalValue": 0, "stocks": []}


async def test_portfolio_reflects_transfer(trading_client):
    await trading_client.post("/transfer", json={
        "recordId": "GOOGL", "fromUserId": "user3", "toUserId": "user99",
    })
    res = await trading_client.get("/portfolio/user99")
    assert res.json()["stockCount"] == 1


async def test_sector_stats(trading_client):
    res = await trading_client.get("/sector-stats")
    stats = res.json()
    assert stats["Technology"]["count"] == 3
    assert stats["Finance"]["stocks"] == ["JPM"]
