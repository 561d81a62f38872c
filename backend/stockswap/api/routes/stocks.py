"""Stock Routes — read queries and ownership transfers for the trading service.

Invariants:
    - /records, /transfer and /transfer-batch are the public paths; /stocks,
      /swap and /bulk-swap stay as aliases for existing clients
    - Transfer errors are raised as StockSwapError and rendered by error_handlers
    - /transfer-batch answers 200 whenever the batch ran, whatever the items did

Design Decisions:
    - Stacked route decorators for aliases: one handler, hidden from the schema
"""

import logging

from fastapi import APIRouter, Depends, Query

from stockswap.api.dependencies import get_record_store, get_transfer_engine
from stockswap.core.errors import ErrorContext, RecordNotFoundError
from stockswap.core.record_store import RecordStore
from stockswap.schemas.transfer import BatchTransferRequest, TransferRequest
from stockswap.services.transfer_engine import TransferEngine

logger = logging.getLogger(__name__)
router = APIRouter(tags=["stocks"])


@router.get("/")
async def root():
    return {"message": "Trading Service API"}


@router.get("/records")
@router.get("/stocks", include_in_schema=False)
async def list_records(
    limit: int | None = Query(None),
    sector: str | None = Query(None),
    owned: str | None = Query(None),
    store: RecordStore = Depends(get_record_store),
):
    """List records, filtered by sector and owner, truncated to limit."""
    return store.list(sector=sector, owner=owned, limit=limit)


@router.get("/records/{record_id}")
@router.get("/stocks/{record_id}", include_in_schema=False)
async def get_record(
    record_id: str, store: RecordStore = Depends(get_record_store),
):
    record = store.get(record_id)
    if record is None:
        raise RecordNotFoundError(
            "Stock", record_id, ErrorContext(record_id=record_id),
        )
    logger.info(f"Stock retrieved: {record_id}", extra={"record_id": record_id})
    return record


@router.post("/transfer")
@router.post("/swap", include_in_schema=False)
async def transfer(
    body: TransferRequest, engine: TransferEngine = Depends(get_transfer_engine),
):
    """Swap ownership of one record."""
    result = await engine.transfer(body.record_id, body.from_user_id, body.to_user_id)
    return {"success": True, "message": result.message, "record": result.record}


@router.post("/transfer-batch")
@router.post("/bulk-swap", include_in_schema=False)
async def transfer_batch(
    body: BatchTransferRequest, engine: TransferEngine = Depends(get_transfer_engine),
):
    """Swap ownership of many records, best-effort, one write."""
    results = await engine.transfer_batch(body.operations)
    return {"success": True, "results": [r.to_item() for r in results]}


@router.get("/portfolio/{owner_id}")
async def portfolio(
    owner_id: str, store: RecordStore = Depends(get_record_store),
):
    """Records held by owner_id and their summed price."""
    return store.portfolio_for(owner_id).to_response()


@router.get("/sector-stats")
async def sector_stats(store: RecordStore = Depends(get_record_store)):
    return store.sector_stats()
