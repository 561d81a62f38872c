"""Transfer Engine — validates and executes stock ownership transfers (swaps).

Invariants:
    - check → mutate → persist runs under one asyncio.Lock per record id, so
      two transfers of the same record never both pass the ownership check
    - Locks exist only for ids present in the store (bounded by store size)
    - Document writes are serialized by a single writer lock and the snapshot
      is taken inside it: the file always reflects the latest committed state
    - Single transfer: one write per success. Batch: one write per batch, only
      when at least one item succeeded
    - Failed preconditions leave the store untouched

Design Decisions:
    - Persistence failure keeps the in-memory change and raises PersistenceError
      with record id and owners in the log entry for manual reconciliation
    - Batch is best-effort: per-item failures recorded, no rollback
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from stockswap.core.domain_types import Record
from stockswap.core.enforce_transfer import (
    MISSING_PARAMETERS,
    check_operations,
    check_ownership,
    check_request,
    is_utf8_text,
)
from stockswap.core.errors import ErrorContext, PersistenceError
from stockswap.core.record_store import RecordStore
from stockswap.core.repository_protocols import PersistenceSink

logger = logging.getLogger(__name__)


@dataclass
class TransferResult:
    """Outcome of one transfer; record set only on success."""
    record_id: Any
    success: bool
    message: str | None = None
    error: str | None = None
    record: Record | None = None

    def to_item(self) -> dict:
        """Per-item batch entry."""
        if self.success:
            return {
                "recordId": self.record_id,
                "success": True,
                "message": self.message,
                "record": self.record,
            }
        return {"recordId": self.record_id, "success": False, "error": self.error}


def transfer_message(record_id: str, from_owner: str, to_owner: str) -> str:
    return f"Stock {record_id} transferred from {from_owner} to {to_owner}"


class TransferEngine:
    """Executes single and batched transfers against a RecordStore."""

    def __init__(self, store: RecordStore, sink: PersistenceSink):
        self.store = store
        self.sink = sink
        self._record_locks: dict[str, asyncio.Lock] = {}
        self._write_lock = asyncio.Lock()

    def _lock_for(self, record_id: str) -> asyncio.Lock:
        return self._record_locks.setdefault(record_id, asyncio.Lock())

    async def _persist(self, context: ErrorContext) -> None:
        async with self._write_lock:
            try:
                await self.sink.save(self.store.as_dict())
            except PersistenceError as e:
                e.context.record_id = context.record_id
                e.context.from_owner = context.from_owner
                e.context.to_owner = context.to_owner
                logger.error(
                    f"Persistence failed after commit; memory and document diverge: {e.message}",
                    extra={
                        "error_code": e.code,
                        "record_id": context.record_id,
                        "from_owner": context.from_owner,
                        "to_owner": context.to_owner,
                    },
                )
                raise

    async def transfer(self, record_id: Any, from_owner: Any, to_owner: Any) -> TransferResult:
        """Move one record from from_owner to to_owner and persist the store.

        Raises InvalidRequestError, RecordNotFoundError, OwnershipMismatchError
        (store unchanged) or PersistenceError (store changed, document stale).
        """
        error = check_request(self.store, record_id, from_owner, to_owner)
        if error:
            logger.warning(error.message, extra={"record_id": record_id, "error_code": error.code})
            raise error

        async with self._lock_for(record_id):
            error = check_ownership(self.store, record_id, from_owner, to_owner)
            if error:
                logger.warning(
                    f"Stock {record_id} is not owned by user {from_owner}",
                    extra={"record_id": record_id, "error_code": error.code},
                )
                raise error
            record = self.store.set_owner(record_id, to_owner)
            await self._persist(ErrorContext(
                record_id=record_id, from_owner=from_owner, to_owner=to_owner,
            ))

        message = transfer_message(record_id, from_owner, to_owner)
        logger.info(message, extra={
            "record_id": record_id, "from_owner": from_owner, "to_owner": to_owner,
        })
        return TransferResult(record_id, True, message=message, record=dict(record))

    async def _apply_item(self, operation: Any) -> TransferResult:
        if not isinstance(operation, dict):
            return TransferResult(None, False, error=MISSING_PARAMETERS)
        record_id = operation.get("recordId", operation.get("stockId"))
        from_owner = operation.get("fromUserId")
        to_owner = operation.get("toUserId")

        error = check_request(self.store, record_id, from_owner, to_owner)
        if error:
            # unencodable ids are not echoed into the UTF-8 response body
            echoed = None if isinstance(record_id, str) and not is_utf8_text(record_id) else record_id
            return TransferResult(echoed, False, error=error.message)
        async with self._lock_for(record_id):
            error = check_ownership(self.store, record_id, from_owner, to_owner)
            if error:
                return TransferResult(record_id, False, error=error.message)
            record = self.store.set_owner(record_id, to_owner)
        return TransferResult(
            record_id, True,
            message=transfer_message(record_id, from_owner, to_owner),
            record=dict(record),
        )

    async def transfer_batch(self, operations: Any) -> list[TransferResult]:
        """Apply each operation in order, best-effort, then persist once.

        Raises InvalidRequestError when operations is not a non-empty list,
        PersistenceError when the single write after the batch fails.
        """
        error = check_operations(operations)
        if error:
            logger.warning(error.message, extra={"error_code": error.code})
            raise error

        results = [await self._apply_item(op) for op in operations]
        succeeded = [r for r in results if r.success]
        if succeeded:
            await self._persist(ErrorContext(
                record_id=",".join(str(r.record_id) for r in succeeded),
                debug_info={"batch_size": len(operations)},
            ))
        logger.info(
            f"Batch transfer: {len(succeeded)}/{len(results)} succeeded",
            extra={"batch_size": len(results)},
        )
        return results
