"""Transfer Precondition Enforcement — validates a swap request before any mutation.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - Return the error on violation, None on success
    - check_request chains the lock-free checks in order, first error wins:
      parameters present and encodable, record exists
    - check_ownership is evaluated separately, under the record's lock

Design Decisions:
    - Return errors (not raise): the batch path records them per item while the
      single path raises them, so both paths share one rule chain
"""

from typing import Any

from stockswap.core.errors import (
    ErrorContext,
    InvalidRequestError,
    OwnershipMismatchError,
    RecordNotFoundError,
    StockSwapError,
)
from stockswap.core.record_store import RecordStore

MISSING_PARAMETERS = "Missing required parameters"
INVALID_PARAMETERS = "Parameters must be valid UTF-8 text"
INVALID_OPERATIONS = "Missing or invalid operations array"


def _present(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def is_utf8_text(value: Any) -> bool:
    """True for strings that encode to UTF-8 (no lone surrogates)."""
    if not isinstance(value, str):
        return False
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def check_parameters(
    record_id: Any, from_owner: Any, to_owner: Any,
) -> StockSwapError | None:
    """Rule 1: record id, current owner and new owner are non-empty UTF-8 strings."""
    values = (record_id, from_owner, to_owner)
    if not all(_present(v) for v in values):
        return InvalidRequestError(MISSING_PARAMETERS)
    if not all(is_utf8_text(v) for v in values):
        return InvalidRequestError(INVALID_PARAMETERS)
    return None


def check_record_exists(store: RecordStore, record_id: str) -> StockSwapError | None:
    """Rule 2: the record is in the store."""
    if store.get(record_id) is None:
        return RecordNotFoundError(
            "Stock", record_id, ErrorContext(record_id=record_id),
        )
    return None


def check_ownership(
    store: RecordStore, record_id: str, from_owner: str, to_owner: str,
) -> StockSwapError | None:
    """Rule 3: the record's current owner is the one named in the request."""
    record = store.get(record_id)
    if record is None or record.get("owned") != from_owner:
        return OwnershipMismatchError(
            record_id, from_owner,
            ErrorContext(
                record_id=record_id, from_owner=from_owner, to_owner=to_owner,
            ),
        )
    return None


def check_request(
    store: RecordStore, record_id: Any, from_owner: Any, to_owner: Any,
) -> StockSwapError | None:
    """Rules 1-2, safe to run before taking the record lock."""
    return (
        check_parameters(record_id, from_owner, to_owner)
        or check_record_exists(store, record_id)
    )


def check_operations(operations: Any) -> StockSwapError | None:
    """Batch input must be a non-empty list."""
    if not isinstance(operations, list) or not operations:
        return InvalidRequestError(INVALID_OPERATIONS)
    return None
