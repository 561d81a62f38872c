"""Transfer Schemas — request bodies for the swap endpoints.

Invariants:
    - Fields are optional at the schema level: presence is a transfer
      precondition checked by the engine, answered with "Missing required parameters"
    - recordId and the legacy stockId are accepted for the same field

Design Decisions:
    - BatchTransferRequest.operations typed Any: a malformed item becomes a
      per-item failure instead of rejecting the whole batch
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field


class TransferRequest(BaseModel):
    """Single swap: moves record_id from from_user_id to to_user_id."""
    record_id: str | None = Field(
        None, validation_alias=AliasChoices("recordId", "stockId", "record_id"),
    )
    from_user_id: str | None = Field(
        None, validation_alias=AliasChoices("fromUserId", "from_user_id"),
    )
    to_user_id: str | None = Field(
        None, validation_alias=AliasChoices("toUserId", "to_user_id"),
    )


class BatchTransferRequest(BaseModel):
    """Batch swap: ordered list of {recordId, fromUserId, toUserId} objects."""
    operations: Any = None
