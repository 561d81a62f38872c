"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - RecordId and OwnerId wrap str; records are keyed by ticker, owners by user id
    - All valid modes and systems encoded as Enums; no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and CLI output without custom encoders
"""

from enum import Enum
from typing import Any, NewType


# ─── Identity Types ──────────────────────────────────────────────

RecordId = NewType("RecordId", str)
OwnerId = NewType("OwnerId", str)

# Records are opaque JSON objects; only "id", "owned", "price", "sector" are read
Record = dict[str, Any]


# ─── Enums ───────────────────────────────────────────────────────

class MaintenanceMode(str, Enum):
    """Maintenance runner modes; cleanup swaps every plan to its cleanup list."""
    RUN = "run"
    CLEANUP = "cleanup"


class ExternalSystem(str, Enum):
    """Simulated external systems, in the order the runner visits them."""
    DATABASE = "database"
    QUEUE = "kafka"
    OBJECT_STORE = "s3"


class ServiceName(str, Enum):
    """HTTP services this package can serve."""
    TRADING = "trading"
    USER = "user"
