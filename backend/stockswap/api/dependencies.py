"""Request Dependencies — hand each route the store or engine built for its app.

Invariants:
    - Stores and engines live on app.state, created by the app's lifespan
    - No module-level singletons: two apps in one process never share state

Design Decisions:
    - Depends() providers so tests swap collaborators via dependency_overrides
"""

from fastapi import Request

from stockswap.core.record_store import RecordStore
from stockswap.services.transfer_engine import TransferEngine


def _state_attr(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"{name} not initialized")
    return value


def get_record_store(request: Request) -> RecordStore:
    """Stock records of the trading service."""
    return _state_attr(request, "record_store")


def get_transfer_engine(request: Request) -> TransferEngine:
    return _state_attr(request, "transfer_engine")


def get_user_store(request: Request) -> RecordStore:
    """User records of the user service."""
    return _state_attr(request, "user_store")
