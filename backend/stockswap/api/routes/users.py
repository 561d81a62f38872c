"""User Routes — read-only access to the user service's records."""

import logging

from fastapi import APIRouter, Depends

from stockswap.api.dependencies import get_user_store
from stockswap.core.errors import RecordNotFoundError
from stockswap.core.record_store import RecordStore

logger = logging.getLogger(__name__)
router = APIRouter(tags=["users"])


@router.get("/")
async def root():
    return {"message": "User Service API"}


@router.get("/users")
async def list_users(store: RecordStore = Depends(get_user_store)):
    """All users, keyed by id."""
    return store.as_dict()


@router.get("/users/{user_id}")
async def get_user(user_id: str, store: RecordStore = Depends(get_user_store)):
    user = store.get(user_id)
    if user is None:
        raise RecordNotFoundError("User", user_id)
    logger.info(f"User retrieved: {user_id}")
    return user
