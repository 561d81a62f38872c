"""Root conftest — shared test configuration and seed records."""

import os

import pytest

# Ensure tests never sleep through simulated maintenance latency
os.environ.setdefault("MAINTENANCE_DELAY_SCALE", "0")
os.environ.setdefault("DEADLOCK_PROBABILITY", "0")
os.environ.setdefault("LOG_FORMAT", "text")


def make_stock_records() -> dict[str, dict]:
    """Fresh copy of a small store: three Technology stocks, two others."""
    return {
        "AAPL": {
            "id": "AAPL", "name": "Apple Inc.", "price": 150.25,
            "owned": "user1", "sector": "Technology",
            "volume": 1000000, "marketCap": 2500000000000,
        },
        "MSFT": {
            "id": "MSFT", "name": "Microsoft Corporation", "price": 245.75,
            "owned": "user1", "sector": "Technology",
            "volume": 800000, "marketCap": 2100000000000,
        },
        "GOOGL": {
            "id": "GOOGL", "name": "Alphabet Inc.", "price": 2800.10,
            "owned": "user3", "sector": "Technology",
            "volume": 600000, "marketCap": 1900000000000,
        },
        "JPM": {
            "id": "JPM", "name": "JPMorgan Chase & Co.", "price": 155.40,
            "owned": "user2", "sector": "Finance",
            "volume": 900000, "marketCap": 450000000000,
        },
        "XOM": {
            "id": "XOM", "name": "Exxon Mobil Corporation", "price": 104.80,
            "owned": "user2", "sector": "Energy",
            "volume": 1200000, "marketCap": 410000000000,
        },
    }


@pytest.fixture
def stock_records():
    return make_stock_records()
