"""StockSwap API — FastAPI application factories for the trading and user services.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map StockSwapError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Record stores loaded on startup via lifespan and kept on app.state

Design Decisions:
    - One factory per service over one app with both routers: each service
      owns its document and can be deployed alone
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Module-level trading_app / user_app for `uvicorn stockswap.main:trading_app`
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockswap.api.error_handlers import register_error_handlers
from stockswap.api.routes import health, stocks, users
from stockswap.config import Settings, get_settings
from stockswap.core.record_store import RecordStore
from stockswap.infrastructure.json_document import JsonDocumentSink
from stockswap.infrastructure.observability import setup_logging
from stockswap.services.transfer_engine import TransferEngine

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def _build_app(title: str, lifespan, settings: Settings) -> FastAPI:
    """Shared wiring: CORS, error handlers, health probes and request timing."""
    app = FastAPI(title=title, version=VERSION, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    health.register_health_logging(app)
    app.include_router(health.router)
    return app


def create_trading_app(settings: Settings | None = None) -> FastAPI:
    """Trading service: stock records, transfers and portfolios."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_format, "trading-service")
        sink = JsonDocumentSink(settings.trading_data_path)
        store = RecordStore(sink.load())
        app.state.record_store = store
        app.state.transfer_engine = TransferEngine(store, sink)
        logger.info(f"Trading service started with {len(store)} stocks")
        yield
        logger.info("Trading service shutting down")

    app = _build_app("Trading Service API", lifespan, settings)
    app.include_router(stocks.router)
    return app


def create_user_app(settings: Settings | None = None) -> FastAPI:
    """User service: read-only user records."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_format, "user-service")
        app.state.user_store = RecordStore(JsonDocumentSink(settings.user_data_path).load())
        logger.info(f"User service started with {len(app.state.user_store)} users")
        yield
        logger.info("User service shutting down")

    app = _build_app("User Service API", lifespan, settings)
    app.include_router(users.router)
    return app


trading_app = create_trading_app()
user_app = create_user_app()
