"""
Pesa Bridge - Main Application Entry Point

Initiates M-Pesa STK pushes for registered businesses, records the
gateway's asynchronous results, and relays them to each business's live
sessions over WebSockets.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from src import __version__
from src.core.config import settings
from src.core.dependencies import ledger_writer
from src.core.logging import setup_logging
from src.core.metrics import get_metrics, get_metrics_content_type
from src.infrastructure.database import db_manager
from src.presentation.api import api_router
from src.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)

LEDGER_DRAIN_TIMEOUT_SECONDS = 10.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Set up logging
    - Initialize database connection pool
    - Flush pending ledger writes and close the pool on shutdown
    """
    setup_logging()
    if db_manager.engine is None:
        db_manager.init()

    logger = structlog.get_logger(__name__)
    logger.info("application_started", version=__version__, port=settings.port)

    yield

    await ledger_writer.drain(timeout=LEDGER_DRAIN_TIMEOUT_SECONDS)
    await db_manager.close()
    logger.info("application_stopped")


app = FastAPI(
    title="Pesa Bridge",
    description="Multi-tenant M-Pesa STK push and payment event bridge",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)

error_handler_middleware(app)

app.include_router(api_router)


@app.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    if not settings.metrics_enabled:
        return Response(status_code=404)
    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type(),
    )


if __name__ == "__main__":
    import uvicorn

    # Rooms live in process memory, so the bridge runs as a single worker.
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
