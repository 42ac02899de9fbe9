"""
StockChart Core - FastAPI Application

Main entry point for the chart API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chartcore.core.config import settings
from chartcore.core.logging import configure_logging
from chartcore.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging()
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment})")

    from chartcore.services.cache import init_redis, close_redis
    from chartcore.services.data_ingestion import close_data_source

    if settings.enable_redis:
        redis_client = await init_redis()
        if redis_client is None:
            logger.info("Redis unavailable - using in-memory cache")
    else:
        logger.info("Redis disabled - using in-memory cache")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_data_source()
    await close_redis()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Chart data for the portfolio app: sanitized OHLC series, zoom windows
    and technical indicator overlays (SMA, EMA, Bollinger Bands, RSI, MACD).
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }
