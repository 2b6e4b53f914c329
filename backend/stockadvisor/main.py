"""
StockAdvisor Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockadvisor.core.config import settings
from stockadvisor.core.logging_config import configure_logging
from stockadvisor.api.v1 import router as api_v1_router

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    yield

    # Shutdown
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    StockAdvisor Technical Analysis & Recommendation API

    ## Architecture
    - **Indicator Engine**: RSI, MACD, moving averages, Bollinger Bands,
      support/resistance, volume and momentum (pure Python/NumPy)
    - **Signal Aggregator**: Weighted indicator vote → buy/sell/hold
    - **Recommendation Scorer**: Technical, fundamental and sentiment scores
      weighted per time horizon (daily, weekly, monthly, yearly)

    ## Core Principles
    - Suggestions only, nothing is executed
    - Callers supply the price history; no market data is fetched here
    - Indicators without enough history report insufficient_data
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - allow both frontend ports
cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.frontend_url and settings.frontend_url not in cors_origins:
    cors_origins.append(settings.frontend_url)
# Add any additional origins from settings
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
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


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "StockAdvisor Backend API",
        "docs": "/docs",
        "health": "/health",
    }
