"""
Lead Desk Backend - FastAPI Application
Main entry point with all routes configured.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from leaddesk.config import settings
from leaddesk.database import init_db, async_session_factory
from leaddesk.seed import seed_demo_data

# Import all API routers
from leaddesk.api import leads, deals, outreach
from leaddesk.schemas.common import HealthResponse

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    await init_db()
    if settings.SEED_DEMO_DATA:
        async with async_session_factory() as session:
            await seed_demo_data(session)
    yield
    # Shutdown


app = FastAPI(
    title="Lead Desk API",
    description="Sales pipeline backend with AI-assisted outreach planning",
    version=VERSION,
    lifespan=lifespan
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include all routers
app.include_router(leads.router, prefix=settings.API_PREFIX)
app.include_router(deals.router, prefix=settings.API_PREFIX)
app.include_router(outreach.router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Lead Desk API is running",
        "version": VERSION,
        "docs": "/docs"
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Detailed health check."""
    return HealthResponse(version=VERSION)
