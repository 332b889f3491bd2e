"""
JetSweep - Main FastAPI Application
Leave-by time planner: works back from boarding to the moment you should leave
"""

import logging
import logging.config
from contextlib import asynccontextmanager
from typing import Dict, Any
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

# Load .env file explicitly (before importing config)
from dotenv import load_dotenv
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from jetsweep.core.config import get_settings
from jetsweep.api.v1.endpoints import router as v1_router

# Initialize settings
settings = get_settings()

# Configure logging
logging.config.dictConfig(settings.get_log_config())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(
        f"Recent searches: {'Enabled' if settings.recent_searches_enabled else 'Disabled'}"
        f" ({settings.recent_searches_file})"
    )
    logger.info("=" * 60)

    # Build the static airport tables once up front
    from jetsweep.services.airports import get_all_airports
    logger.info(f"✅ Airport registry: {len(get_all_airports())} airports loaded")

    yield

    # Shutdown
    logger.info("=" * 60)
    logger.info(f"👋 Shutting down {settings.app_name}")
    logger.info("=" * 60)


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    **JetSweep Leave-By API**

    Tells a traveler when to leave for the airport by working backward from boarding.

    **Core Features:**
    - **Airport Profiles**: Tiered friction estimates for 80+ US airports with per-airport bottlenecks
    - **Travel Conditions**: Rush hour and holiday detection from the departure time
    - **Backward Scheduler**: Stage-by-stage itinerary (drive, curb, bags, security, gate, boarding)
    - **Confidence & Stress**: Variance classification and gate slack for every plan
    - **Recent Searches**: Small history of past lookups
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception Handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed messages"""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder({
            "status": "error",
            "message": "Invalid request data",
            "errors": exc.errors(),
        })
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.error(f"Unhandled exception on {request.url.path}: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "status": "error",
            "message": "Internal server error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred"
        }
    )


# Include routers
app.include_router(v1_router)


# Root endpoint
@app.get("/", tags=["Root"])
async def root() -> Dict[str, Any]:
    """
    Root endpoint - API information
    """
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "docs": "/docs",
        "health": "/api/v1/health",
        "endpoints": {
            "timeline": "POST /api/v1/timeline",
            "airports": "GET /api/v1/airports",
            "airport_lookup": "GET /api/v1/airports/{query}",
            "conditions": "GET /api/v1/conditions?departure=...",
            "recent_searches": "GET|DELETE /api/v1/recent-searches"
        }
    }


# Additional utility endpoint
@app.get("/info", tags=["Root"])
async def info() -> Dict[str, Any]:
    """
    Detailed API information and configuration
    """
    return {
        "application": {
            "name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "debug": settings.debug
        },
        "configuration": {
            "recent_searches_enabled": settings.recent_searches_enabled,
            "recent_searches_limit": settings.recent_searches_limit,
            "log_level": settings.log_level
        },
        "endpoints_count": len([route for route in app.routes if hasattr(route, 'methods')])
    }


if __name__ == "__main__":
    import uvicorn

    # Run with uvicorn
    uvicorn.run(
        "jetsweep.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development(),
        log_level=settings.log_level.lower()
    )
