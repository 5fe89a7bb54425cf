"""
SWAT Readiness Scoring - FastAPI Application

API for SWAT team readiness assessments:
- Questionnaire steps and question resolution per category
- Category completion and overall progress
- Tier Assessment and Gap Analysis PDF reports

Environment Variables:
    See config.py for complete list and descriptions.
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from config import settings
from models.schemas import HealthResponse, ErrorResponse
from adapters.storage import CATALOG_CACHE
from utils.cache import get_cache_stats

from routes import questionnaire, reports

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    if settings.storage_backend == "mongo":
        logger.info("Initializing MongoDB collections...")
        try:
            from database import initialize_collections
            initialize_collections()
            logger.info("MongoDB collections initialized successfully!")
        except Exception as e:
            logger.error(f"Failed to initialize MongoDB: {e}")
            raise

    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.storage_backend} storage)")
    yield
    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="SWAT readiness assessments - question resolution, progress scoring and reports",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(questionnaire.router)
app.include_router(reports.router)


# Error handlers
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors."""
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error_code="VALIDATION_ERROR",
            message="Invalid input data",
            details={"errors": exc.errors(include_url=False, include_context=False)},
            request_id=request.headers.get("x-request-id"),
        ).model_dump(),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error_code=f"HTTP_{exc.status_code}",
            message=str(exc.detail),
            request_id=request.headers.get("x-request-id"),
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error_code="INTERNAL_ERROR",
            message="An unexpected error occurred. Please try again.",
            request_id=request.headers.get("x-request-id"),
        ).model_dump(),
    )


# Health endpoint
@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check endpoint",
)
async def health_check() -> HealthResponse:
    """
    Check API health and configuration.

    Returns the version, the configured storage backend and
    statistics of the catalog cache.
    """
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        storage_backend=settings.storage_backend,
        catalog_cache=get_cache_stats(CATALOG_CACHE),
    )


# Root redirect
@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint."""
    return {"message": f"{settings.app_name} API", "docs": "/docs", "health": "/health"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
