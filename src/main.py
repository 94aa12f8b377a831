"""Pflanzen-Manager - plant care tracking with recurring care tasks."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.agents.plant_analysis_agent import PlantAnalysisError
from src.core.config import settings
from src.core.db_client import RecordNotFoundError, close_connection, init_db
from src.core.errors import classify_error_with_response
from src.core.logging import configure_logfire, instrument_fastapi, instrument_pydantic_ai
from src.interface.plants_router import router as plants_router
from src.interface.rooms_router import router as rooms_router
from src.interface.settings_router import router as settings_router
from src.interface.tasks_router import router as tasks_router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    # Configure logging first so startup logs are captured
    configure_logfire()

    await init_db()
    logger.info("Database initialized")

    instrument_pydantic_ai()
    yield
    # Shutdown
    await close_connection()


app = FastAPI(
    title="pflanzen-manager",
    description="Plant care tracking with recurring care tasks",
    version="0.1.0",
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(rooms_router)
app.include_router(plants_router)
app.include_router(tasks_router)
app.include_router(settings_router)


def _error_response(exc: Exception, status_code: int) -> JSONResponse:
    response = classify_error_with_response(exc)
    return JSONResponse(content=response.model_dump(mode="json"), status_code=status_code)


@app.exception_handler(RecordNotFoundError)
async def record_not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    """Map missing records to 404."""
    logger.info("Record not found", extra={"path": request.url.path, "error": str(exc)})
    return _error_response(exc, status.HTTP_404_NOT_FOUND)


@app.exception_handler(PlantAnalysisError)
async def plant_analysis_error_handler(request: Request, exc: PlantAnalysisError) -> JSONResponse:
    """Map analysis service failures to 502."""
    logger.warning(
        "Plant analysis request failed",
        extra={"path": request.url.path, "error_category": exc.category.value},
    )
    # Classify the provider error, not the friendly message wrapped around it
    cause = exc.__cause__ if isinstance(exc.__cause__, Exception) else exc
    return _error_response(cause, status.HTTP_502_BAD_GATEWAY)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Map bad input and missing configuration to 400."""
    logger.info("Rejected request", extra={"path": request.url.path, "error": str(exc)})
    return _error_response(exc, status.HTTP_400_BAD_REQUEST)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)
