"""Prompt Console API.

Run with ``uvicorn app.main:app`` or ``python -m app.main``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import system_prompt_router, templates_router
from app.api.schemas import ErrorResponse
from app.core.config import Settings, get_settings
from app.core.logging_config import setup_logging
from app.db.session import close_db, init_db

setup_logging()
logger = logging.getLogger(__name__)

SERVICE_NAME = "prompt-console-api"
VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the database on startup and release it on shutdown."""
    settings: Settings = app.state.settings

    logger.info(f"Starting {SERVICE_NAME} {VERSION} (provider: {settings.llm_provider_type})")
    try:
        await init_db(settings)
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)
        raise

    yield

    try:
        await close_db(settings)
    except Exception as e:
        logger.error(f"Error closing database: {e}", exc_info=True)
    logger.info(f"{SERVICE_NAME} stopped")


def register_exception_handlers(app: FastAPI) -> None:
    """Render validation failures and unhandled errors as JSON."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
        logger.warning(f"Validation error on {request.method} {request.url.path}: {errors}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": "Validation error", "errors": errors},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(detail="Internal server error", error_code="INTERNAL_ERROR").model_dump(),
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.

    Returns:
        The configured application.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Prompt Console",
        description="Prompt templates with variable reconciliation, live preview and model testing",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(templates_router)
    app.include_router(system_prompt_router)
    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    async def health_check():
        """Liveness probe."""
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": VERSION,
            "provider": settings.llm_provider_type,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=get_settings().log_level.lower(),
    )
