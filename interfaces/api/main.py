"""Main FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated, Any

import structlog
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from lagom import Container

from application.ports.upload_metrics import UploadMetrics
from infrastructure.config import settings
from infrastructure.logging import setup_logging
from infrastructure.metrics.upload_metrics_recorder import UploadMetricsRecorder
from interfaces.api.routes import customer_router, metrics_router  # must precede middleware: breaks import cycle
from interfaces.api.middleware import RequestSizeLimitMiddleware
from interfaces.dependencies import get_container

# Configure structured logging
setup_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # noqa: ARG001
    """Handle application startup and shutdown."""
    logger.info(
        "app_starting",
        env=settings.app_env,
        storage_backend=settings.storage_backend,
        customer_repository=settings.customer_repository,
        upload_max_size=settings.upload_max_size,
        upload_allowed_types=settings.upload_allowed_types,
    )

    # Build the container eagerly so misconfiguration fails at startup
    container = get_container()
    logger.info("app_ready")

    yield

    logger.info("app_shutting_down")
    container[UploadMetricsRecorder].log_current_metrics()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Customer API with profile image uploads",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        RequestSizeLimitMiddleware,
        max_request_size=settings.upload_max_request_size_bytes,
    )

    app.include_router(customer_router)
    app.include_router(metrics_router)

    @app.get("/health")
    async def health_check(
        container: Annotated[Container, Depends(get_container)],
    ) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "healthy", "uploads": container[UploadMetrics].summary()}

    return app


# Create app instance
app = create_app()
