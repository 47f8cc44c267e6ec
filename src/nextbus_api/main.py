"""FastAPI application entry point."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nextbus_api.config import get_settings
from nextbus_api.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from nextbus_api.routers.admin import router as admin_router
from nextbus_api.routers.stops import router as stops_router
from nextbus_api.routers.vehicles import router as vehicles_router
from nextbus_api.services.catalog import StopCatalog
from nextbus_api.services.gtfs_rt.worker import get_worker, reset_worker

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    setup_logging()
    logger.info("Starting NextBus API")

    settings = get_settings()
    if settings.vehicle_refresh_auto_start:
        worker = get_worker()
        await worker.start()

    yield

    worker = get_worker()
    if worker.is_running:
        await worker.stop()
    reset_worker()

    logger.info("Shutting down NextBus API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Next departures and live vehicle positions for SBMTD stops",
        lifespan=lifespan,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
    )
    app.state.stop_catalog = StopCatalog.load(settings.stop_catalog_path)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.environment == "development" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware
    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next: Any) -> Any:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        bind_request_context(request_id=request_id, path=request.url.path)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        clear_request_context()
        return response

    app.include_router(stops_router)
    app.include_router(vehicles_router)
    app.include_router(admin_router)

    @app.get("/health", tags=["meta"])
    async def health_check() -> dict[str, Any]:
        """Health check endpoint returning application status."""
        settings = get_settings()
        worker = get_worker()
        worker_status = await worker.get_status()

        issues: list[str] = []
        if settings.vehicle_refresh_auto_start and not worker_status["running"]:
            issues.append("Vehicle refresh worker is not running")
        if worker_status["last_error"]:
            issues.append("Last vehicle refresh failed: " + worker_status["last_error"])

        return {
            "service": settings.app_name,
            "status": "degraded" if issues else "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": {
                "vehicles": {
                    "workerRunning": worker_status["running"],
                    "refreshCount": worker_status["refresh_count"],
                    "lastRefreshAt": worker_status["last_refresh_at"],
                    "vehicleCount": worker_status["vehicle_count"],
                },
                "stopCatalog": {
                    "entries": len(app.state.stop_catalog),
                    "usedFallback": app.state.stop_catalog.used_fallback,
                },
            },
            "issues": issues,
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled exception", exc_info=exc, path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
            },
        )

    return app


app = create_app()
