"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from order_sync_service import __version__
from order_sync_service.api.v1.router import api_router
from order_sync_service.config import get_settings
from order_sync_service.dependencies import get_container
from order_sync_service.infrastructure.errors import (
    ConfigurationError,
    PlatformError,
    TransportError,
)
from order_sync_service.logging_config import configure_logging
from sync_worker.scheduler import Scheduler

configure_logging(get_settings())

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    settings = get_settings()
    logger.info(
        "Starting order sync service",
        app_env=settings.app_env,
        debug=settings.debug,
        scheduler_enabled=settings.scheduler_enabled,
    )

    scheduler: Scheduler | None = None
    if settings.scheduler_enabled:
        container = get_container()
        scheduler = Scheduler(
            container.order_sync, container.status_propagation, settings
        )
        scheduler.start()

    yield

    if scheduler is not None:
        await scheduler.stop()
    if get_container.cache_info().currsize:
        await get_container().close()
    logger.info("Shutting down order sync service")


async def transport_error_handler(request: Request, exc: TransportError) -> JSONResponse:
    return JSONResponse(
        status_code=502,
        content={
            "detail": str(exc),
            "platform": exc.platform,
            "upstream_status": exc.status_code,
            "upstream_body": exc.body,
        },
    )


async def platform_error_handler(request: Request, exc: PlatformError) -> JSONResponse:
    return JSONResponse(
        status_code=502,
        content={"detail": str(exc), "platform": exc.platform, "errors": exc.messages},
    )


async def configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    logger.error("Platform not configured", platform=exc.platform, missing=exc.missing)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="KuantoKusta Order Sync API",
        description="Synchronizes KuantoKusta orders into Shopify and issues Moloni invoices",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_exception_handler(TransportError, transport_error_handler)
    app.add_exception_handler(PlatformError, platform_error_handler)
    app.add_exception_handler(ConfigurationError, configuration_error_handler)

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


def run() -> None:
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "order_sync_service.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        workers=1,
    )


if __name__ == "__main__":
    run()
