"""Standalone worker running the periodic order sync and status updates."""

import asyncio

import structlog

from order_sync_service.config import get_settings
from order_sync_service.dependencies import build_container
from order_sync_service.logging_config import configure_logging
from sync_worker.scheduler import Scheduler

logger = structlog.get_logger()


async def serve() -> None:
    settings = get_settings()
    configure_logging(settings)
    container = build_container(settings)
    scheduler = Scheduler(container.order_sync, container.status_propagation, settings)

    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        await scheduler.stop()
        await container.close()


def run() -> None:
    """Run the sync worker until interrupted."""
    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        logger.info("Sync worker interrupted")


if __name__ == "__main__":
    run()
