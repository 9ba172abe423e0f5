"""Interval scheduler for the two periodic engines.

Both engines run as APScheduler interval jobs. Overlapping instances are
allowed through to the engines so that each engine's run guard is the single
place where a tick arriving during a previous pass gets dropped.
"""

from collections.abc import Awaitable, Callable

import structlog
from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from order_sync_service.config import Settings
from order_sync_service.services.order_sync import OrderSyncService
from order_sync_service.services.status_propagation import StatusPropagationService
from order_sync_service.services.windows import SyncWindow
from sync_worker.tasks.sync_orders import sync_orders_from_marketplace
from sync_worker.tasks.update_order_status import update_order_status_from_marketplace

logger = structlog.get_logger()

ORDER_SYNC_JOB = "order_sync"
STATUS_PROPAGATION_JOB = "status_propagation"


class Scheduler:
    """Runs order sync and status propagation on independent timers."""

    def __init__(
        self,
        order_sync: OrderSyncService,
        status_propagation: StatusPropagationService,
        settings: Settings,
    ):
        self.order_sync = order_sync
        self.status_propagation = status_propagation
        self.settings = settings
        self.window = SyncWindow(settings.scheduler_window)
        self._scheduler = AsyncIOScheduler(timezone=settings.timezone)

    @property
    def running(self) -> bool:
        return self._scheduler.running

    @property
    def jobs(self) -> list[Job]:
        return self._scheduler.get_jobs()

    def start(self) -> None:
        """Register both interval jobs and start the scheduler on the running loop."""
        if self.running:
            return
        job_defaults = {
            "max_instances": 2,
            "coalesce": True,
            "replace_existing": True,
        }
        self._scheduler.add_job(
            self.sync_orders,
            "interval",
            seconds=self.settings.order_sync_interval_seconds,
            id=ORDER_SYNC_JOB,
            **job_defaults,
        )
        self._scheduler.add_job(
            self.update_order_status,
            "interval",
            seconds=self.settings.status_update_interval_seconds,
            id=STATUS_PROPAGATION_JOB,
            **job_defaults,
        )
        self._scheduler.start()
        logger.info(
            "Scheduler started",
            order_sync_interval=self.settings.order_sync_interval_seconds,
            status_update_interval=self.settings.status_update_interval_seconds,
            window=self.window.value,
        )

    async def stop(self) -> None:
        if not self.running:
            return
        self._scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")

    async def sync_orders(self) -> None:
        await self._run_tick(
            ORDER_SYNC_JOB,
            lambda: sync_orders_from_marketplace(self.order_sync, self.window),
        )

    async def update_order_status(self) -> None:
        await self._run_tick(
            STATUS_PROPAGATION_JOB,
            lambda: update_order_status_from_marketplace(self.status_propagation, self.window),
        )

    async def _run_tick(self, name: str, tick: Callable[[], Awaitable[dict]]) -> None:
        try:
            summary = await tick()
            logger.debug("Scheduled tick finished", task=name, summary=summary)
        except Exception as e:
            logger.error("Scheduled tick failed", task=name, error=str(e))
