"""Per-engine guard that drops overlapping passes."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog

logger = structlog.get_logger()


class RunGuard:
    """Single-slot guard owned by one engine instance.

    ``acquire()`` yields True when the slot was taken and False when a pass
    is already running. The slot is released on every exit path.
    """

    def __init__(self, name: str):
        self.name = name
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[bool]:
        if self._running:
            logger.warning("Pass already running, tick dropped", engine=self.name)
            yield False
            return

        self._running = True
        try:
            yield True
        finally:
            self._running = False
