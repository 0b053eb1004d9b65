"""
Cooperative tick scheduler.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime

from loguru import logger

from papertrade.core.constants import DEFAULT_TICK_INTERVAL_SECONDS

from .session import SimulationSession, TickReport


class Scheduler:
    """Drives SimulationSession.tick on an asyncio loop.

    Each tick runs to completion in a worker thread under the session's tick
    lock. stop() only prevents the next tick from starting.
    """

    def __init__(
        self,
        session: SimulationSession,
        on_tick: Callable[[TickReport], None] | None = None,
    ) -> None:
        self.session = session
        self.on_tick = on_tick
        self.ticks_run = 0
        self._task: asyncio.Task | None = None
        self._stop_event: asyncio.Event | None = None

    @property
    def is_running(self) -> bool:
        """Check if the background loop is active."""
        return self._task is not None and not self._task.done()

    async def run_once(self, now: datetime | None = None) -> TickReport:
        """Run a single tick immediately."""
        report = await asyncio.to_thread(self.session.tick, now)
        self.ticks_run += 1
        if self.on_tick is not None:
            self.on_tick(report)
        return report

    def start(self, interval: float = DEFAULT_TICK_INTERVAL_SECONDS) -> None:
        """Start ticking every interval seconds on the running loop."""
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval}")
        if self.is_running:
            logger.warning("Scheduler already running")
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(self._run(interval, self._stop_event))
        logger.info(f"Scheduler started with {interval}s interval")

    async def _run(self, interval: float, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await self.run_once()
            except Exception:
                logger.exception("Tick failed")
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
            except TimeoutError:
                pass

    async def stop(self) -> None:
        """Stop after the in-flight tick completes. Safe to call repeatedly."""
        if self._stop_event is not None:
            self._stop_event.set()
        task, self._task = self._task, None
        if task is not None:
            await task
            logger.info(f"Scheduler stopped after {self.ticks_run} ticks")
