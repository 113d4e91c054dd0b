# -*- coding: utf-8 -*-
"""
Polling scheduler.

Invokes an async job immediately and then at a fixed start-to-start cadence.
Each invocation completes before the next is scheduled.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional


logger = logging.getLogger(__name__)


class Poller:
    """Re-runs a job function every ``interval_seconds``."""

    def __init__(self, job: Callable[[], Awaitable[object]], interval_seconds: float,
                 max_runs: Optional[int] = None):
        """
        Initialize poller.

        Parameters
        ----------
        job : callable
            Coroutine function called with no arguments on every tick
        interval_seconds : float
            Seconds between the starts of consecutive runs
        max_runs : int or None, optional
            Stop after this many runs (None = run until stop())
        """
        if interval_seconds < 0:
            raise ValueError(f"interval_seconds must be >= 0, got {interval_seconds}")
        self.job = job
        self.interval_seconds = interval_seconds
        self.max_runs = max_runs
        self.runs = 0
        self.failures = 0
        self._stop_event: Optional[asyncio.Event] = None

    def stop(self):
        """Request the loop to exit after the current run."""
        if self._stop_event is not None:
            self._stop_event.set()

    async def run(self):
        """Run the polling loop until stopped or max_runs is reached."""
        self._stop_event = asyncio.Event()
        logger.info(f"Polling every {self.interval_seconds}s")

        while not self._stop_event.is_set():
            started = time.monotonic()
            try:
                await self.job()
            except Exception as e:
                self.failures += 1
                logger.error(f"Poll failed: {e}", exc_info=True)
            self.runs += 1

            if self.max_runs is not None and self.runs >= self.max_runs:
                break

            remaining = self.interval_seconds - (time.monotonic() - started)
            if remaining > 0:
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=remaining)
                except asyncio.TimeoutError:
                    pass

        logger.info(f"Polling stopped after {self.runs} run(s), {self.failures} failed")
