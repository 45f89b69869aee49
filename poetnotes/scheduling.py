"""Named periodic tasks running on the asyncio event loop."""

import asyncio
import contextlib
from typing import Callable

from loguru import logger


class RepeatingTask:
    """Run a synchronous callback every ``interval_seconds``.

    The callback runs on the event loop thread, so it never interleaves with
    other synchronous work such as store transitions.
    """

    def __init__(self, name: str, interval_seconds: float, callback: Callable[[], object]) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"Interval for task {name} must be positive")
        self.name = name
        self.interval_seconds = interval_seconds
        self._callback = callback
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the task on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)
        logger.debug(f"Started task {self.name} every {self.interval_seconds}s")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.debug(f"Stopped task {self.name}")

    def tick(self) -> None:
        """Run the callback once, logging instead of ending the loop on error."""
        try:
            self._callback()
        except Exception:
            logger.exception(f"Task {self.name} failed")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            self.tick()
