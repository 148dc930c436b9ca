"""asyncio-backed scheduler used by the simulator and real hosts."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from spinwheel.timing.base import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncioTimerHandle(TimerHandle):
    """Wraps the task that drives one countdown."""

    def __init__(self, task: asyncio.Task):
        self._task = task

    @property
    def active(self) -> bool:
        return not self._task.done()

    def cancel(self) -> None:
        self._task.cancel()


class AsyncioScheduler(Scheduler):
    """Schedules ticks and background work on an asyncio event loop.

    Must be used from within a running loop (or given one explicitly).
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        # Strong references so background tasks are not garbage collected
        self._tasks: set[asyncio.Task] = set()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def _track(self, task: asyncio.Task) -> asyncio.Task:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def schedule_ticks(
        self,
        interval_ms: int,
        duration_ms: int,
        on_tick: Callable[[], None],
        on_finish: Callable[[], None],
    ) -> TimerHandle:
        ticks = max(0, int(duration_ms // interval_ms))
        task = self._get_loop().create_task(
            self._countdown(interval_ms / 1000.0, duration_ms / 1000.0, ticks, on_tick, on_finish)
        )
        return AsyncioTimerHandle(self._track(task))

    async def _countdown(
        self,
        interval: float,
        duration: float,
        ticks: int,
        on_tick: Callable[[], None],
        on_finish: Callable[[], None],
    ) -> None:
        loop = asyncio.get_running_loop()
        start = loop.time()

        for n in range(1, ticks + 1):
            # Sleep to an absolute deadline so lateness does not accumulate
            delay = start + n * interval - loop.time()
            await asyncio.sleep(max(0.0, delay))
            on_tick()

        # The last tick can land short of the duration; finish never does
        await asyncio.sleep(max(0.0, start + duration - loop.time()))
        on_finish()

    def run_async(self, work: Awaitable[T], on_done: Callable[[T], Any]) -> None:
        task = self._track(asyncio.ensure_future(work, loop=self._get_loop()))

        def _deliver(t: asyncio.Task) -> None:
            if t.cancelled():
                logger.debug("Background work cancelled")
                return
            error = t.exception()
            if error is not None:
                logger.error(f"Background work failed: {error!r}")
                return
            on_done(t.result())

        task.add_done_callback(_deliver)

    async def close(self) -> None:
        """Cancel every outstanding ticker and background task."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.debug(f"Scheduler closed ({len(tasks)} tasks cancelled)")
