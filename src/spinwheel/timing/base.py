"""
Abstract scheduler interface.

The engine never touches a clock directly: ticks, the spin expiry and
background work all go through a ``Scheduler`` so tests can swap in a
fake clock.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")


class TimerHandle(ABC):
    """Handle to a running ticker."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """True until the ticker finishes or is cancelled."""
        ...

    @abstractmethod
    def cancel(self) -> None:
        """Stop the ticker; no further ticks or finish callback."""
        ...


class Scheduler(ABC):
    """Periodic ticks plus a terminal expiry, and async work runner."""

    @abstractmethod
    def schedule_ticks(
        self,
        interval_ms: int,
        duration_ms: int,
        on_tick: Callable[[], None],
        on_finish: Callable[[], None],
    ) -> TimerHandle:
        """
        Start a countdown ticker.

        ``on_tick`` is called ``duration_ms // interval_ms`` times, one
        interval apart, then ``on_finish`` is called once. Delivery may be
        late, never early, and never out of order.
        """
        ...

    def cancel(self, handle: TimerHandle | None) -> None:
        """Cancel a ticker; ``None`` or an already finished one is ignored."""
        if handle is not None and handle.active:
            handle.cancel()

    @abstractmethod
    def run_async(
        self,
        work: Awaitable[T],
        on_done: Callable[[T], Any],
    ) -> None:
        """Run ``work`` in the background and pass its result to ``on_done``."""
        ...

    async def close(self) -> None:
        """Stop outstanding work. Default: nothing to stop."""
        return None
