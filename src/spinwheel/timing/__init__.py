"""Clock and scheduling for SPINWHEEL."""

from .base import Scheduler, TimerHandle
from .asyncio_scheduler import AsyncioScheduler

__all__ = ["Scheduler", "TimerHandle", "AsyncioScheduler"]
