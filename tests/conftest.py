import asyncio
import random

import numpy as np
import pytest

from spinwheel.config.settings import WheelSettings
from spinwheel.core.errors import FetchError
from spinwheel.core.events import EventBus
from spinwheel.fetch.base import ImageFetcher, ImageHandle
from spinwheel.timing.base import Scheduler, TimerHandle
from spinwheel.wheel.engine import RotationEngine
from spinwheel.wheel.ports import RenderPort


class FakeTimer(TimerHandle):
    def __init__(self, interval_ms, duration_ms, on_tick, on_finish, start_ms):
        self.interval_ms = interval_ms
        self.duration_ms = duration_ms
        self.total_ticks = duration_ms // interval_ms
        self.on_tick = on_tick
        self.on_finish = on_finish
        self.start_ms = start_ms
        self.ticks_fired = 0
        self.finished = False
        self.cancelled = False

    @property
    def active(self):
        return not (self.finished or self.cancelled)

    def cancel(self):
        self.cancelled = True

    def fire_due(self, now_ms):
        while (
            self.active
            and self.ticks_fired < self.total_ticks
            and self.start_ms + (self.ticks_fired + 1) * self.interval_ms <= now_ms
        ):
            self.ticks_fired += 1
            self.on_tick()
        if self.active and self.ticks_fired >= self.total_ticks and self.start_ms + self.duration_ms <= now_ms:
            self.finished = True
            self.on_finish()


class FakeScheduler(Scheduler):
    """Deterministic clock: time only moves when the test calls advance()."""

    def __init__(self):
        self.now_ms = 0
        self.timers = []
        self.pending = []

    def schedule_ticks(self, interval_ms, duration_ms, on_tick, on_finish):
        timer = FakeTimer(interval_ms, duration_ms, on_tick, on_finish, self.now_ms)
        self.timers.append(timer)
        return timer

    def run_async(self, work, on_done):
        self.pending.append((work, on_done))

    def advance(self, ms):
        for _ in range(int(ms)):
            self.now_ms += 1
            for timer in list(self.timers):
                timer.fire_due(self.now_ms)

    @property
    def active_timers(self):
        return [t for t in self.timers if t.active]

    def complete_next(self):
        """Run the oldest pending background job to completion."""
        work, on_done = self.pending.pop(0)
        on_done(asyncio.run(_await(work)))

    def complete_all(self):
        while self.pending:
            self.complete_next()

    def discard_pending(self):
        for work, _ in self.pending:
            if hasattr(work, "close"):
                work.close()
        self.pending.clear()


async def _await(work):
    return await work


class FixedRandom(random.Random):
    """randint always answers the same number of seconds."""

    def __init__(self, seconds):
        super().__init__(0)
        self.seconds = seconds

    def randint(self, a, b):
        assert a <= self.seconds <= b
        return self.seconds


class RecordingPort(RenderPort):
    def __init__(self):
        self.calls = []

    def on_state_changed(self, state, payload, size):
        self.calls.append((state, payload, size))

    @property
    def last(self):
        return self.calls[-1]


def make_handle(width=32, height=24, color=(10, 200, 30)):
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[:, :] = color
    return ImageHandle(pixels=pixels, source="test")


class StubFetcher(ImageFetcher):
    def __init__(self, handle=None):
        self.handle = handle or make_handle()
        self.calls = 0

    async def fetch_image(self):
        self.calls += 1
        return self.handle


class FailingFetcher(ImageFetcher):
    def __init__(self, message="connection refused"):
        self.message = message
        self.calls = 0

    async def fetch_image(self):
        self.calls += 1
        raise FetchError(self.message)


@pytest.fixture
def scheduler():
    fake = FakeScheduler()
    yield fake
    fake.discard_pending()


@pytest.fixture
def fetcher():
    return StubFetcher()


@pytest.fixture
def port():
    return RecordingPort()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def make_engine(scheduler, fetcher, port, event_bus):
    """Factory for an engine whose spins last ``seconds`` seconds."""

    def _make(seconds=1, fetcher=fetcher, settings=None):
        engine = RotationEngine(
            scheduler=scheduler,
            fetcher=fetcher,
            settings=settings or WheelSettings(),
            event_bus=event_bus,
            rng=FixedRandom(seconds),
        )
        engine.add_render_port(port)
        return engine

    return _make
