"""Rotation engine - the spin state machine.

Flow:
1. start_spin(): pick a duration, start the ticker (SPINNING)
2. Each tick advances the angle and notifies render ports
3. Ticker expiry: pick the sector under the indicator (RESOLVING)
4. Resolver yields text now, or an image later (SETTLED)

Every spin and reset bumps a generation counter. Callbacks carry the
generation they were scheduled under and are dropped when it no longer
matches, which is how an abandoned image fetch is ignored.
"""

import logging
import random
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from spinwheel.config.settings import WheelSettings
from spinwheel.core.errors import InvalidOperation
from spinwheel.core.events import Event, EventBus, EventType
from spinwheel.core.state import (
    EMPTY,
    IMAGE_PENDING,
    PayloadKind,
    PhaseMachine,
    ResultPayload,
    RotationState,
    SpinPhase,
    describe_payload,
)
from spinwheel.fetch.base import ImageFetcher
from spinwheel.timing.base import Scheduler, TimerHandle
from spinwheel.wheel.layout import SizeParams
from spinwheel.wheel.ports import RenderPort
from spinwheel.wheel.resolver import OutcomeResolver
from spinwheel.wheel.sectors import Sector, normalize_angle, sector_at, winning_sector

logger = logging.getLogger(__name__)

ONE_SECOND_MS = 1000


class RotationEngine:
    """Owns rotation angle, spin phase, result payload and size.

    Public operations never raise; invalid calls are logged and ignored.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        fetcher: Optional[ImageFetcher] = None,
        resolver: Optional[OutcomeResolver] = None,
        settings: Optional[WheelSettings] = None,
        event_bus: Optional[EventBus] = None,
        rng: Optional[random.Random] = None,
        size: Optional[SizeParams] = None,
    ):
        if resolver is None:
            if fetcher is None:
                raise ValueError("RotationEngine needs a fetcher or a resolver")
            resolver = OutcomeResolver(fetcher)

        self.settings = settings or WheelSettings()
        self._scheduler = scheduler
        self._resolver = resolver
        self._event_bus = event_bus
        self._rng = rng or random.Random()
        self._render_ports: List[RenderPort] = []

        # Lifecycle
        self._phases = PhaseMachine()
        self._phases.add_listener(self._on_phase_changed)
        self._generation = 0
        self._timer: Optional[TimerHandle] = None

        # Observable state
        self._state = RotationState(start_angle=self.settings.default_start_angle)
        self._payload: ResultPayload = EMPTY
        self._size = size or SizeParams()

        # Last sector picked; fallback when angle matching comes up empty
        self._cached_winner: Optional[Sector] = None

        # Spin bookkeeping
        self._spin_duration_ms = 0
        self._ticks_delivered = 0

    # Queries
    @property
    def state(self) -> RotationState:
        """Current rotation snapshot."""
        return self._state

    @property
    def payload(self) -> ResultPayload:
        """Current result payload."""
        return self._payload

    @property
    def size(self) -> SizeParams:
        return self._size

    @property
    def phase(self) -> SpinPhase:
        return self._phases.phase

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def spin_duration_ms(self) -> int:
        """Duration picked for the current (or last) spin."""
        return self._spin_duration_ms

    @property
    def ticks_delivered(self) -> int:
        """Ticks applied during the current (or last) spin."""
        return self._ticks_delivered

    def add_render_port(self, port: RenderPort) -> None:
        """Register a render port and send it the current snapshot."""
        self._render_ports.append(port)
        self._notify_port(port)

    def remove_render_port(self, port: RenderPort) -> None:
        if port in self._render_ports:
            self._render_ports.remove(port)

    # Host operations
    def start_spin(self) -> bool:
        """Start a spin. Returns False (and does nothing) while spinning."""
        if self._phases.phase is SpinPhase.SPINNING:
            logger.debug("start_spin ignored: wheel already spinning")
            return False

        duration_ms = self._pick_duration_ms()

        self._scheduler.cancel(self._timer)
        self._timer = None

        self._generation += 1
        self._payload = EMPTY
        self._spin_duration_ms = duration_ms
        self._ticks_delivered = 0

        self._phases.transition(SpinPhase.SPINNING)
        self._commit(winning_sector=None)

        generation = self._generation
        self._timer = self._scheduler.schedule_ticks(
            self.settings.tick_interval_ms,
            duration_ms,
            partial(self._on_tick, generation),
            partial(self._on_spin_timer_expire, generation),
        )

        logger.info(f"Wheel spinning for {duration_ms}ms (generation {generation})")
        self._emit(EventType.SPIN_STARTED, {"duration_ms": duration_ms, "generation": generation})
        self._notify()
        return True

    def reset(self) -> None:
        """Stop everything and return to the initial rotation."""
        self._scheduler.cancel(self._timer)
        self._timer = None

        self._generation += 1
        self._payload = EMPTY
        self._phases.reset()
        self._state = RotationState(
            start_angle=self.settings.default_start_angle,
            phase=SpinPhase.IDLE,
            winning_sector=None,
            generation=self._generation,
        )

        logger.info("Wheel reset")
        self._emit(EventType.WHEEL_RESET, {"generation": self._generation})
        self._notify()

    def resize(self, size: int) -> bool:
        """Recompute size-derived dimensions. Phase and angle are untouched."""
        try:
            self._check_size(size)
        except InvalidOperation as e:
            logger.warning(f"resize ignored: {e}")
            return False

        self._size = SizeParams.from_size(size)
        logger.debug(f"Wheel resized to {size} (radius {self._size.drum_radius})")
        self._notify()
        return True

    # Scheduler callbacks
    def _on_tick(self, generation: int) -> None:
        if not self._is_current(generation, SpinPhase.SPINNING, "tick"):
            return

        self._ticks_delivered += 1
        self._commit(start_angle=normalize_angle(self._state.start_angle + self.settings.angle_step))
        self._notify()

    def _on_spin_timer_expire(self, generation: int) -> None:
        if not self._is_current(generation, SpinPhase.SPINNING, "expiry"):
            return

        self._timer = None
        self._phases.transition(SpinPhase.RESOLVING)

        winner = self._pick_winner(self._state.start_angle)
        self._commit(winning_sector=winner)

        logger.info(
            f"Wheel stopped at {self._state.start_angle:.1f} deg "
            f"after {self._ticks_delivered} ticks: {winner.color.name}"
        )
        self._emit(EventType.SPIN_RESOLVING, {"sector": winner.color.name, "generation": generation})

        outcome = self._resolver.resolve(winner)
        if isinstance(outcome, ResultPayload):
            self._resolution_complete(generation, outcome)
            return

        # Image sector: result arrives later through the scheduler
        self._payload = IMAGE_PENDING
        self._emit(EventType.FETCH_START, {"sector": winner.color.name, "generation": generation})
        self._notify()
        self._scheduler.run_async(outcome, partial(self._resolution_complete, generation))

    def _resolution_complete(self, generation: int, payload: ResultPayload) -> None:
        if not self._is_current(generation, SpinPhase.RESOLVING, "result"):
            return

        self._payload = payload
        self._phases.transition(SpinPhase.SETTLED)
        self._commit()

        data = describe_payload(payload)
        if payload.kind is PayloadKind.IMAGE:
            self._emit(EventType.FETCH_COMPLETE, data)
        elif payload.kind is PayloadKind.FAILED:
            self._emit(EventType.FETCH_ERROR, data)

        logger.info(f"Wheel settled: {data}")
        self._emit(EventType.SPIN_SETTLED, dict(data, sector=self._state.winning_sector.color.name))
        self._notify()

    # Helpers
    def _pick_duration_ms(self) -> int:
        seconds = self._rng.randint(self.settings.min_spin_seconds, self.settings.max_spin_seconds)
        return seconds * ONE_SECOND_MS

    def _pick_winner(self, start_angle: float) -> Sector:
        winner = winning_sector(start_angle, self.settings.indicator_angle)
        if winner is None:
            winner = self._cached_winner or sector_at(start_angle, self.settings.indicator_angle)
            logger.warning(f"No sector matched at {start_angle} deg, using {winner.color.name}")
        self._cached_winner = winner
        return winner

    def _is_current(self, generation: int, expected: SpinPhase, what: str) -> bool:
        """Drop callbacks from an abandoned spin or arriving in the wrong phase."""
        try:
            if generation != self._generation:
                raise InvalidOperation(
                    f"stale {what} (generation {generation}, current {self._generation})"
                )
            if self._phases.phase is not expected:
                raise InvalidOperation(f"{what} during {self._phases.phase.name}")
        except InvalidOperation as e:
            logger.debug(f"Discarding {e}")
            return False
        return True

    @staticmethod
    def _check_size(size: Any) -> None:
        if isinstance(size, bool) or not isinstance(size, int):
            raise InvalidOperation(f"size must be an integer, got {size!r}")
        if size <= 0:
            raise InvalidOperation(f"size must be positive, got {size}")

    def _commit(self, **changes: Any) -> None:
        """Replace the snapshot in one step."""
        fields: Dict[str, Any] = {
            "start_angle": self._state.start_angle,
            "winning_sector": self._state.winning_sector,
        }
        fields.update(changes)
        self._state = RotationState(
            phase=self._phases.phase,
            generation=self._generation,
            **fields,
        )

    def _notify(self) -> None:
        for port in list(self._render_ports):
            self._notify_port(port)

    def _notify_port(self, port: RenderPort) -> None:
        try:
            port.on_state_changed(self._state, self._payload, self._size)
        except Exception as e:
            logger.error(f"Error in render port: {e}")

    def _on_phase_changed(self, old: SpinPhase, new: SpinPhase) -> None:
        self._emit(EventType.STATE_CHANGED, {"from": old.name, "to": new.name})

    def _emit(self, event_type: EventType, data: Dict[str, Any]) -> None:
        if self._event_bus is not None:
            self._event_bus.emit(Event(event_type, data=data, source="engine"))


def bind_controls(event_bus: EventBus, engine: RotationEngine) -> List[Callable[[], None]]:
    """Wire host input events to the engine's operations.

    Returns the unsubscribe functions.
    """

    def on_spin(event: Event) -> None:
        engine.start_spin()

    def on_reset(event: Event) -> None:
        engine.reset()

    def on_size(event: Event) -> None:
        engine.resize(event.data.get("size"))

    return [
        event_bus.subscribe(EventType.SPIN_PRESSED, on_spin),
        event_bus.subscribe(EventType.RESET_PRESSED, on_reset),
        event_bus.subscribe(EventType.SIZE_CHANGED, on_size),
    ]
