"""
Spin lifecycle state for SPINWHEEL.

Phases:
    IDLE: Wheel at rest after start-up or reset
    SPINNING: Ticker is advancing the angle
    RESOLVING: Winning sector picked, result being produced
    SETTLED: Result payload is final

The engine keeps a frozen ``RotationState`` snapshot and replaces it on
every mutation, so observers never see a half-updated state.
"""

from __future__ import annotations

from enum import Enum, auto
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional
import logging

if TYPE_CHECKING:
    from spinwheel.fetch.base import ImageHandle
    from spinwheel.wheel.sectors import Sector

logger = logging.getLogger(__name__)


class SpinPhase(Enum):
    """Spin lifecycle phases."""
    IDLE = auto()
    SPINNING = auto()
    RESOLVING = auto()
    SETTLED = auto()


@dataclass(frozen=True)
class RotationState:
    """Read-only snapshot of the wheel's rotation."""
    start_angle: float
    phase: SpinPhase = SpinPhase.IDLE
    winning_sector: Optional["Sector"] = None
    generation: int = 0

    @property
    def is_spinning(self) -> bool:
        return self.phase == SpinPhase.SPINNING


# Result payloads

class PayloadKind(Enum):
    """Tag for the result payload variants."""
    EMPTY = auto()
    TEXT = auto()
    IMAGE_PENDING = auto()
    IMAGE = auto()
    FAILED = auto()


TERMINAL_KINDS = frozenset({PayloadKind.TEXT, PayloadKind.IMAGE, PayloadKind.FAILED})


@dataclass(frozen=True)
class ResultPayload:
    """Base for the outcome of a spin."""

    kind = PayloadKind.EMPTY

    @property
    def is_terminal(self) -> bool:
        return self.kind in TERMINAL_KINDS


@dataclass(frozen=True)
class EmptyResult(ResultPayload):
    """No result yet, or cleared by reset / new spin."""
    kind = PayloadKind.EMPTY


@dataclass(frozen=True)
class TextResult(ResultPayload):
    """Resolved text result."""
    value: str = ""
    kind = PayloadKind.TEXT


@dataclass(frozen=True)
class ImagePending(ResultPayload):
    """Image fetch in flight."""
    kind = PayloadKind.IMAGE_PENDING


@dataclass(frozen=True)
class ImageResult(ResultPayload):
    """Resolved image."""
    handle: Optional["ImageHandle"] = None
    kind = PayloadKind.IMAGE


@dataclass(frozen=True)
class FailedResult(ResultPayload):
    """Image fetch failed; still a legitimate terminal payload."""
    reason: str = ""
    kind = PayloadKind.FAILED


EMPTY = EmptyResult()
IMAGE_PENDING = ImagePending()


class PhaseMachine:
    """
    Validates phase transitions and notifies listeners.

    ``reset`` is always allowed and returns the machine to IDLE.
    """

    VALID_TRANSITIONS: list[tuple[SpinPhase, SpinPhase]] = [
        # Spin start
        (SpinPhase.IDLE, SpinPhase.SPINNING),
        (SpinPhase.SETTLED, SpinPhase.SPINNING),
        (SpinPhase.RESOLVING, SpinPhase.SPINNING),  # Abandons pending fetch

        # Timer expiry
        (SpinPhase.SPINNING, SpinPhase.RESOLVING),

        # Result stored
        (SpinPhase.RESOLVING, SpinPhase.SETTLED),
    ]

    def __init__(self, initial_phase: SpinPhase = SpinPhase.IDLE) -> None:
        self._phase = initial_phase
        self._listeners: list[Callable[[SpinPhase, SpinPhase], None]] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)

    @property
    def phase(self) -> SpinPhase:
        """Get current phase."""
        return self._phase

    def can_transition(self, to_phase: SpinPhase) -> bool:
        """Check if transition to given phase is valid."""
        return (self._phase, to_phase) in self._valid_transitions

    def transition(self, to_phase: SpinPhase) -> bool:
        """
        Attempt to transition to a new phase.

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_phase):
            logger.warning(
                f"Invalid transition: {self._phase.name} -> {to_phase.name}"
            )
            return False

        old_phase = self._phase
        self._phase = to_phase
        logger.debug(f"Phase transition: {old_phase.name} -> {to_phase.name}")
        self._notify(old_phase, to_phase)
        return True

    def reset(self) -> None:
        """Return to IDLE from any phase."""
        old_phase = self._phase
        self._phase = SpinPhase.IDLE
        self._notify(old_phase, SpinPhase.IDLE)

    def add_listener(self, callback: Callable[[SpinPhase, SpinPhase], None]) -> None:
        """Add a phase change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[SpinPhase, SpinPhase], None]) -> None:
        """Remove a phase change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self, old_phase: SpinPhase, new_phase: SpinPhase) -> None:
        for listener in self._listeners:
            try:
                listener(old_phase, new_phase)
            except Exception as e:
                logger.error(f"Error in phase listener: {e}")


def describe_payload(payload: ResultPayload) -> dict[str, Any]:
    """Flatten a payload into plain data for events and logs."""
    data: dict[str, Any] = {"kind": payload.kind.name}
    if isinstance(payload, TextResult):
        data["text"] = payload.value
    elif isinstance(payload, FailedResult):
        data["reason"] = payload.reason
    elif isinstance(payload, ImageResult) and payload.handle is not None:
        data["size"] = (payload.handle.width, payload.handle.height)
    return data
