"""
Event bus for SPINWHEEL.

Two paths share one set of subscribers:
    emit(): engine lifecycle events, delivered immediately
    queue_event() / process_queue(): host input, delivered once per frame
        so key presses never re-enter the engine from inside a callback
"""

from dataclasses import dataclass, field
from typing import Any, Callable
from enum import Enum, auto
import logging
import time
from collections import defaultdict, deque

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Built-in event types."""
    # Input events
    SPIN_PRESSED = auto()
    RESET_PRESSED = auto()
    SIZE_CHANGED = auto()

    # Lifecycle events
    SPIN_STARTED = auto()
    SPIN_RESOLVING = auto()
    SPIN_SETTLED = auto()
    WHEEL_RESET = auto()
    STATE_CHANGED = auto()

    # Fetch events
    FETCH_START = auto()
    FETCH_COMPLETE = auto()
    FETCH_ERROR = auto()

    SHUTDOWN = auto()


@dataclass
class Event:
    """
    One published event.

    Attributes:
        type: What happened
        data: Event payload (plain values only)
        source: Component that published it
        timestamp: Wall-clock creation time
    """
    type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "system"
    timestamp: float = field(default_factory=time.time)


Handler = Callable[[Event], None]


class EventBus:
    """Publish/subscribe hub between the engine, the host and observers."""

    def __init__(self, history_limit: int = 100) -> None:
        self._handlers: dict[EventType, list[Handler]] = defaultdict(list)
        self._global_handlers: list[Handler] = []
        self._pending: deque[Event] = deque()
        self._history: deque[Event] = deque(maxlen=history_limit)

    def subscribe(self, event_type: EventType, handler: Handler) -> Callable[[], None]:
        """
        Subscribe to one event type.

        Returns:
            Function that removes the subscription
        """
        self._handlers[event_type].append(handler)
        logger.debug(f"Handler subscribed to {event_type.name}")

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        """Subscribe to every event type."""
        self._global_handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._global_handlers:
                self._global_handlers.remove(handler)

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Deliver an event to its subscribers now."""
        self._history.append(event)
        for handler in self._handlers.get(event.type, []) + self._global_handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in {event.type.name} handler: {e}")

    def queue_event(self, event: Event) -> None:
        """Hold an event until the next ``process_queue`` call."""
        self._pending.append(event)

    def process_queue(self) -> int:
        """Deliver queued events in arrival order. Returns how many ran.

        Events queued by a handler during this call wait for the next one.
        """
        count = len(self._pending)
        for _ in range(count):
            self.emit(self._pending.popleft())
        return count

    @property
    def pending(self) -> int:
        return len(self._pending)

    def get_history(self, event_type: EventType | None = None, limit: int = 10) -> list[Event]:
        """Most recent delivered events, oldest first."""
        history = list(self._history)
        if event_type is not None:
            history = [e for e in history if e.type == event_type]
        return history[-limit:]

    def clear_history(self) -> None:
        self._history.clear()


# Input event constructors
def spin_pressed_event(source: str = "button") -> Event:
    return Event(EventType.SPIN_PRESSED, source=source)


def reset_pressed_event(source: str = "button") -> Event:
    return Event(EventType.RESET_PRESSED, source=source)


def size_changed_event(size: int, source: str = "slider") -> Event:
    """Slider moved to ``size``."""
    return Event(EventType.SIZE_CHANGED, data={"size": size}, source=source)
