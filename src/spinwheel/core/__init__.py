"""Core framework components for SPINWHEEL."""

from .state import (
    SpinPhase,
    RotationState,
    PhaseMachine,
    PayloadKind,
    ResultPayload,
    EmptyResult,
    TextResult,
    ImagePending,
    ImageResult,
    FailedResult,
    EMPTY,
    IMAGE_PENDING,
)
from .events import EventBus, Event, EventType
from .errors import SpinWheelError, FetchError, InvalidOperation

__all__ = [
    "SpinPhase",
    "RotationState",
    "PhaseMachine",
    "PayloadKind",
    "ResultPayload",
    "EmptyResult",
    "TextResult",
    "ImagePending",
    "ImageResult",
    "FailedResult",
    "EMPTY",
    "IMAGE_PENDING",
    "EventBus",
    "Event",
    "EventType",
    "SpinWheelError",
    "FetchError",
    "InvalidOperation",
]
