"""Exception types for SPINWHEEL."""


class SpinWheelError(Exception):
    """Base class for all wheel errors."""


class FetchError(SpinWheelError):
    """Image could not be fetched or decoded.

    Covers network failures, timeouts, non-2xx responses and
    undecodable bodies. Never escapes the engine: it is turned into a
    ``FailedResult`` payload.
    """


class InvalidOperation(SpinWheelError):
    """Operation not valid in the current state (logged, then ignored)."""
