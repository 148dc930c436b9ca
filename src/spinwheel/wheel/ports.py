"""
Render port: the engine's only view of whoever draws it.

Anything that wants to show the wheel implements ``RenderPort``. The
engine calls it after every tick, phase change and resize; it must be
cheap and must not call back into the engine.
"""

from abc import ABC, abstractmethod

from spinwheel.core.state import ResultPayload, RotationState
from spinwheel.wheel.layout import SizeParams


class RenderPort(ABC):
    """Consumer of engine snapshots."""

    @abstractmethod
    def on_state_changed(
        self,
        state: RotationState,
        payload: ResultPayload,
        size: SizeParams,
    ) -> None:
        """Receive the latest snapshot (fire-and-forget)."""
        ...
