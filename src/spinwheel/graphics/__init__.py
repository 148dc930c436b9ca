"""Graphics for SPINWHEEL: render port and numpy wheel renderer."""

from spinwheel.wheel.ports import RenderPort
from spinwheel.graphics.renderer import WheelRenderer

__all__ = ["RenderPort", "WheelRenderer"]
