"""Desktop simulator for SPINWHEEL (pygame)."""

from .window import SimulatorWindow, WindowConfig

__all__ = ["SimulatorWindow", "WindowConfig"]
