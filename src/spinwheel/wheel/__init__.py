"""The wheel: sector table, layout, resolver and rotation engine."""

from spinwheel.wheel.sectors import (
    SECTORS,
    Sector,
    SectorColor,
    ResultKind,
    sector_for,
    sector_width,
    winning_sector,
)
from spinwheel.wheel.layout import SizeParams
from spinwheel.wheel.ports import RenderPort
from spinwheel.wheel.resolver import OutcomeResolver
from spinwheel.wheel.engine import RotationEngine, bind_controls

__all__ = [
    "SECTORS",
    "Sector",
    "SectorColor",
    "ResultKind",
    "sector_for",
    "sector_width",
    "winning_sector",
    "SizeParams",
    "RenderPort",
    "OutcomeResolver",
    "RotationEngine",
    "bind_controls",
]
