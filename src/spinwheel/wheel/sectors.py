"""Sector table for the wheel.

Seven equal sectors laid out clockwise from the wheel's start angle.
Each sector carries its own result kind, so the resolver dispatches on
the tag instead of special-casing colors.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterator, List, Optional, Tuple

FULL_ROTATION = 360.0

# Tolerance for sector boundary comparisons, in degrees
ANGLE_EPSILON = 1e-9

Color = Tuple[int, int, int]


class SectorColor(Enum):
    """Identity tags of the sectors."""
    RED = auto()
    ORANGE = auto()
    YELLOW = auto()
    GREEN = auto()
    LIGHT_BLUE = auto()
    DARK_BLUE = auto()
    VIOLET = auto()


class ResultKind(Enum):
    """What a sector reveals when it wins."""
    TEXT = auto()   # Show the sector's text
    IMAGE = auto()  # Fetch and show a picture


@dataclass(frozen=True)
class Sector:
    """One wheel sector."""
    color: SectorColor
    display_text: str
    result_kind: ResultKind
    rgb: Color


# Drawing order, clockwise from start_angle
SECTORS: Tuple[Sector, ...] = (
    Sector(SectorColor.RED, "RED", ResultKind.TEXT, (244, 67, 54)),
    Sector(SectorColor.ORANGE, "ORANGE", ResultKind.IMAGE, (255, 152, 0)),
    Sector(SectorColor.YELLOW, "YELLOW", ResultKind.TEXT, (255, 235, 59)),
    Sector(SectorColor.GREEN, "GREEN", ResultKind.IMAGE, (76, 175, 80)),
    Sector(SectorColor.LIGHT_BLUE, "LIGHT BLUE", ResultKind.TEXT, (3, 169, 244)),
    Sector(SectorColor.DARK_BLUE, "DARK BLUE", ResultKind.IMAGE, (13, 71, 161)),
    Sector(SectorColor.VIOLET, "VIOLET", ResultKind.TEXT, (156, 39, 176)),
)

_BY_COLOR: Dict[SectorColor, Sector] = {s.color: s for s in SECTORS}


def sector_width() -> float:
    """Angular width of one sector in degrees."""
    return FULL_ROTATION / len(SECTORS)


def sector_for(color: SectorColor) -> Sector:
    """Look up a sector by its color."""
    return _BY_COLOR[color]


def normalize_angle(angle: float) -> float:
    """Wrap an angle into [0, 360)."""
    wrapped = angle % FULL_ROTATION
    # -1e-18 % 360 rounds up to 360.0
    return 0.0 if wrapped >= FULL_ROTATION else wrapped


def sector_angles(start_angle: float) -> Iterator[Tuple[Sector, float]]:
    """Yield each sector with its wrapped starting angle."""
    width = sector_width()
    for i, sector in enumerate(SECTORS):
        yield sector, normalize_angle(start_angle + i * width)


def matching_sectors(start_angle: float, indicator_angle: float = 270.0) -> List[Sector]:
    """Every sector whose wrapped start angle lies in the indicator window.

    The window is the closed-open interval
    ``[indicator_angle - width, indicator_angle)``: a sector in it spans
    the indicator. Offsets within ``ANGLE_EPSILON`` of a boundary are
    snapped to it, so accumulated float error cannot produce zero or two
    matches.
    """
    width = sector_width()
    window_start = normalize_angle(indicator_angle - width)

    matches = []
    for sector, angle in sector_angles(start_angle):
        # Offset into the window, measured on the wrapped circle
        offset = normalize_angle(angle - window_start)
        if offset > FULL_ROTATION - ANGLE_EPSILON:
            offset -= FULL_ROTATION
        if -ANGLE_EPSILON < offset < width - ANGLE_EPSILON:
            matches.append(sector)
    return matches


def winning_sector(start_angle: float, indicator_angle: float = 270.0) -> Optional[Sector]:
    """Sector under the indicator, or ``None`` if nothing matched."""
    matches = matching_sectors(start_angle, indicator_angle)
    return matches[0] if matches else None


def sector_at(start_angle: float, angle: float) -> Sector:
    """Sector covering a given wheel angle, by index arithmetic."""
    offset = normalize_angle(angle - start_angle)
    index = int(offset // sector_width()) % len(SECTORS)
    return SECTORS[index]
