"""Size-derived layout values for the wheel widget.

Everything here follows from one integer size parameter (the size
slider). The widget is a column: the drum on top, the result area below.
"""

from dataclasses import dataclass
from typing import Tuple

# Coefficients applied to the size parameter
DRUM_RADIUS_COEFFICIENT = 5.0
INDICATOR_RADIUS_COEFFICIENT = 0.4
TEXT_SIZE_COEFFICIENT = 1.8
IMAGE_WIDTH_COEFFICIENT = 6.4
IMAGE_HEIGHT_COEFFICIENT = 4.8

DEFAULT_SIZE = 50


@dataclass(frozen=True)
class SizeParams:
    """Drum, indicator, text and image dimensions."""

    size: int = DEFAULT_SIZE
    drum_radius: float = 250.0
    indicator_radius: float = 20.0
    text_size: float = 90.0
    image_width: int = 320
    image_height: int = 240

    @classmethod
    def from_size(cls, size: int) -> "SizeParams":
        """Derive every dimension from the slider value."""
        return cls(
            size=size,
            drum_radius=size * DRUM_RADIUS_COEFFICIENT,
            indicator_radius=size * INDICATOR_RADIUS_COEFFICIENT,
            text_size=size * TEXT_SIZE_COEFFICIENT,
            image_width=int(size * IMAGE_WIDTH_COEFFICIENT),
            image_height=int(size * IMAGE_HEIGHT_COEFFICIENT),
        )

    # Widget bounds
    @property
    def width(self) -> int:
        return int(self.drum_radius * 2)

    @property
    def height(self) -> int:
        return int(self.drum_radius * 4)

    @property
    def drum_center(self) -> Tuple[float, float]:
        return (self.drum_radius, self.drum_radius)

    @property
    def indicator_center(self) -> Tuple[float, float]:
        """Indicator sits on the top edge, centered."""
        return (self.width // 2, 0.0)

    @property
    def text_anchor(self) -> Tuple[float, float]:
        """Center of the result text baseline, three quarters down."""
        return (self.width // 2, self.height // 4 * 3)

    @property
    def image_origin(self) -> Tuple[int, int]:
        """Top-left of the image box, centered in the lower half."""
        x = (self.width - self.image_width) // 2
        y = (self.height // 2 - self.image_height) // 2 + self.height // 2
        return (x, y)
