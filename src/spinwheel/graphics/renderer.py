"""Wheel renderer.

Implements ``RenderPort`` by keeping the latest snapshot and painting it
into an RGB numpy buffer on demand. Text is left to the host, which owns
the fonts; ``result_text`` and ``result_color`` tell it what to write.
"""

import logging
from typing import Optional, Tuple

from numpy.typing import NDArray

from spinwheel.core.state import (
    EMPTY,
    FailedResult,
    ImagePending,
    ImageResult,
    ResultPayload,
    RotationState,
    TextResult,
)
from spinwheel.graphics.primitives import (
    Buffer,
    Color,
    angle_map,
    draw_circle,
    draw_image,
    draw_sector,
    new_buffer,
)
from spinwheel.wheel.layout import SizeParams
from spinwheel.wheel.ports import RenderPort
from spinwheel.wheel.sectors import sector_angles, sector_width

logger = logging.getLogger(__name__)

BACKGROUND: Color = (250, 250, 250)
INDICATOR: Color = (0, 0, 0)
FAILED_TEXT: Color = (120, 120, 120)

PENDING_LABEL = "..."
FAILED_LABEL = "NO IMAGE"


class WheelRenderer(RenderPort):
    """Paints the drum, indicator and image result."""

    def __init__(self, background: Color = BACKGROUND):
        self._background = background
        self._state: Optional[RotationState] = None
        self._payload: ResultPayload = EMPTY
        self._size = SizeParams()
        self._dirty = True
        self._frames = 0

        # Angle map is only valid for one size
        self._angle_cache: Optional[Tuple[SizeParams, NDArray, NDArray]] = None

    def on_state_changed(
        self,
        state: RotationState,
        payload: ResultPayload,
        size: SizeParams,
    ) -> None:
        self._state = state
        self._payload = payload
        self._size = size
        self._dirty = True

    @property
    def dirty(self) -> bool:
        """True when a new snapshot arrived since the last render."""
        return self._dirty

    @property
    def size(self) -> SizeParams:
        return self._size

    @property
    def state(self) -> Optional[RotationState]:
        return self._state

    @property
    def payload(self) -> ResultPayload:
        return self._payload

    @property
    def frames(self) -> int:
        return self._frames

    def render(self) -> Buffer:
        """Paint the current snapshot into a fresh buffer."""
        size = self._size
        buffer = new_buffer(size.width, size.height, self._background)

        if self._state is not None:
            self._draw_drum(buffer, self._state.start_angle)
        self._draw_indicator(buffer)

        if isinstance(self._payload, ImageResult) and self._payload.handle is not None:
            self._draw_image(buffer)

        self._dirty = False
        self._frames += 1
        return buffer

    def result_text(self) -> Optional[str]:
        """Text the host should draw at ``size.text_anchor``, if any."""
        if isinstance(self._payload, TextResult):
            return self._payload.value
        if isinstance(self._payload, ImagePending):
            return PENDING_LABEL
        if isinstance(self._payload, FailedResult):
            return FAILED_LABEL
        return None

    def result_color(self) -> Color:
        """Color for the result text: the winning sector's paint."""
        if isinstance(self._payload, FailedResult):
            return FAILED_TEXT
        if self._state is not None and self._state.winning_sector is not None:
            return self._state.winning_sector.rgb
        return INDICATOR

    def _angles(self) -> Tuple[NDArray, NDArray]:
        size = self._size
        if self._angle_cache is None or self._angle_cache[0] != size:
            cx, cy = size.drum_center
            angles, dist_sq = angle_map(size.width, size.height, cx, cy)
            self._angle_cache = (size, angles, dist_sq)
        return self._angle_cache[1], self._angle_cache[2]

    def _draw_drum(self, buffer: Buffer, start_angle: float) -> None:
        cx, cy = self._size.drum_center
        angles, dist_sq = self._angles()
        sweep = sector_width()

        for sector, angle in sector_angles(start_angle):
            draw_sector(
                buffer, cx, cy, self._size.drum_radius, angle, sweep, sector.rgb,
                angles=angles, dist_sq=dist_sq,
            )

    def _draw_indicator(self, buffer: Buffer) -> None:
        ix, iy = self._size.indicator_center
        draw_circle(buffer, ix, iy, self._size.indicator_radius, INDICATOR)

    def _draw_image(self, buffer: Buffer) -> None:
        size = self._size
        try:
            pixels = self._payload.handle.scaled(size.image_width, size.image_height)
            x, y = size.image_origin
            draw_image(buffer, pixels, x, y)
        except Exception as e:
            logger.warning(f"Failed to render result image: {e}")
