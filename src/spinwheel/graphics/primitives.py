"""Basic drawing primitives for wheel buffers."""

from typing import Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Buffer = NDArray[np.uint8]


def new_buffer(width: int, height: int, color: Color = (0, 0, 0)) -> Buffer:
    """Allocate an RGB buffer of shape (height, width, 3)."""
    buffer = np.zeros((max(0, height), max(0, width), 3), dtype=np.uint8)
    if color != (0, 0, 0):
        buffer[:, :] = color
    return buffer


def clear(buffer: Buffer, color: Color = (0, 0, 0)) -> None:
    """Clear buffer to a solid color."""
    buffer[:, :] = color


def draw_circle(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    color: Color,
) -> None:
    """Draw a filled circle (distance-based mask).

    Args:
        buffer: Target numpy array (height, width, 3)
        cx: Center x coordinate
        cy: Center y coordinate
        radius: Circle radius in pixels
        color: RGB color tuple
    """
    h, w = buffer.shape[:2]
    y_indices, x_indices = np.ogrid[:h, :w]
    dist_sq = (x_indices - cx) ** 2 + (y_indices - cy) ** 2
    buffer[dist_sq <= radius ** 2] = color


def angle_map(width: int, height: int, cx: float, cy: float) -> Tuple[NDArray, NDArray]:
    """Per-pixel angle (degrees, clockwise from 3 o'clock) and squared distance.

    Screen y grows downwards, so ``atan2`` already runs clockwise.
    Callers drawing many sectors around one center can reuse the result.
    """
    y_indices, x_indices = np.ogrid[:height, :width]
    dx = x_indices + 0.5 - cx
    dy = y_indices + 0.5 - cy
    angles = np.degrees(np.arctan2(dy, dx)) % 360.0
    return angles, dx ** 2 + dy ** 2


def draw_sector(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    start_angle: float,
    sweep: float,
    color: Color,
    angles: NDArray | None = None,
    dist_sq: NDArray | None = None,
) -> None:
    """Draw a filled pie slice.

    Args:
        buffer: Target numpy array (height, width, 3)
        cx, cy: Center of the pie
        radius: Pie radius in pixels
        start_angle: Start of the slice, degrees clockwise from 3 o'clock
        sweep: Angular width in degrees (clockwise)
        color: RGB color tuple
        angles, dist_sq: Optional precomputed ``angle_map`` output
    """
    h, w = buffer.shape[:2]
    if angles is None or dist_sq is None:
        angles, dist_sq = angle_map(w, h, cx, cy)

    offset = (angles - start_angle) % 360.0
    mask = (offset < sweep) & (dist_sq <= radius ** 2)
    buffer[mask] = color


def draw_image(buffer: Buffer, image: Buffer, x: int, y: int) -> None:
    """Copy an RGB image onto the buffer, clipped to its bounds."""
    buf_h, buf_w = buffer.shape[:2]
    img_h, img_w = image.shape[:2]

    # Calculate visible region
    src_x1 = max(0, -x)
    src_y1 = max(0, -y)
    src_x2 = min(img_w, buf_w - x)
    src_y2 = min(img_h, buf_h - y)

    if src_x2 <= src_x1 or src_y2 <= src_y1:
        return  # Nothing to draw

    dst_x1 = max(0, x)
    dst_y1 = max(0, y)
    buffer[dst_y1:dst_y1 + (src_y2 - src_y1), dst_x1:dst_x1 + (src_x2 - src_x1)] = (
        image[src_y1:src_y2, src_x1:src_x2, :3]
    )
