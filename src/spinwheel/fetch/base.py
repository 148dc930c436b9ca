"""
Image fetch port.

The engine only depends on ``ImageFetcher``; concrete fetchers decide
where the picture comes from.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from io import BytesIO
from typing import Optional
import logging

import numpy as np
from numpy.typing import NDArray
from PIL import Image, UnidentifiedImageError

from spinwheel.core.errors import FetchError

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ImageHandle:
    """Decoded image ready for drawing.

    Attributes:
        pixels: RGB array of shape (height, width, 3)
        source: URL or label the image came from
    """
    pixels: NDArray[np.uint8]
    source: str = ""
    _scaled: dict = field(default_factory=dict, init=False, repr=False)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def scaled(self, width: int, height: int) -> NDArray[np.uint8]:
        """Nearest-neighbour copy at the given size (the last size is cached)."""
        if width <= 0 or height <= 0:
            return np.zeros((0, 0, 3), dtype=np.uint8)
        if (width, height) == (self.width, self.height):
            return self.pixels

        key = (width, height)
        if key not in self._scaled:
            img = Image.fromarray(self.pixels)
            img = img.resize((width, height), Image.Resampling.NEAREST)
            self._scaled = {key: np.array(img, dtype=np.uint8)}
        return self._scaled[key]


def decode_image(data: bytes, source: str = "") -> ImageHandle:
    """Decode PNG/JPEG/... bytes into an RGB ``ImageHandle``.

    Raises:
        FetchError: if the bytes are not a readable image
    """
    if not data:
        raise FetchError("Empty image body")

    try:
        img = Image.open(BytesIO(data))
        img = img.convert("RGB")
        pixels = np.array(img, dtype=np.uint8)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise FetchError(f"Cannot decode image: {e}") from e

    return ImageHandle(pixels=pixels, source=source)


class ImageFetcher(ABC):
    """Abstract async image source."""

    @abstractmethod
    async def fetch_image(self) -> ImageHandle:
        """
        Fetch and decode one image.

        Raises:
            FetchError: on network failure, timeout or decode failure
        """
        ...

    async def close(self) -> None:
        """Release network resources. Default: nothing to release."""
        return None


class StaticImageFetcher(ImageFetcher):
    """Serves the same pre-decoded image every time (offline use)."""

    def __init__(self, handle: Optional[ImageHandle] = None, color=(128, 128, 128)):
        if handle is None:
            pixels = np.zeros((240, 320, 3), dtype=np.uint8)
            pixels[:, :] = color
            handle = ImageHandle(pixels=pixels, source="static")
        self._handle = handle

    async def fetch_image(self) -> ImageHandle:
        return self._handle
