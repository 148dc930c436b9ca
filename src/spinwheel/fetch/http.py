"""HTTP image fetcher.

Downloads a picture from the configured image provider with aiohttp and
decodes it with Pillow. Every failure surfaces as ``FetchError``.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from spinwheel.config.settings import FetchSettings
from spinwheel.core.errors import FetchError
from spinwheel.fetch.base import ImageFetcher, ImageHandle, decode_image

logger = logging.getLogger(__name__)


class HttpImageFetcher(ImageFetcher):
    """GET an image from an HTTP endpoint, retrying transient failures."""

    def __init__(self, config: Optional[FetchSettings] = None, url: Optional[str] = None):
        self.config = config or FetchSettings()
        self.url = url or self.config.image_url
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def fetch_image(self) -> ImageHandle:
        """Fetch one image, trying up to ``max_attempts`` times.

        Raises:
            FetchError: when every attempt failed
        """
        last_error: Optional[FetchError] = None

        for attempt in range(self.config.max_attempts):
            try:
                data = await self._download()
                handle = decode_image(data, source=self.url)
                logger.info(f"Fetched image {handle.width}x{handle.height} from {self.url}")
                return handle
            except FetchError as e:
                last_error = e
                logger.warning(f"Image fetch failed, attempt {attempt + 1}: {e}")

            if attempt < self.config.max_attempts - 1:
                await asyncio.sleep(self.config.retry_delay * (attempt + 1))

        logger.error(f"Image fetch gave up after {self.config.max_attempts} attempts")
        raise last_error or FetchError("Image fetch failed")

    async def _download(self) -> bytes:
        """Single GET; maps transport errors to ``FetchError``."""
        session = await self._ensure_session()

        try:
            async with session.get(self.url) as response:
                if not response.ok:
                    raise FetchError(f"HTTP {response.status} from {self.url}")
                return await response.read()
        except asyncio.TimeoutError as e:
            raise FetchError(f"Timed out after {self.config.timeout}s") from e
        except aiohttp.ClientError as e:
            raise FetchError(f"Network error: {e}") from e
