"""Outcome resolver: turns a winning sector into a result payload."""

import logging
from typing import Awaitable, Union

from spinwheel.core.errors import FetchError
from spinwheel.core.state import FailedResult, ImageResult, ResultPayload, TextResult
from spinwheel.fetch.base import ImageFetcher
from spinwheel.wheel.sectors import ResultKind, Sector

logger = logging.getLogger(__name__)

Resolution = Union[ResultPayload, Awaitable[ResultPayload]]


class OutcomeResolver:
    """Maps sectors to payloads.

    TEXT sectors resolve immediately. IMAGE sectors return an awaitable
    that yields ``ImageResult`` or ``FailedResult``; it never raises
    ``FetchError``.
    """

    def __init__(self, fetcher: ImageFetcher):
        self._fetcher = fetcher

    def resolve(self, sector: Sector) -> Resolution:
        if sector.result_kind is ResultKind.TEXT:
            return TextResult(sector.display_text)
        if sector.result_kind is ResultKind.IMAGE:
            return self._fetch(sector)
        raise ValueError(f"Unknown result kind: {sector.result_kind}")

    async def _fetch(self, sector: Sector) -> ResultPayload:
        logger.debug(f"Fetching image for {sector.color.name}")
        try:
            handle = await self._fetcher.fetch_image()
        except FetchError as e:
            logger.error(f"Image for {sector.color.name} failed: {e}")
            return FailedResult(str(e))
        except Exception as e:
            # Fetcher bug; still settle rather than leave the wheel resolving
            logger.exception(f"Unexpected fetcher error for {sector.color.name}")
            return FailedResult(f"Unexpected error: {e}")
        return ImageResult(handle)
