import asyncio
import inspect

from conftest import FailingFetcher, StubFetcher
from spinwheel.core.state import FailedResult, ImageResult, PayloadKind, TextResult
from spinwheel.fetch.base import ImageFetcher
from spinwheel.wheel.resolver import OutcomeResolver
from spinwheel.wheel.sectors import SECTORS, ResultKind, SectorColor, sector_for


def test_text_sectors_resolve_immediately():
    resolver = OutcomeResolver(StubFetcher())
    for sector in SECTORS:
        if sector.result_kind is ResultKind.TEXT:
            assert resolver.resolve(sector) == TextResult(sector.display_text)

    assert resolver.resolve(sector_for(SectorColor.RED)) == TextResult("RED")


def test_image_sector_returns_awaitable():
    fetcher = StubFetcher()
    resolver = OutcomeResolver(fetcher)

    outcome = resolver.resolve(sector_for(SectorColor.ORANGE))
    assert inspect.isawaitable(outcome)
    # Nothing is fetched until the awaitable runs
    assert fetcher.calls == 0

    payload = asyncio.run(outcome)
    assert payload == ImageResult(fetcher.handle)
    assert payload.kind is PayloadKind.IMAGE
    assert fetcher.calls == 1


def test_fetch_error_becomes_failed_payload():
    resolver = OutcomeResolver(FailingFetcher("HTTP 503"))

    payload = asyncio.run(resolver.resolve(sector_for(SectorColor.GREEN)))

    assert payload == FailedResult("HTTP 503")
    assert payload.is_terminal


def test_unexpected_error_becomes_failed_payload():
    class BuggyFetcher(ImageFetcher):
        async def fetch_image(self):
            raise KeyError("oops")

    resolver = OutcomeResolver(BuggyFetcher())

    payload = asyncio.run(resolver.resolve(sector_for(SectorColor.DARK_BLUE)))

    assert isinstance(payload, FailedResult)
    assert payload.reason.startswith("Unexpected error")
