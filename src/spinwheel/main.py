"""
Main entry point for SPINWHEEL.

Builds the engine with its collaborators and runs the simulator window.
"""

import asyncio
import logging
import sys

from spinwheel.config.settings import Settings, get_settings
from spinwheel.core.events import EventBus
from spinwheel.fetch.base import ImageFetcher, StaticImageFetcher
from spinwheel.fetch.http import HttpImageFetcher
from spinwheel.graphics.renderer import WheelRenderer
from spinwheel.timing.asyncio_scheduler import AsyncioScheduler
from spinwheel.wheel.engine import RotationEngine, bind_controls
from spinwheel.wheel.layout import SizeParams


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def create_fetcher(settings: Settings) -> ImageFetcher:
    """Network fetcher, or a placeholder when running offline."""
    if settings.fetch.offline:
        return StaticImageFetcher()
    return HttpImageFetcher(settings.fetch)


async def run_simulator(settings: Settings) -> None:
    """Run the pygame simulator."""
    from spinwheel.simulator.window import SimulatorWindow, WindowConfig

    event_bus = EventBus()
    scheduler = AsyncioScheduler()
    fetcher = create_fetcher(settings)
    renderer = WheelRenderer()

    engine = RotationEngine(
        scheduler=scheduler,
        fetcher=fetcher,
        settings=settings.wheel,
        event_bus=event_bus,
        size=SizeParams.from_size(settings.display.default_size),
    )
    engine.add_render_port(renderer)
    bind_controls(event_bus, engine)

    window = SimulatorWindow(
        engine=engine,
        renderer=renderer,
        event_bus=event_bus,
        config=WindowConfig.from_settings(settings.display),
        display=settings.display,
    )

    try:
        await window.run()
    finally:
        await scheduler.close()
        await fetcher.close()


def main() -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    settings = get_settings()
    setup_logging(settings.debug)

    logger = logging.getLogger(__name__)
    logger.info("SPINWHEEL starting...")

    try:
        asyncio.run(run_simulator(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("SPINWHEEL stopped")


if __name__ == "__main__":
    main()
