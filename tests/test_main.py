from types import SimpleNamespace

import pygame
import pytest

from spinwheel.config.settings import DisplaySettings, FetchSettings, Settings
from spinwheel.core.events import EventType
from spinwheel.core.state import SpinPhase
from spinwheel.fetch.base import StaticImageFetcher
from spinwheel.fetch.http import HttpImageFetcher
from spinwheel.graphics.renderer import WheelRenderer
from spinwheel.main import create_fetcher
from spinwheel.simulator.window import SimulatorWindow, WindowConfig
from spinwheel.wheel.engine import bind_controls


def test_create_fetcher_offline():
    settings = Settings(fetch=FetchSettings(offline=True))
    assert isinstance(create_fetcher(settings), StaticImageFetcher)


def test_create_fetcher_online():
    settings = Settings(fetch=FetchSettings(image_url="http://example.invalid/img"))
    fetcher = create_fetcher(settings)
    assert isinstance(fetcher, HttpImageFetcher)
    assert fetcher.url == "http://example.invalid/img"


def test_window_config_from_settings():
    config = WindowConfig.from_settings(DisplaySettings(window_width=400, window_height=800, fps=30))
    assert (config.width, config.height, config.fps) == (400, 800, 30)


@pytest.fixture
def window(make_engine, event_bus):
    engine = make_engine(2)
    renderer = WheelRenderer()
    engine.add_render_port(renderer)
    bind_controls(event_bus, engine)
    win = SimulatorWindow(
        engine=engine,
        renderer=renderer,
        event_bus=event_bus,
        display=DisplaySettings(min_size=10, max_size=60, size_step=5),
    )
    yield win
    win._cleanup()


def press(window, key):
    window._handle_keydown(SimpleNamespace(key=key))
    window.event_bus.process_queue()


def test_keys_drive_engine(window, scheduler):
    press(window, pygame.K_SPACE)
    assert window.engine.phase is SpinPhase.SPINNING

    scheduler.advance(2000)
    assert window.engine.phase is SpinPhase.SETTLED
    assert window.renderer.result_text() == "VIOLET"

    press(window, pygame.K_r)
    assert window.engine.phase is SpinPhase.IDLE
    assert window.renderer.result_text() is None


def test_size_keys_clamp(window, event_bus):
    press(window, pygame.K_UP)
    assert window.engine.size.size == 55

    press(window, pygame.K_UP)
    press(window, pygame.K_UP)
    assert window.engine.size.size == 60

    for _ in range(20):
        press(window, pygame.K_DOWN)
    assert window.engine.size.size == 10

    sizes = [e.data["size"] for e in event_bus.get_history(EventType.SIZE_CHANGED, limit=100)]
    assert sizes[0] == 55
    assert min(sizes) == 10


def test_quit_key_stops_loop(window):
    window._running = True
    press(window, pygame.K_ESCAPE)
    assert not window._running


def test_key_waits_for_next_frame(window, event_bus):
    window._handle_keydown(SimpleNamespace(key=pygame.K_SPACE))
    assert window.engine.phase is SpinPhase.IDLE
    assert event_bus.pending == 1

    assert event_bus.process_queue() == 1
    assert window.engine.phase is SpinPhase.SPINNING
