"""
Simulator window using pygame.

Desktop host for the wheel: buttons are keys, the size slider is the
arrow keys, and the wheel buffer is blitted in the middle of the window.
"""

import pygame
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from ..config.settings import DisplaySettings
from ..core.events import (
    Event,
    EventBus,
    EventType,
    reset_pressed_event,
    size_changed_event,
    spin_pressed_event,
)
from ..graphics.renderer import WheelRenderer
from ..wheel.engine import RotationEngine

logger = logging.getLogger(__name__)


@dataclass
class WindowConfig:
    """Simulator window configuration."""
    width: int = 720
    height: int = 960
    title: str = "Spinwheel Simulator"
    fps: int = 60

    # Colors
    bg_color: tuple[int, int, int] = (20, 20, 30)
    panel_color: tuple[int, int, int] = (40, 40, 50)
    text_color: tuple[int, int, int] = (200, 200, 220)

    @classmethod
    def from_settings(cls, display: DisplaySettings) -> "WindowConfig":
        return cls(width=display.window_width, height=display.window_height, fps=display.fps)


class SimulatorWindow:
    """
    Main simulator window.

    Keyboard Mapping:
        SPACE / RETURN: Spin
        R: Reset
        UP / DOWN (or + / -): Change wheel size
        D: Toggle debug overlay
        L: Toggle log viewer
        ESC / Q: Exit simulator
    """

    def __init__(
        self,
        engine: RotationEngine,
        renderer: WheelRenderer,
        event_bus: EventBus,
        config: WindowConfig | None = None,
        display: DisplaySettings | None = None,
    ) -> None:
        self.config = config or WindowConfig()
        self.display = display or DisplaySettings()
        self.engine = engine
        self.renderer = renderer
        self.event_bus = event_bus

        # Pygame setup
        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._running = False
        self._frame_count = 0
        self._show_debug = True

        # Size slider position
        self._slider = engine.size.size

        # Cached wheel surface, rebuilt only when the renderer is dirty
        self._wheel_surface: pygame.Surface | None = None

        # Fonts
        self._font: pygame.font.Font | None = None
        self._result_font: pygame.font.Font | None = None
        self._result_font_size = 0

        # Log viewer
        self._show_log = False
        self._log_buffer: list[str] = []
        self._max_log_lines = 20
        self._log_handler: Optional[logging.Handler] = None

        self._setup_log_capture()

        logger.info("SimulatorWindow created")

    def _setup_log_capture(self) -> None:
        """Setup log capturing for the log viewer."""
        class SimulatorLogHandler(logging.Handler):
            def __init__(self, window: 'SimulatorWindow'):
                super().__init__()
                self.window = window

            def emit(self, record):
                msg = self.format(record)
                self.window._log_buffer.append(msg)
                # Keep buffer size limited
                if len(self.window._log_buffer) > self.window._max_log_lines * 2:
                    self.window._log_buffer = self.window._log_buffer[-self.window._max_log_lines:]

        self._log_handler = SimulatorLogHandler(self)
        self._log_handler.setFormatter(logging.Formatter('%(levelname).1s %(name)s: %(message)s'))
        logging.getLogger().addHandler(self._log_handler)

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)

        self._screen = pygame.display.set_mode(
            (self.config.width, self.config.height),
            pygame.DOUBLEBUF
        )
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.SysFont(None, 20)

        logger.info(f"Pygame initialized: {self.config.width}x{self.config.height}")

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        """Handle key press."""
        key = event.key

        # System keys
        if key == pygame.K_ESCAPE or key == pygame.K_q:
            self._running = False
        elif key == pygame.K_d:
            self._show_debug = not self._show_debug
        elif key == pygame.K_l:
            self._show_log = not self._show_log

        # Spin / reset buttons
        elif key in (pygame.K_SPACE, pygame.K_RETURN):
            self.event_bus.queue_event(spin_pressed_event(source="keyboard"))
        elif key == pygame.K_r:
            self.event_bus.queue_event(reset_pressed_event(source="keyboard"))

        # Size slider
        elif key in (pygame.K_UP, pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self._move_slider(self.display.size_step)
        elif key in (pygame.K_DOWN, pygame.K_MINUS, pygame.K_KP_MINUS):
            self._move_slider(-self.display.size_step)

    def _move_slider(self, delta: int) -> None:
        value = max(self.display.min_size, min(self.display.max_size, self._slider + delta))
        if value != self._slider:
            self._slider = value
            self.event_bus.queue_event(size_changed_event(value, source="keyboard"))

    def _render(self) -> None:
        """Render all UI elements."""
        if not self._screen:
            return

        self._screen.fill(self.config.bg_color)

        self._render_wheel()
        if self._show_debug:
            self._render_debug_panel()
        if self._show_log:
            self._render_log_panel()

        pygame.display.flip()

    def _wheel_rect(self) -> pygame.Rect:
        """Fit the widget into the window, keeping its aspect ratio."""
        size = self.renderer.size
        scale = min(self.config.width / max(1, size.width), self.config.height / max(1, size.height), 1.0)
        w, h = int(size.width * scale), int(size.height * scale)
        rect = pygame.Rect(0, 0, w, h)
        rect.center = (self.config.width // 2, self.config.height // 2)
        return rect

    def _render_wheel(self) -> None:
        """Blit the wheel buffer and draw the result text."""
        rect = self._wheel_rect()

        if self.renderer.dirty or self._wheel_surface is None:
            buffer = self.renderer.render()
            # Buffer is (height, width, 3); surfarray wants (width, height, 3)
            surface = pygame.surfarray.make_surface(buffer.swapaxes(0, 1))
            if surface.get_size() != rect.size:
                surface = pygame.transform.smoothscale(surface, rect.size)
            self._wheel_surface = surface

        self._screen.blit(self._wheel_surface, rect.topleft)

        text = self.renderer.result_text()
        if text:
            size = self.renderer.size
            scale = rect.width / max(1, size.width)
            font = self._get_result_font(max(8, int(size.text_size * scale)))
            label = font.render(text, True, self.renderer.result_color())
            ax, ay = size.text_anchor
            # Anchor is the baseline center
            pos = (rect.left + ax * scale - label.get_width() / 2,
                   rect.top + ay * scale - font.get_ascent())
            self._screen.blit(label, pos)

    def _get_result_font(self, px: int) -> pygame.font.Font:
        if self._result_font is None or self._result_font_size != px:
            self._result_font = pygame.font.SysFont(None, px)
            self._result_font_size = px
        return self._result_font

    def _render_debug_panel(self) -> None:
        """Render debug information overlay."""
        state = self.engine.state
        lines = [
            f"FPS: {self._clock.get_fps():.0f}" if self._clock else "FPS: -",
            f"Phase: {state.phase.name}",
            f"Angle: {state.start_angle:.1f}",
            f"Generation: {state.generation}",
            f"Duration: {self.engine.spin_duration_ms}ms",
            f"Ticks: {self.engine.ticks_delivered}",
            f"Payload: {self.engine.payload.kind.name}",
            f"Winner: {state.winning_sector.color.name if state.winning_sector else '-'}",
            f"Size: {self._slider}",
        ]
        self._blit_lines(lines, 10, 10)

    def _render_log_panel(self) -> None:
        """Render recent log lines along the bottom of the window."""
        lines = self._log_buffer[-self._max_log_lines:]
        panel = pygame.Rect(0, self.config.height - 20 * len(lines) - 10, self.config.width, 20 * len(lines) + 10)
        pygame.draw.rect(self._screen, self.config.panel_color, panel)
        self._blit_lines(lines, 10, panel.top + 5)

    def _blit_lines(self, lines: list[str], x: int, y: int) -> None:
        if not self._font:
            return
        for i, line in enumerate(lines):
            text = self._font.render(line, True, self.config.text_color)
            self._screen.blit(text, (x, y + i * 20))

    async def run(self) -> None:
        """Main simulator loop."""
        self._init_pygame()
        self._running = True
        frame_time = 1.0 / self.config.fps

        logger.info("Simulator started")

        try:
            while self._running:
                self._handle_events()

                # Key presses reach the engine here, between frames
                self.event_bus.process_queue()

                if self._clock:
                    self._clock.tick()

                self._render()
                self._frame_count += 1

                # Sleep instead of Clock.tick(fps) so engine timers keep running
                await asyncio.sleep(frame_time)
        finally:
            self.event_bus.emit(Event(EventType.SHUTDOWN, source="simulator"))
            self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        if self._log_handler:
            logging.getLogger().removeHandler(self._log_handler)
            self._log_handler = None
        pygame.quit()
        logger.info("Simulator stopped")

    def stop(self) -> None:
        """Stop the simulator."""
        self._running = False
