"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Nested sections can be overridden with a double underscore, e.g.
``SPINWHEEL_WHEEL__TICK_INTERVAL_MS=25``.
"""

from functools import lru_cache

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WheelSettings(BaseModel):
    """Rotation timing and geometry constants."""

    # Ticker
    tick_interval_ms: int = Field(default=50, gt=0)
    angle_step: float = 10.0

    # Spin duration is picked from whole seconds in this inclusive range
    min_spin_seconds: int = Field(default=1, ge=1)
    max_spin_seconds: int = Field(default=5, ge=1)

    # Angles in degrees, clockwise from 3 o'clock; 270 is the top of the wheel
    default_start_angle: float = Field(default=270.0, ge=0.0, lt=360.0)
    indicator_angle: float = Field(default=270.0, ge=0.0, lt=360.0)

    @model_validator(mode="after")
    def _check_spin_range(self) -> "WheelSettings":
        if self.max_spin_seconds < self.min_spin_seconds:
            raise ValueError("max_spin_seconds must be >= min_spin_seconds")
        return self


class FetchSettings(BaseModel):
    """Image provider settings."""

    image_url: str = "https://loremflickr.com/320/240"
    offline: bool = False  # Serve a placeholder instead of hitting the network

    # Timeouts
    timeout: float = Field(default=10.0, gt=0.0)

    # Total tries per image, first one included
    max_attempts: int = Field(default=2, ge=1)
    retry_delay: float = Field(default=0.5, ge=0.0)


class DisplaySettings(BaseModel):
    """Display-related settings."""

    # Size slider
    default_size: int = 50
    min_size: int = Field(default=1, ge=1)
    max_size: int = 100
    size_step: int = Field(default=5, ge=1)

    # Simulator window
    window_width: int = 720
    window_height: int = 960
    fps: int = Field(default=60, gt=0)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="SPINWHEEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    # Nested settings
    wheel: WheelSettings = Field(default_factory=WheelSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
