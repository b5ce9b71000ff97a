"""
Enricher service configuration.
Uses FE_ENRICHER_ prefix; shared settings (log level, environment) come from get_settings().
"""
from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnricherSettings(BaseSettings):
    """Enricher-specific settings; use get_settings() for logging/environment."""

    model_config = SettingsConfigDict(
        env_prefix="FE_ENRICHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Input / output
    input_source: str = Field(default="matches-to-look-up.csv", description="Fixture CSV path or http(s) URL")
    output_path: str = Field(default="matches-enriched.csv", description="Append-only CSV log; also the checkpoint")
    base_url: str = Field(default="https://uk.soccerway.com", description="Results site root")

    # Browser
    headless: bool = Field(default=True, description="Run Chromium without a window")
    user_agent: Optional[str] = Field(default=None, description="Override browser user agent")
    navigation_timeout_s: Optional[float] = Field(
        default=None,
        description="Give up on a page load or content refresh after this long; None waits forever",
    )

    # Delays (seconds)
    index_delay_min_s: float = Field(default=1.0, description="Min pause after loading an index page")
    index_delay_max_s: float = Field(default=2.0, description="Max pause after loading an index page")
    detail_delay_min_s: float = Field(default=1.0, description="Min pause before loading a match page")
    detail_delay_max_s: float = Field(default=2.0, description="Max pause before loading a match page")
    fixture_delay_min_s: float = Field(default=2.0, description="Min pause after each fixture")
    fixture_delay_max_s: float = Field(default=5.0, description="Max pause after each fixture")

    @model_validator(mode="after")
    def check_delay_bounds(self) -> "EnricherSettings":
        for name in ("index", "detail", "fixture"):
            low = getattr(self, f"{name}_delay_min_s")
            high = getattr(self, f"{name}_delay_max_s")
            if low < 0 or high < low:
                raise ValueError(f"{name} delay bounds must satisfy 0 <= min <= max, got {low}..{high}")
        return self

    @property
    def index_delay(self) -> tuple[float, float]:
        return self.index_delay_min_s, self.index_delay_max_s

    @property
    def detail_delay(self) -> tuple[float, float]:
        return self.detail_delay_min_s, self.detail_delay_max_s

    @property
    def fixture_delay(self) -> tuple[float, float]:
        return self.fixture_delay_min_s, self.fixture_delay_max_s


def get_enricher_settings() -> EnricherSettings:
    """Load enricher settings. Call get_settings() as well for logging configuration."""
    return EnricherSettings()
