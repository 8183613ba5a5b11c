"""
Game configuration.

Every tunable number of the play simulation lives here: timing-window
boundaries, ball-flight scaling, phase delays, coverage weights and the
scoring rules. None of these values are derived from a physical law, so
they are plain configuration and can be overridden from the environment
or a JSON file.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from pocketqb.simulation.systems.timing import (
    DEFAULT_CATCH_WINDOWS,
    DEFAULT_THROW_WINDOWS,
    CatchTiming,
    ThrowTiming,
    TimingBand,
    TimingWindows,
)

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a configuration source cannot be loaded or is invalid."""
    pass


# =============================================================================
# Sections
# =============================================================================


class TimingConfig(BaseModel):
    """Timing-window boundaries as ``(lower, upper, label)`` bands."""

    catch_bands: list[tuple[float, float, CatchTiming]] = Field(
        default_factory=DEFAULT_CATCH_WINDOWS.as_tuples
    )
    throw_bands: list[tuple[float, float, ThrowTiming]] = Field(
        default_factory=DEFAULT_THROW_WINDOWS.as_tuples
    )
    # Outcome used when the ball arrives without anyone attempting a catch
    auto_catch_timing: CatchTiming = CatchTiming.LATE

    @model_validator(mode="after")
    def _check_bands(self) -> "TimingConfig":
        # Raises ValueError (surfaced as a ValidationError) on gaps/overlaps
        self.catch_windows()
        self.throw_windows()
        return self

    def catch_windows(self) -> TimingWindows:
        return TimingWindows(tuple(TimingBand(lo, hi, label) for lo, hi, label in self.catch_bands))

    def throw_windows(self) -> TimingWindows:
        return TimingWindows(tuple(TimingBand(lo, hi, label) for lo, hi, label in self.throw_bands))


class FlightConfig(BaseModel):
    """Ball flight scaling (seconds and yards)."""

    min_duration: float = Field(default=0.3, gt=0)
    max_duration: float = Field(default=0.9, gt=0)
    min_arc: float = Field(default=1.5, ge=0)
    max_arc: float = Field(default=6.0, ge=0)
    short_distance: float = 5.0   # At or below: bullet pass
    long_distance: float = 40.0   # At or above: full rainbow
    lead_progress: float = Field(default=0.15, ge=0, le=1)

    @model_validator(mode="after")
    def _check_ranges(self) -> "FlightConfig":
        if self.max_duration < self.min_duration:
            raise ValueError("max_duration must be >= min_duration")
        if self.max_arc < self.min_arc:
            raise ValueError("max_arc must be >= min_arc")
        if self.long_distance <= self.short_distance:
            raise ValueError("long_distance must be > short_distance")
        return self


class PhaseConfig(BaseModel):
    """Durations of the scheduled phase transitions (seconds)."""

    snap_duration: float = Field(default=0.2, gt=0)
    dropback_duration: float = Field(default=0.25, gt=0)
    throw_windup: float = Field(default=0.2, gt=0)
    catch_duration: float = Field(default=0.3, gt=0)
    settle_delay: float = Field(default=0.8, gt=0)
    big_play_settle_delay: float = Field(default=2.0, gt=0)
    route_duration: float = Field(default=3.0, gt=0)
    base_pocket_time: float = Field(default=4.0, gt=0)
    min_pocket_time: float = Field(default=1.8, gt=0)
    ai_throw_min_delay: float = Field(default=1.5, gt=0)
    ai_throw_max_delay: float = Field(default=2.5, gt=0)


class CoverageConfig(BaseModel):
    """Coverage selection weights and defender behaviour constants.

    Each weight is ``base + slope * difficulty`` with difficulty clamped to
    ``[0, max_difficulty]``; plain ``zone`` takes whatever is left.
    """

    max_difficulty: float = Field(default=2.0, gt=0)
    blitz_weight: tuple[float, float] = (0.05, 0.10)
    man_weight: tuple[float, float] = (0.10, 0.12)
    cover3_weight: tuple[float, float] = (0.10, 0.05)
    cover2_weight: tuple[float, float] = (0.10, 0.02)

    man_reaction_delay: float = Field(default=0.5, gt=0)
    zone_reaction_delay: float = Field(default=0.3, gt=0)
    zone_drop_time: float = Field(default=1.0, gt=0)
    man_close_time: float = Field(default=0.6, gt=0)
    man_offset: tuple[float, float] = (1.5, 1.5)  # (outside, over the top)
    break_speed: float = Field(default=9.0, gt=0)  # yards / second
    rush_delay: float = Field(default=0.3, ge=0)
    rush_speed: float = Field(default=5.5, gt=0)
    sack_radius: float = Field(default=1.0, gt=0)
    contest_radius: float = Field(default=2.5, gt=0)

    @model_validator(mode="after")
    def _check_weights(self) -> "CoverageConfig":
        for d in (0.0, self.max_difficulty):
            total = sum(
                base + slope * d
                for base, slope in (
                    self.blitz_weight, self.man_weight, self.cover3_weight, self.cover2_weight,
                )
            )
            if total > 1.0:
                raise ValueError(f"coverage weights exceed 1.0 at difficulty {d}")
        return self


class RulesConfig(BaseModel):
    """Scoring and clock rules."""

    touchdown_points: int = 6
    safety_points: int = 2
    kickoff_yard_line: int = Field(default=20, ge=1, le=99)
    touchback_yard_line: int = Field(default=20, ge=1, le=99)
    first_down_distance: int = Field(default=10, gt=0)
    sack_yards: int = Field(default=7, ge=0)
    quarters: int = Field(default=4, ge=1)
    quarter_duration: int = Field(default=90, gt=0)
    play_runoff: int = Field(default=8, ge=0)
    overtime_enabled: bool = True


class GameConfig(BaseModel):
    """Top-level configuration for a play session."""

    timing: TimingConfig = TimingConfig()
    flight: FlightConfig = FlightConfig()
    phases: PhaseConfig = PhaseConfig()
    coverage: CoverageConfig = CoverageConfig()
    rules: RulesConfig = RulesConfig()

    @classmethod
    def from_env(cls) -> "GameConfig":
        """Create config with overrides from ``POCKETQB_*`` variables."""
        rules = {}
        if "POCKETQB_QUARTER_DURATION" in os.environ:
            rules["quarter_duration"] = int(os.environ["POCKETQB_QUARTER_DURATION"])
        if "POCKETQB_OVERTIME" in os.environ:
            rules["overtime_enabled"] = os.environ["POCKETQB_OVERTIME"].lower() == "true"
        if "POCKETQB_TOUCHDOWN_POINTS" in os.environ:
            rules["touchdown_points"] = int(os.environ["POCKETQB_TOUCHDOWN_POINTS"])

        path = os.getenv("POCKETQB_CONFIG")
        config = load_config(path) if path else cls()
        if rules:
            config = config.model_copy(
                update={"rules": config.rules.model_copy(update=rules)}
            )
        return config


def load_config(path: str | Path) -> GameConfig:
    """Load a configuration from a JSON file."""
    try:
        with open(path, "r") as f:
            raw = json.load(f) or {}
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    try:
        return GameConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e


# Singleton config instance
_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the global game configuration."""
    global _config
    if _config is None:
        _config = GameConfig.from_env()
        logger.debug("Loaded game configuration")
    return _config


def set_config(config: Optional[GameConfig]) -> None:
    """Replace (or clear, with ``None``) the global configuration.

    Useful for testing.
    """
    global _config
    _config = config
