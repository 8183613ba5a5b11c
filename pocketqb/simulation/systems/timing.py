"""Timing window evaluation.

Maps a continuous progress value at the instant of an action onto a
discrete timing quality:

- Catch timing: ball-flight progress when the catch (or interception)
  button is pressed -> perfect / good / late / miss
- Throw timing: route progress when the ball is released
  -> perfect / good / early / late / very_late

Windows are half-open ``[lower, upper)`` bands; the last band also
includes its upper bound so that ``1.0`` is always classified.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar


class CatchTiming(str, Enum):
    """Quality of a catch attempt."""
    PERFECT = "perfect"
    GOOD = "good"
    LATE = "late"
    MISS = "miss"

    @property
    def is_success(self) -> bool:
        return self != CatchTiming.MISS


class ThrowTiming(str, Enum):
    """Quality of the release relative to the receiver's route."""
    PERFECT = "perfect"
    GOOD = "good"
    EARLY = "early"
    LATE = "late"
    VERY_LATE = "very_late"


L = TypeVar("L")


@dataclass(frozen=True)
class TimingBand(Generic[L]):
    """One contiguous progress band and the label it maps to."""
    lower: float
    upper: float
    label: L

    def contains(self, progress: float, closed: bool = False) -> bool:
        if closed:
            return self.lower <= progress <= self.upper
        return self.lower <= progress < self.upper


@dataclass(frozen=True)
class TimingWindows(Generic[L]):
    """An exhaustive, non-overlapping partition of ``[0, 1]``.

    Construction fails with ``ValueError`` if the bands leave a gap,
    overlap, or do not span exactly 0 to 1.
    """
    bands: tuple[TimingBand[L], ...]

    def __post_init__(self) -> None:
        if not self.bands:
            raise ValueError("Timing windows need at least one band")
        if self.bands[0].lower != 0.0:
            raise ValueError(f"First band must start at 0.0, got {self.bands[0].lower}")
        if self.bands[-1].upper != 1.0:
            raise ValueError(f"Last band must end at 1.0, got {self.bands[-1].upper}")

        for band in self.bands:
            if band.upper <= band.lower:
                raise ValueError(f"Empty or inverted band {band.lower}-{band.upper}")

        for prev, nxt in zip(self.bands, self.bands[1:]):
            if nxt.lower > prev.upper:
                raise ValueError(f"Gap between {prev.upper} and {nxt.lower}")
            if nxt.lower < prev.upper:
                raise ValueError(f"Overlap between {prev.upper} and {nxt.lower}")

    def classify(self, progress: float) -> L:
        """Classify a progress value. Total on ``[0, 1]``."""
        assert 0.0 <= progress <= 1.0, f"progress out of range: {progress}"

        last = len(self.bands) - 1
        for i, band in enumerate(self.bands):
            if band.contains(progress, closed=(i == last)):
                return band.label

        # Unreachable for validated windows
        raise AssertionError(f"No timing band for progress {progress}")

    def band_for(self, label: L) -> list[TimingBand[L]]:
        """All bands carrying a label (``miss`` usually has two)."""
        return [b for b in self.bands if b.label == label]

    def as_tuples(self) -> list[tuple[float, float, L]]:
        """Bands as plain ``(lower, upper, label)`` rows, the config format."""
        return [(b.lower, b.upper, b.label) for b in self.bands]


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_CATCH_WINDOWS: TimingWindows[CatchTiming] = TimingWindows((
    TimingBand(0.0, 0.55, CatchTiming.MISS),      # Too early
    TimingBand(0.55, 0.72, CatchTiming.GOOD),
    TimingBand(0.72, 0.82, CatchTiming.PERFECT),
    TimingBand(0.82, 0.92, CatchTiming.LATE),
    TimingBand(0.92, 1.0, CatchTiming.MISS),      # Ball already past
))

DEFAULT_THROW_WINDOWS: TimingWindows[ThrowTiming] = TimingWindows((
    TimingBand(0.0, 0.40, ThrowTiming.EARLY),
    TimingBand(0.40, 0.48, ThrowTiming.GOOD),
    TimingBand(0.48, 0.58, ThrowTiming.PERFECT),
    TimingBand(0.58, 0.68, ThrowTiming.GOOD),
    TimingBand(0.68, 0.85, ThrowTiming.LATE),
    TimingBand(0.85, 1.0, ThrowTiming.VERY_LATE),
))


def classify_catch(
    progress: float,
    windows: TimingWindows[CatchTiming] = DEFAULT_CATCH_WINDOWS,
) -> CatchTiming:
    """Classify ball-flight progress at a catch attempt."""
    return windows.classify(progress)


def classify_throw(
    route_progress: float,
    windows: TimingWindows[ThrowTiming] = DEFAULT_THROW_WINDOWS,
) -> ThrowTiming:
    """Classify route progress at the moment of release."""
    return windows.classify(route_progress)
