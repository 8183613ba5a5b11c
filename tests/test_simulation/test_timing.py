"""Tests for timing window classification."""

import pytest

from pocketqb.simulation.systems.timing import (
    DEFAULT_CATCH_WINDOWS,
    DEFAULT_THROW_WINDOWS,
    CatchTiming,
    ThrowTiming,
    TimingBand,
    TimingWindows,
    classify_catch,
    classify_throw,
)


class TestCatchTiming:
    """Ball-flight progress at the catch attempt."""

    @pytest.mark.parametrize("progress,expected", [
        (0.0, CatchTiming.MISS),
        (0.54, CatchTiming.MISS),
        (0.55, CatchTiming.GOOD),
        (0.71, CatchTiming.GOOD),
        (0.72, CatchTiming.PERFECT),
        (0.77, CatchTiming.PERFECT),
        (0.82, CatchTiming.LATE),
        (0.91, CatchTiming.LATE),
        (0.92, CatchTiming.MISS),
        (1.0, CatchTiming.MISS),
    ])
    def test_bands(self, progress, expected):
        assert classify_catch(progress) == expected

    def test_only_miss_fails(self):
        assert not CatchTiming.MISS.is_success
        assert CatchTiming.LATE.is_success
        assert CatchTiming.PERFECT.is_success

    def test_miss_has_two_bands(self):
        """Too early and too late both miss."""
        assert len(DEFAULT_CATCH_WINDOWS.band_for(CatchTiming.MISS)) == 2


class TestThrowTiming:
    """Route progress at release."""

    @pytest.mark.parametrize("progress,expected", [
        (0.0, ThrowTiming.EARLY),
        (0.39, ThrowTiming.EARLY),
        (0.40, ThrowTiming.GOOD),
        (0.50, ThrowTiming.PERFECT),
        (0.60, ThrowTiming.GOOD),
        (0.70, ThrowTiming.LATE),
        (0.85, ThrowTiming.VERY_LATE),
        (1.0, ThrowTiming.VERY_LATE),
    ])
    def test_bands(self, progress, expected):
        assert classify_throw(progress) == expected

    def test_every_progress_is_classified(self):
        """The windows partition [0, 1] without holes."""
        for i in range(1001):
            DEFAULT_THROW_WINDOWS.classify(i / 1000)
            DEFAULT_CATCH_WINDOWS.classify(i / 1000)

    def test_out_of_range_progress_fails(self):
        with pytest.raises(AssertionError):
            classify_throw(1.01)
        with pytest.raises(AssertionError):
            classify_catch(-0.1)


class TestWindowValidation:
    """Windows that don't partition [0, 1] are rejected at construction."""

    def test_gap_rejected(self):
        with pytest.raises(ValueError, match="Gap"):
            TimingWindows((TimingBand(0.0, 0.4, "a"), TimingBand(0.5, 1.0, "b")))

    def test_overlap_rejected(self):
        with pytest.raises(ValueError, match="Overlap"):
            TimingWindows((TimingBand(0.0, 0.6, "a"), TimingBand(0.5, 1.0, "b")))

    def test_must_start_at_zero(self):
        with pytest.raises(ValueError):
            TimingWindows((TimingBand(0.1, 1.0, "a"),))

    def test_must_end_at_one(self):
        with pytest.raises(ValueError):
            TimingWindows((TimingBand(0.0, 0.9, "a"),))

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            TimingWindows(())

    def test_single_band(self):
        windows = TimingWindows((TimingBand(0.0, 1.0, "only"),))
        assert windows.classify(0.0) == "only"
        assert windows.classify(1.0) == "only"
