"""Systems layer - timing, coverage, routes and pass outcomes."""

from .timing import (
    CatchTiming,
    ThrowTiming,
    TimingBand,
    TimingWindows,
    classify_catch,
    classify_throw,
)
# coverage must load before route_runner (plays depend on CoverageType)
from .coverage import (
    CoverageType,
    CoverageBehavior,
    DefenderAssignment,
    DefenderState,
    assign_defenders,
    coverage_weights,
    select_coverage,
)
from .route_runner import ReceiverState, route_progress, receiver_states
from .passing import PlayOutcome, resolve_pass

__all__ = [
    "CatchTiming",
    "ThrowTiming",
    "TimingBand",
    "TimingWindows",
    "classify_catch",
    "classify_throw",
    "CoverageType",
    "CoverageBehavior",
    "DefenderAssignment",
    "DefenderState",
    "assign_defenders",
    "coverage_weights",
    "select_coverage",
    "ReceiverState",
    "route_progress",
    "receiver_states",
    "PlayOutcome",
    "resolve_pass",
]
