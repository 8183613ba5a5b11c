"""Campaign difficulty curve.

One scalar per week drives everything that gets harder over a season:
coverage weights, pocket time, and drop / interception odds.
"""

from __future__ import annotations

from typing import Optional

from pocketqb.config import PhaseConfig

SEASON_WEEKS = 18


def difficulty_for_week(week: int) -> float:
    """Difficulty for a campaign week (1-based).

    Weeks 1-4 ease in from 0.8, mid-season sits around 1.0-1.25,
    late season climbs from 1.3, and the playoffs jump 0.2 per round.
    """
    assert week >= 1, f"week must be >= 1: {week}"
    if week <= 4:
        return round(0.8 + (week - 1) * 0.05, 3)
    if week <= 10:
        return round(1.0 + (week - 5) * 0.05, 3)
    if week <= 16:
        return round(1.3 + (week - 11) * 0.05, 3)
    return round(1.6 + (week - 17) * 0.2, 3)


def pocket_time_for(difficulty: float, phases: Optional[PhaseConfig] = None) -> float:
    """Seconds before the pocket collapses."""
    assert difficulty > 0, f"difficulty must be positive: {difficulty}"
    phases = phases or PhaseConfig()
    return max(phases.min_pocket_time, phases.base_pocket_time / difficulty)
