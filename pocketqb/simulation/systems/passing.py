"""Pass outcome model.

Turns the quality of a throw (route progress at release) and of the
catch attempt (flight progress at the button press) into an outcome and
a gain. Throw quality sets the base drop and interception odds and a
yardage bonus; catch timing scales the drop odds and the yardage; tight
coverage and difficulty raise the interception odds.

Randomness comes only from the injected ``random.Random``.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .timing import CatchTiming, ThrowTiming

logger = logging.getLogger(__name__)


class PlayOutcome(str, Enum):
    """How a play ended, as consumed by the drive ledger."""
    TOUCHDOWN = "touchdown"
    FIRST_DOWN = "first_down"
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    SACK = "sack"
    INTERCEPTION = "interception"

    @property
    def is_completion(self) -> bool:
        return self in (PlayOutcome.TOUCHDOWN, PlayOutcome.FIRST_DOWN, PlayOutcome.COMPLETE)


@dataclass(frozen=True)
class ThrowQuality:
    drop_chance: float
    int_chance: float
    yard_bonus: int
    spiral_quality: float


@dataclass(frozen=True)
class CatchModifier:
    drop_mod: float
    yard_mod: float


THROW_QUALITY: Dict[ThrowTiming, ThrowQuality] = {
    ThrowTiming.PERFECT: ThrowQuality(0.05, 0.01, 6, 1.0),
    ThrowTiming.GOOD: ThrowQuality(0.12, 0.04, 2, 0.85),
    ThrowTiming.EARLY: ThrowQuality(0.22, 0.08, 0, 0.7),
    ThrowTiming.LATE: ThrowQuality(0.28, 0.12, -2, 0.6),
    ThrowTiming.VERY_LATE: ThrowQuality(0.45, 0.22, -5, 0.3),
}

CATCH_MODIFIERS: Dict[CatchTiming, CatchModifier] = {
    CatchTiming.PERFECT: CatchModifier(0.4, 1.3),
    CatchTiming.GOOD: CatchModifier(0.8, 1.1),
    CatchTiming.LATE: CatchModifier(1.8, 0.5),
    CatchTiming.MISS: CatchModifier(999.0, 0.0),  # Always drops
}

# Yards between ball and nearest defender that count as tight / close coverage
TIGHT_COVERAGE = 3.0
CLOSE_COVERAGE = 6.0

BIG_PLAY_YARDS = 25


def coverage_factor(defender_distance: float) -> float:
    """Interception multiplier for how tightly the catch point is covered."""
    if defender_distance < TIGHT_COVERAGE:
        return 1.5
    if defender_distance < CLOSE_COVERAGE:
        return 1.2
    return 1.0


def is_big_play(outcome: PlayOutcome, yards_gained: int) -> bool:
    """Touchdown or a 25+ yard gain."""
    return outcome == PlayOutcome.TOUCHDOWN or yards_gained >= BIG_PLAY_YARDS


@dataclass(frozen=True)
class PassResolution:
    outcome: PlayOutcome
    yards: int
    spiral_quality: float


def resolve_pass(
    throw_timing: ThrowTiming,
    catch_timing: CatchTiming,
    catch_depth: float,
    defender_distance: float,
    difficulty: float,
    rng: random.Random,
) -> PassResolution:
    """Outcome of a caught-at ball before field position is considered.

    Returns ``COMPLETE`` with the gain, ``INCOMPLETE`` (drop) or
    ``INTERCEPTION``. Touchdown and first-down upgrades belong to the
    caller, which knows the line to gain.

    Args:
        throw_timing: Quality of the release
        catch_timing: Quality of the catch attempt
        catch_depth: Yards past the line of scrimmage of the catch point
        defender_distance: Yards from the catch point to the nearest defender
        difficulty: Scales both drop and interception odds
        rng: Random source
    """
    quality = THROW_QUALITY[throw_timing]
    modifier = CATCH_MODIFIERS[catch_timing]

    if catch_timing == CatchTiming.MISS:
        return PassResolution(PlayOutcome.INCOMPLETE, 0, quality.spiral_quality)

    int_chance = quality.int_chance * coverage_factor(defender_distance) * difficulty
    if rng.random() < int_chance:
        logger.debug("Pass picked off (chance %.3f)", int_chance)
        return PassResolution(PlayOutcome.INTERCEPTION, 0, quality.spiral_quality)

    drop_chance = quality.drop_chance * modifier.drop_mod * difficulty
    if rng.random() < drop_chance:
        logger.debug("Pass dropped (chance %.3f)", drop_chance)
        return PassResolution(PlayOutcome.INCOMPLETE, 0, quality.spiral_quality)

    yards = max(0, round((catch_depth + quality.yard_bonus) * modifier.yard_mod))
    return PassResolution(PlayOutcome.COMPLETE, yards, quality.spiral_quality)
