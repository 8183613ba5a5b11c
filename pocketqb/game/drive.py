"""Drive & score ledger.

The authoritative record of down, distance, field position, clock and
score. ``apply_play`` is a pure reducer: it takes the state before a play
plus the play's outcome and returns the state for the next snap together
with the ``PlayResult`` describing what happened. Nothing else ever
creates a new ``DriveState`` mid-game.

Yard lines are always in the frame of the team with the ball
(0 = own goal line, 100 = opponent goal line), so a change of possession
mirrors the spot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple

from pocketqb.config import RulesConfig
from pocketqb.simulation.core.field import describe_yard_line
from pocketqb.simulation.systems.passing import PlayOutcome, is_big_play
from pocketqb.simulation.systems.timing import CatchTiming, ThrowTiming

logger = logging.getLogger(__name__)


class Side(str, Enum):
    HOME = "home"
    AWAY = "away"

    @property
    def opponent(self) -> Side:
        return Side.AWAY if self == Side.HOME else Side.HOME


@dataclass(frozen=True)
class Score:
    home: int = 0
    away: int = 0

    def add(self, side: Side, points: int) -> Score:
        if side == Side.HOME:
            return replace(self, home=self.home + points)
        return replace(self, away=self.away + points)

    @property
    def is_tied(self) -> bool:
        return self.home == self.away

    def __str__(self) -> str:
        return f"{self.home}-{self.away}"


@dataclass(frozen=True)
class DriveState:
    """Game situation before a snap.

    Attributes:
        down: 1-4
        yards_to_go: Yards to the line to gain; never more than the
            distance to the goal line (goal-to-go)
        yard_line: Line of scrimmage, 0-100 in the offense's frame
        quarter: 1-4, 5 = overtime
        time_remaining: Seconds left in the quarter
        score: Points per side
        possession: Side with the ball
        is_final: Game over
    """
    down: int = 1
    yards_to_go: int = 10
    yard_line: int = 20
    quarter: int = 1
    time_remaining: int = 90
    score: Score = field(default_factory=Score)
    possession: Side = Side.HOME
    is_final: bool = False

    def __post_init__(self):
        assert 1 <= self.down <= 4, f"down out of range: {self.down}"
        assert 0 <= self.yard_line <= 100, f"yard line out of range: {self.yard_line}"
        assert self.yards_to_go > 0, f"yards to go must be positive: {self.yards_to_go}"
        assert self.yards_to_go <= 100 - self.yard_line, (
            f"line to gain past the goal line: {self.yards_to_go} at {self.yard_line}"
        )
        assert self.quarter >= 1, f"quarter out of range: {self.quarter}"
        assert self.time_remaining >= 0, f"negative clock: {self.time_remaining}"

    @classmethod
    def kickoff(cls, rules: Optional[RulesConfig] = None, possession: Side = Side.HOME) -> DriveState:
        """Opening state of a game."""
        rules = rules or RulesConfig()
        return cls(
            down=1,
            yards_to_go=min(rules.first_down_distance, 100 - rules.kickoff_yard_line),
            yard_line=rules.kickoff_yard_line,
            quarter=1,
            time_remaining=rules.quarter_duration,
            possession=possession,
        )

    @property
    def is_goal_to_go(self) -> bool:
        return self.yard_line + self.yards_to_go >= 100

    @property
    def is_overtime(self) -> bool:
        return self.quarter > 4

    def down_and_distance(self) -> str:
        ordinal = {1: "1st", 2: "2nd", 3: "3rd", 4: "4th"}[self.down]
        distance = "goal" if self.is_goal_to_go else str(self.yards_to_go)
        return f"{ordinal} & {distance} at {describe_yard_line(self.yard_line)}"

    def to_dict(self) -> dict:
        return {
            "down": self.down,
            "yards_to_go": self.yards_to_go,
            "yard_line": self.yard_line,
            "quarter": self.quarter,
            "time_remaining": self.time_remaining,
            "score": {"home": self.score.home, "away": self.score.away},
            "possession": self.possession.value,
            "is_final": self.is_final,
        }


@dataclass(frozen=True)
class PlayResult:
    """What a play did to the drive.

    ``new_yard_line`` is the line of scrimmage of the next snap, in the
    frame of whichever team has the ball next.
    """
    outcome: PlayOutcome
    yards_gained: int
    new_yard_line: int
    is_touchdown: bool = False
    is_first_down: bool = False
    is_turnover: bool = False
    is_safety: bool = False
    turnover_on_downs: bool = False
    points_scored: int = 0
    description: str = ""
    catch_timing: Optional[CatchTiming] = None
    throw_timing: Optional[ThrowTiming] = None

    @property
    def is_big_play(self) -> bool:
        return is_big_play(self.outcome, self.yards_gained)

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "yards_gained": self.yards_gained,
            "new_yard_line": self.new_yard_line,
            "is_touchdown": self.is_touchdown,
            "is_first_down": self.is_first_down,
            "is_turnover": self.is_turnover,
            "is_safety": self.is_safety,
            "turnover_on_downs": self.turnover_on_downs,
            "points_scored": self.points_scored,
            "is_big_play": self.is_big_play,
            "description": self.description,
            "catch_timing": self.catch_timing.value if self.catch_timing else None,
            "throw_timing": self.throw_timing.value if self.throw_timing else None,
        }


# =============================================================================
# Reducer
# =============================================================================

def _first_and_ten(yard_line: int, rules: RulesConfig) -> int:
    return min(rules.first_down_distance, 100 - yard_line)


def _new_possession(state: DriveState, yard_line: int, rules: RulesConfig, score: Score) -> DriveState:
    """Flip the ball to the other side at ``yard_line`` (their frame)."""
    return replace(
        state,
        down=1,
        yards_to_go=_first_and_ten(yard_line, rules),
        yard_line=yard_line,
        score=score,
        possession=state.possession.opponent,
    )


def _sudden_death(state: DriveState, rules: RulesConfig) -> DriveState:
    """Any score in overtime ends the game."""
    if rules.overtime_enabled and state.quarter > rules.quarters:
        return replace(state, is_final=True)
    return state


def apply_play(
    state: DriveState,
    outcome: PlayOutcome,
    yards_gained: int = 0,
    spot: Optional[float] = None,
    rules: Optional[RulesConfig] = None,
) -> Tuple[DriveState, PlayResult]:
    """Advance the drive by one play.

    Args:
        state: Situation before the snap
        outcome: How the play ended; completions are re-graded here, so
            ``COMPLETE`` reaching the goal line becomes ``TOUCHDOWN`` and
            one reaching the line to gain becomes ``FIRST_DOWN``
        yards_gained: Gain for completions; a negative value overrides the
            default sack loss
        spot: Interception point (offense frame); defaults to the line of
            scrimmage
        rules: Scoring rules

    Returns:
        (state for the next snap, result of this play)
    """
    assert not state.is_final, "cannot play after the game is over"
    rules = rules or RulesConfig()
    offense = state.possession
    yl = state.yard_line

    # --- Interception -------------------------------------------------------
    if outcome == PlayOutcome.INTERCEPTION:
        spot_y = yl if spot is None else spot
        if spot_y >= 100:
            new_yl = rules.touchback_yard_line
            where = "in the end zone, touchback"
        else:
            new_yl = int(max(1, min(99, round(100 - spot_y))))
            where = f"returned from the {describe_yard_line(new_yl)}"
        next_state = _new_possession(state, new_yl, rules, state.score)
        return next_state, PlayResult(
            outcome=PlayOutcome.INTERCEPTION,
            yards_gained=0,
            new_yard_line=new_yl,
            is_turnover=True,
            description=f"INTERCEPTED {where}",
        )

    # --- Sack ---------------------------------------------------------------
    if outcome == PlayOutcome.SACK:
        loss = -yards_gained if yards_gained < 0 else rules.sack_yards
        new_yl = yl - loss
        if new_yl <= 0:
            score = state.score.add(offense.opponent, rules.safety_points)
            next_state = _sudden_death(
                _new_possession(state, rules.kickoff_yard_line, rules, score), rules
            )
            return next_state, PlayResult(
                outcome=PlayOutcome.SACK,
                yards_gained=-yl,
                new_yard_line=rules.kickoff_yard_line,
                is_turnover=True,
                is_safety=True,
                points_scored=rules.safety_points,
                description="SACKED in the end zone - SAFETY",
            )
        actual_loss = yl - new_yl
        return _next_down(
            state,
            PlayOutcome.SACK,
            -actual_loss,
            new_yl,
            state.yards_to_go + actual_loss,
            f"SACKED for a loss of {actual_loss}",
            rules,
        )

    # --- Incomplete ---------------------------------------------------------
    if outcome == PlayOutcome.INCOMPLETE:
        return _next_down(
            state, PlayOutcome.INCOMPLETE, 0, yl, state.yards_to_go, "Incomplete pass", rules
        )

    # --- Completions --------------------------------------------------------
    new_yl = yl + yards_gained
    if outcome == PlayOutcome.TOUCHDOWN or new_yl >= 100:
        gained = yards_gained if new_yl >= 100 else 100 - yl
        score = state.score.add(offense, rules.touchdown_points)
        next_state = _sudden_death(
            _new_possession(state, rules.kickoff_yard_line, rules, score), rules
        )
        return next_state, PlayResult(
            outcome=PlayOutcome.TOUCHDOWN,
            yards_gained=gained,
            new_yard_line=rules.kickoff_yard_line,
            is_touchdown=True,
            points_scored=rules.touchdown_points,
            description=f"TOUCHDOWN! {gained} yard strike",
        )

    if new_yl <= 0:
        # Completion tackled behind his own goal line
        score = state.score.add(offense.opponent, rules.safety_points)
        next_state = _sudden_death(
            _new_possession(state, rules.kickoff_yard_line, rules, score), rules
        )
        return next_state, PlayResult(
            outcome=PlayOutcome.COMPLETE,
            yards_gained=-yl,
            new_yard_line=rules.kickoff_yard_line,
            is_turnover=True,
            is_safety=True,
            points_scored=rules.safety_points,
            description="Tackled in the end zone - SAFETY",
        )

    if yards_gained >= state.yards_to_go:
        next_state = replace(
            state, down=1, yards_to_go=_first_and_ten(new_yl, rules), yard_line=new_yl
        )
        return next_state, PlayResult(
            outcome=PlayOutcome.FIRST_DOWN,
            yards_gained=yards_gained,
            new_yard_line=new_yl,
            is_first_down=True,
            description=f"FIRST DOWN! +{yards_gained} yards",
        )

    return _next_down(
        state,
        PlayOutcome.COMPLETE,
        yards_gained,
        new_yl,
        state.yards_to_go - yards_gained,
        f"Complete for {yards_gained} yards",
        rules,
    )


def _next_down(
    state: DriveState,
    outcome: PlayOutcome,
    yards_gained: int,
    new_yl: int,
    yards_to_go: int,
    description: str,
    rules: RulesConfig,
) -> Tuple[DriveState, PlayResult]:
    """Advance the down, or hand the ball over if it was fourth down."""
    if state.down >= 4:
        turnover_yl = 100 - new_yl
        next_state = _new_possession(state, turnover_yl, rules, state.score)
        return next_state, PlayResult(
            outcome=outcome,
            yards_gained=yards_gained,
            new_yard_line=turnover_yl,
            is_turnover=True,
            turnover_on_downs=True,
            description=f"{description} - TURNOVER ON DOWNS",
        )

    next_state = replace(
        state,
        down=state.down + 1,
        yards_to_go=min(yards_to_go, 100 - new_yl),
        yard_line=new_yl,
    )
    return next_state, PlayResult(
        outcome=outcome,
        yards_gained=yards_gained,
        new_yard_line=new_yl,
        description=description,
    )


# =============================================================================
# Game clock
# =============================================================================

def run_clock(state: DriveState, seconds: int, rules: Optional[RulesConfig] = None) -> DriveState:
    """Run ``seconds`` off the clock, rolling quarters and ending the game.

    Regulation ending tied goes to a sudden-death overtime period when
    overtime is enabled; otherwise (or when overtime expires) the game is
    final.
    """
    assert seconds >= 0, f"negative runoff: {seconds}"
    rules = rules or RulesConfig()
    if state.is_final:
        return state

    remaining = state.time_remaining - seconds
    if remaining > 0:
        return replace(state, time_remaining=remaining)

    if state.quarter < rules.quarters:
        logger.debug("End of quarter %d", state.quarter)
        return replace(state, quarter=state.quarter + 1, time_remaining=rules.quarter_duration)

    if state.quarter == rules.quarters and state.score.is_tied and rules.overtime_enabled:
        logger.debug("Regulation ends tied %s, overtime", state.score)
        return replace(state, quarter=state.quarter + 1, time_remaining=rules.quarter_duration)

    return replace(state, time_remaining=0, is_final=True)


# =============================================================================
# Play log
# =============================================================================

@dataclass
class PlayLog:
    """Record of a single play in a session."""
    play_number: int
    quarter: int
    down: int
    distance: int
    los: int  # Line of scrimmage (0-100)
    possession: Side
    play_call: str
    coverage: str
    result: PlayResult

    def format(self) -> str:
        return (
            f"#{self.play_number} Q{self.quarter} {self.possession.value} "
            f"{self.down}&{self.distance} @{self.los} [{self.play_call} vs {self.coverage}] "
            f"{self.result.description}"
        )


def summarize(log: List[PlayLog]) -> dict:
    """Box-score totals for a list of plays."""
    completions = [p for p in log if p.result.outcome.is_completion]
    attempts = [p for p in log if p.result.outcome != PlayOutcome.SACK]
    return {
        "plays": len(log),
        "attempts": len(attempts),
        "completions": len(completions),
        "yards": sum(p.result.yards_gained for p in completions),
        "touchdowns": sum(1 for p in log if p.result.is_touchdown),
        "interceptions": sum(1 for p in log if p.result.outcome == PlayOutcome.INTERCEPTION),
        "sacks": sum(1 for p in log if p.result.outcome == PlayOutcome.SACK),
        "big_plays": sum(1 for p in log if p.result.is_big_play),
    }
