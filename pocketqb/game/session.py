"""Play session - one game, one down at a time.

``PlaySession`` is the root driver of the simulation. It owns the phase
machine, the scheduler that is the single source of time, the per-play
data, and the drive ledger state. Hosts feed it input
(``select_play``, ``snap``, ``throw``, ``attempt_catch``,
``attempt_interception``) and time (``tick``); presentation listens on
its ``EventBus``.

Per-play data only exists while it is meaningful:

    PRE_SNAP      call (after select_play)
    SNAP..READ    call, snap_time
    THROW..CATCH  call, snap_time, ball
    RESULT        call, snap_time, ball (unless sacked), result

Every delayed transition is a timer on the session's scheduler, so
``dispose()`` cancels everything still pending and nothing can fire
afterwards.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pocketqb.config import GameConfig, get_config
from pocketqb.game.difficulty import difficulty_for_week, pocket_time_for
from pocketqb.game.drive import DriveState, PlayLog, PlayResult, apply_play, run_clock
from pocketqb.simulation.core.clock import Scheduler, TimerHandle
from pocketqb.simulation.core.events import EventBus, EventType
from pocketqb.simulation.core.field import is_on_field, qb_position
from pocketqb.simulation.core.phases import PhaseStateMachine, PhaseTransition, PlayPhase
from pocketqb.simulation.core.vec2 import Vec2
from pocketqb.simulation.physics.ball_flight import BallFlight, orientation_at_progress
from pocketqb.simulation.plays.playbook import PlayDefinition, Playbook, default_playbook
from pocketqb.simulation.plays.routes import receiver_position
from pocketqb.simulation.systems.coverage import (
    DEFENSIVE_SHELL,
    CoverageType,
    DefenderAssignment,
    DefenderState,
    ThrowInfo,
    assign_defenders,
    blitz_arrival_time,
    choose_blitzer,
    defender_state,
    is_contested,
    nearest_defender,
    select_coverage,
)
from pocketqb.simulation.systems.passing import PlayOutcome, resolve_pass
from pocketqb.simulation.systems.route_runner import (
    ReceiverState,
    lead_point,
    receiver_states,
    route_progress,
)
from pocketqb.simulation.systems.timing import CatchTiming, ThrowTiming

logger = logging.getLogger(__name__)


class PlayerRole(str, Enum):
    """Which side of the pass the user plays."""
    QUARTERBACK = "quarterback"
    RECEIVER = "receiver"


class SessionDisposedError(RuntimeError):
    """Input arrived after the session was disposed."""
    pass


# =============================================================================
# Per-play data
# =============================================================================

@dataclass(frozen=True)
class PlayCall:
    """The play and the defence's answer to it, fixed at selection."""
    play: PlayDefinition
    coverage: CoverageType
    assignments: Tuple[DefenderAssignment, ...]
    line_of_scrimmage: int
    blitzer_index: Optional[int] = None
    user_receiver: Optional[int] = None


@dataclass
class BallState:
    """The ball from the throw until it is resolved."""
    flight: BallFlight
    target_index: int
    throw_timing: ThrowTiming
    thrown_at: float
    release_time: float
    in_flight: bool = False
    resolved_progress: Optional[float] = None

    @property
    def start(self) -> Vec2:
        return self.flight.start

    @property
    def target(self) -> Vec2:
        return self.flight.target

    @property
    def duration(self) -> float:
        return self.flight.duration

    def progress_at(self, time: float) -> float:
        """Flight progress at session time ``time``; frozen once resolved."""
        if self.resolved_progress is not None:
            return self.resolved_progress
        if time <= self.release_time:
            return 0.0
        return self.flight.progress_at(time - self.release_time)

    def to_dict(self, time: float) -> dict:
        progress = self.progress_at(time)
        sample = self.flight.sample(progress)
        return {
            "start": self.start.to_dict(),
            "target": self.target.to_dict(),
            "target_index": self.target_index,
            "release_time": round(self.release_time, 4),
            "duration": round(self.duration, 4),
            "progress": round(progress, 4),
            "in_flight": self.in_flight,
            "position": sample.position.to_dict(),
            "height": round(sample.height, 3),
            "spin": round(sample.spin, 1),
            "orientation": [
                round(v, 3) for v in orientation_at_progress(self.target - self.start, progress)
            ],
            "throw_timing": self.throw_timing.value,
            "throw_type": self.flight.throw_type.value,
        }


@dataclass(frozen=True)
class InterceptionAttempt:
    defender_index: int
    timing: CatchTiming
    distance: float
    success: bool


@dataclass
class _PendingResult:
    """Outcome decided at CATCH, committed at RESULT."""
    drive: DriveState
    result: PlayResult


# =============================================================================
# Session
# =============================================================================

class PlaySession:
    """A disposable game session driven by an external clock.

    Usage:
        with PlaySession(week=3, seed=7) as session:
            session.select_play("slant-flood")
            session.snap()
            session.tick(1.4)
            session.throw(target_index=0)
            session.tick(0.5)
            session.attempt_catch()
    """

    def __init__(
        self,
        week: int = 1,
        role: PlayerRole = PlayerRole.QUARTERBACK,
        difficulty: Optional[float] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        config: Optional[GameConfig] = None,
        playbook: Optional[Playbook] = None,
        event_bus: Optional[EventBus] = None,
        drive: Optional[DriveState] = None,
        user_receiver: int = 0,
    ):
        self.config = config or get_config()
        self.week = week
        self.role = role
        self.difficulty = difficulty if difficulty is not None else difficulty_for_week(week)
        self.rng = rng or random.Random(seed)
        self.playbook = playbook or default_playbook()
        self.event_bus = event_bus or EventBus()
        self.scheduler = Scheduler()
        self.fsm = PhaseStateMachine()
        self.fsm.on_transition(self._on_transition)
        self.user_receiver = user_receiver

        self._catch_windows = self.config.timing.catch_windows()
        self._throw_windows = self.config.timing.throw_windows()
        self._drive = drive or DriveState.kickoff(self.config.rules)
        self._disposed = False

        self.play_number = 0
        self.history: List[PlayLog] = []

        # Per-play state
        self.call: Optional[PlayCall] = None
        self.snap_time: Optional[float] = None
        self.ball: Optional[BallState] = None
        self.result: Optional[PlayResult] = None
        self._pending: Optional[_PendingResult] = None
        self._frozen_at: Optional[float] = None
        self._pocket_timer: Optional[TimerHandle] = None
        self._sack_reason = ""
        self._intercept_attempts: Dict[int, InterceptionAttempt] = {}

        logger.info(
            "Session created: week %d, difficulty %.2f, role %s",
            week, self.difficulty, role.value,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def phase(self) -> PlayPhase:
        return self.fsm.phase

    @property
    def drive(self) -> DriveState:
        """Read-only drive state (frozen)."""
        return self._drive

    @property
    def now(self) -> float:
        return self.scheduler.now

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def pocket_time(self) -> float:
        return pocket_time_for(self.difficulty, self.config.phases)

    def tick(self, dt: float) -> int:
        """Advance simulation time. A no-op once disposed."""
        if self._disposed:
            return 0
        return self.scheduler.advance(dt)

    def dispose(self) -> None:
        """Cancel every pending timer and stop accepting input."""
        if self._disposed:
            return
        cancelled = self.scheduler.close()
        self._disposed = True
        self.event_bus.emit_simple(
            EventType.SESSION_DISPOSED,
            self.now,
            self.play_number,
            f"disposed in {self.phase.value}, {cancelled} timers cancelled",
            cancelled_timers=cancelled,
        )
        self.fsm.clear_callbacks()
        self.event_bus.clear_subscribers()
        logger.info("Session disposed in %s (%d timers cancelled)", self.phase.value, cancelled)

    def __enter__(self) -> PlaySession:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # =========================================================================
    # Input
    # =========================================================================

    def select_play(self, play_id: str) -> bool:
        """Call a play and draw the defence's coverage (PRE_SNAP only).

        Plays not yet unlocked for the session's week are rejected like any
        out-of-phase input.

        Raises:
            UnknownPlayError: No selectable play with that id
        """
        self._check_alive()
        if self.phase != PlayPhase.PRE_SNAP:
            return self._reject("select_play", "plays can only be called before the snap", False)

        play = self.playbook.get(play_id)
        if play.unlock_week > self.week:
            return self._reject(
                "select_play", f"{play.id} unlocks in week {play.unlock_week}", False
            )
        los = self._drive.yard_line
        coverage = select_coverage(self.difficulty, self.rng, self.config.coverage)
        blitzer = choose_blitzer(self.rng) if coverage == CoverageType.BLITZ else None

        user_receiver = None
        if self.role == PlayerRole.RECEIVER:
            indexes = [r.receiver_index for r in play.routes]
            user_receiver = self.user_receiver if self.user_receiver in indexes else indexes[0]

        self.call = PlayCall(
            play=play,
            coverage=coverage,
            assignments=assign_defenders(coverage, los, play.receiver_indexes, blitzer),
            line_of_scrimmage=los,
            blitzer_index=blitzer,
            user_receiver=user_receiver,
        )
        self.event_bus.emit_simple(
            EventType.PLAY_SELECTED,
            self.now,
            self.play_number + 1,
            f"{play.name} vs {coverage.value}",
            play_id=play.id,
            coverage=coverage.value,
        )
        logger.debug("Called %s against %s", play.id, coverage.value)
        return True

    def snap(self) -> bool:
        """Snap the ball (PRE_SNAP with a play selected)."""
        self._check_alive()
        if self.phase != PlayPhase.PRE_SNAP:
            return self._reject("snap", f"cannot snap during {self.phase.value}", False)
        if self.call is None:
            return self._reject("snap", "no play selected", False)

        self.play_number += 1
        self.snap_time = self.now
        self._transition(PlayPhase.SNAP, "snap")
        self.event_bus.emit_simple(
            EventType.SNAP,
            self.now,
            self.play_number,
            f"{self._drive.down_and_distance()}, {self.call.play.name} vs {self.call.coverage.value}",
            play_id=self.call.play.id,
            coverage=self.call.coverage.value,
        )

        phases = self.config.phases
        self.scheduler.schedule(phases.snap_duration, self._to_dropback, name="snap->dropback")

        # Pocket clock; a blitzer who gets home first wins the race
        sack_delay, self._sack_reason = self.pocket_time, "pocket collapsed"
        if self.call.blitzer_index is not None:
            rusher = DEFENSIVE_SHELL[self.call.blitzer_index].position(self.call.line_of_scrimmage)
            arrival = blitz_arrival_time(rusher, self._qb, self.config.coverage)
            if arrival < sack_delay:
                sack_delay, self._sack_reason = arrival, "blitz got home"
        self._pocket_timer = self.scheduler.schedule(sack_delay, self._sack, name="pocket")
        return True

    def throw(
        self,
        target_index: Optional[int] = None,
        aim: Optional[Vec2] = None,
    ) -> Optional[BallState]:
        """Release the ball (READ only).

        Args:
            target_index: Receiver to throw to; defaults to the receiver
                nearest ``aim``, or the most open one
            aim: Field point to throw at; defaults to leading the target

        Raises:
            ValueError: Unknown receiver or an aim point off the field
        """
        self._check_alive()
        if self.phase != PlayPhase.READ:
            return self._reject("throw", f"cannot throw during {self.phase.value}", None)

        call = self.call
        assert call is not None and self.snap_time is not None
        progress = self._route_progress(self.play_time)
        los = call.line_of_scrimmage

        if aim is not None and not is_on_field(aim):
            raise ValueError(f"Aim point off the field: {aim}")
        if target_index is not None:
            if target_index not in {r.receiver_index for r in call.play.routes}:
                raise ValueError(f"{call.play.id} has no receiver {target_index}")
        elif aim is not None:
            receivers = self.receivers()
            target_index = min(receivers, key=lambda r: r.position.distance_to(aim)).index
        else:
            target_index = self._best_target(progress)

        route = call.play.route_for(target_index)
        if aim is None:
            aim = lead_point(route, progress, self.config.flight.lead_progress, los)

        throw_timing = self._throw_windows.classify(progress)
        self._cancel_pocket()

        windup = self.config.phases.throw_windup
        self.ball = BallState(
            flight=BallFlight.between(self._qb, aim, self.config.flight),
            target_index=target_index,
            throw_timing=throw_timing,
            thrown_at=self.now,
            release_time=self.now + windup,
        )
        self._transition(PlayPhase.THROW, f"throw to receiver {target_index}")
        self.event_bus.emit_simple(
            EventType.THROW,
            self.now,
            self.play_number,
            f"{throw_timing.value} throw to receiver {target_index}",
            target_index=target_index,
            aim=aim.to_dict(),
            throw_timing=throw_timing.value,
            route_progress=round(progress, 4),
        )
        self.scheduler.schedule(windup, self._release, name="throw->ball_flight")
        return self.ball

    def attempt_catch(self, at: Optional[float] = None) -> Optional[CatchTiming]:
        """Receiver's catch attempt (BALL_FLIGHT only).

        Returns the timing classification synchronously.

        Raises:
            ValueError: ``at`` outside the ball's flight so far
        """
        self._check_alive()
        if self.phase != PlayPhase.BALL_FLIGHT:
            return self._reject("attempt_catch", f"no ball in flight during {self.phase.value}", None)

        at = self._attempt_time(at)
        progress = self.ball.progress_at(at)
        timing = self._catch_windows.classify(progress)
        self.event_bus.emit_simple(
            EventType.CATCH_ATTEMPT,
            at,
            self.play_number,
            f"{timing.value} catch attempt at {progress:.2f}",
            timing=timing.value,
            progress=round(progress, 4),
        )
        self._resolve_catch(timing, progress, at)
        return timing

    def attempt_interception(
        self,
        defender_index: int,
        at: Optional[float] = None,
    ) -> Optional[InterceptionAttempt]:
        """A defender plays the ball (BALL_FLIGHT only, once per defender).

        A well-timed attempt within contest range picks the pass off;
        anything else fails and the ball stays live.

        Raises:
            ValueError: Unknown defender or ``at`` outside the flight so far
        """
        self._check_alive()
        if self.phase != PlayPhase.BALL_FLIGHT:
            return self._reject(
                "attempt_interception", f"no ball in flight during {self.phase.value}", None
            )
        if not 0 <= defender_index < len(DEFENSIVE_SHELL):
            raise ValueError(f"No defender {defender_index}")
        if defender_index in self._intercept_attempts:
            return self._reject(
                "attempt_interception", f"defender {defender_index} already attempted", None
            )

        at = self._attempt_time(at)
        progress = self.ball.progress_at(at)
        timing = self._catch_windows.classify(progress)
        defender = self._defenders_at(at - self.snap_time)[defender_index]
        distance = defender.position.distance_to(self.ball.target)
        success = timing.is_success and is_contested(distance, self.config.coverage)

        attempt = InterceptionAttempt(defender_index, timing, round(distance, 3), success)
        self._intercept_attempts[defender_index] = attempt
        self.event_bus.emit_simple(
            EventType.INTERCEPTION_ATTEMPT,
            at,
            self.play_number,
            f"defender {defender_index} {'picks it off' if success else 'misses'} ({timing.value})",
            defender_index=defender_index,
            timing=timing.value,
            distance=attempt.distance,
            success=success,
        )
        if success:
            self._resolve_catch(timing, progress, at, interceptor=defender_index)
        return attempt

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def play_time(self) -> float:
        """Seconds since the snap (0 before it)."""
        if self.snap_time is None:
            return 0.0
        return self.now - self.snap_time

    @property
    def route_progress(self) -> float:
        """Shared route progress of every receiver right now."""
        return self._route_progress(self.play_time)

    def receivers(self, play_time: Optional[float] = None) -> List[ReceiverState]:
        if self.call is None:
            return []
        t = self.play_time if play_time is None else play_time
        return receiver_states(
            self.call.play.routes,
            self._route_progress(t),
            self.call.line_of_scrimmage,
            targeted=self.ball.target_index if self.ball else None,
            user_receiver=self.call.user_receiver,
        )

    def defenders(self, play_time: Optional[float] = None) -> List[DefenderState]:
        if self.call is None:
            return []
        return self._defenders_at(self.play_time if play_time is None else play_time)

    def snapshot(self) -> Dict[str, Any]:
        """Full state for presentation collaborators."""
        call = self.call
        return {
            "phase": self.phase.value,
            "time": round(self.now, 4),
            "play_time": round(self.play_time, 4),
            "play_number": self.play_number,
            "role": self.role.value,
            "difficulty": self.difficulty,
            "drive": self._drive.to_dict(),
            "play": None if call is None else {
                "id": call.play.id,
                "name": call.play.name,
                "coverage": call.coverage.value,
                "line_of_scrimmage": call.line_of_scrimmage,
                "blitzer_index": call.blitzer_index,
                "user_receiver": call.user_receiver,
            },
            "qb": self._qb.to_dict() if call else None,
            "receivers": [r.to_dict() for r in self.receivers()],
            "defenders": [d.to_dict() for d in self.defenders()],
            "ball": self.ball.to_dict(self.now) if self.ball else None,
            "result": self.result.to_dict() if self.result else None,
        }

    # =========================================================================
    # Scheduled transitions
    # =========================================================================

    def _to_dropback(self) -> None:
        if self.phase == PlayPhase.SNAP:
            self._transition(PlayPhase.DROPBACK, "snap complete")
            self.scheduler.schedule(
                self.config.phases.dropback_duration, self._to_read, name="dropback->read"
            )

    def _to_read(self) -> None:
        if self.phase != PlayPhase.DROPBACK:
            return
        self._transition(PlayPhase.READ, "set in the pocket")
        if self.role == PlayerRole.RECEIVER:
            phases = self.config.phases
            delay = self.rng.uniform(phases.ai_throw_min_delay, phases.ai_throw_max_delay)
            self.scheduler.schedule(delay, self._ai_throw, name="ai throw")

    def _ai_throw(self) -> None:
        if self.phase == PlayPhase.READ and self.call is not None:
            self.throw(target_index=self.call.user_receiver)

    def _sack(self) -> None:
        if not self.fsm.in_pocket:
            return
        self._pocket_timer = None
        self._frozen_at = self.play_time
        self.event_bus.emit_simple(
            EventType.SACK, self.now, self.play_number, self._sack_reason, reason=self._sack_reason
        )
        drive, result = apply_play(self._drive, PlayOutcome.SACK, rules=self.config.rules)
        self._pending = _PendingResult(drive, result)
        self._transition(PlayPhase.RESULT, f"sack: {self._sack_reason}")
        self._enter_result()

    def _release(self) -> None:
        if self.phase != PlayPhase.THROW:
            return
        self.ball.in_flight = True
        self._transition(PlayPhase.BALL_FLIGHT, "ball released")
        self.scheduler.schedule(self.ball.duration, self._ball_arrived, name="ball arrival")

    def _ball_arrived(self) -> None:
        if self.phase != PlayPhase.BALL_FLIGHT:
            return
        timing = self.config.timing.auto_catch_timing
        self.event_bus.emit_simple(
            EventType.CATCH_ATTEMPT,
            self.now,
            self.play_number,
            f"ball arrived, automatic {timing.value} catch",
            timing=timing.value,
            progress=1.0,
            automatic=True,
        )
        self._resolve_catch(timing, 1.0, self.now)

    def _resolve_catch(
        self,
        timing: CatchTiming,
        progress: float,
        at: float,
        interceptor: Optional[int] = None,
    ) -> None:
        ball, call = self.ball, self.call
        assert ball is not None and call is not None and self.snap_time is not None

        play_time = at - self.snap_time
        self._frozen_at = play_time
        ball.in_flight = False
        ball.resolved_progress = progress

        catch_point = ball.target
        positions = [d.position for d in self._defenders_at(play_time)]
        _, distance = nearest_defender(positions, catch_point)
        contested = is_contested(distance, self.config.coverage)

        yards = 0
        if interceptor is not None:
            outcome = PlayOutcome.INTERCEPTION
        elif timing == CatchTiming.MISS:
            outcome = PlayOutcome.INTERCEPTION if contested else PlayOutcome.INCOMPLETE
        else:
            resolution = resolve_pass(
                ball.throw_timing,
                timing,
                catch_point.y - call.line_of_scrimmage,
                distance,
                self.difficulty,
                self.rng,
            )
            outcome, yards = resolution.outcome, resolution.yards
            if outcome == PlayOutcome.COMPLETE and catch_point.y >= 100:
                outcome = PlayOutcome.TOUCHDOWN

        drive, result = apply_play(
            self._drive, outcome, yards, spot=catch_point.y, rules=self.config.rules
        )
        result = _with_timings(result, timing, ball.throw_timing)
        self._pending = _PendingResult(drive, result)

        self._transition(PlayPhase.CATCH, f"{timing.value} -> {result.outcome.value}")
        self.scheduler.schedule(self.config.phases.catch_duration, self._to_result, name="catch->result")

    def _to_result(self) -> None:
        if self.phase == PlayPhase.CATCH:
            self._transition(PlayPhase.RESULT, "play over")
            self._enter_result()

    def _enter_result(self) -> None:
        """Commit the pending outcome to the drive and run the clock."""
        pending, call = self._pending, self.call
        assert pending is not None and call is not None
        self._pending = None

        before = self._drive
        drive = pending.drive
        if not drive.is_final:
            drive = run_clock(drive, self.config.rules.play_runoff, self.config.rules)
        self._drive = drive
        self.result = pending.result

        self.history.append(PlayLog(
            play_number=self.play_number,
            quarter=before.quarter,
            down=before.down,
            distance=before.yards_to_go,
            los=before.yard_line,
            possession=before.possession,
            play_call=call.play.id,
            coverage=call.coverage.value,
            result=pending.result,
        ))
        logger.info("%s", self.history[-1].format())
        self._emit_result_events(before, pending.result)

        big = pending.result.is_touchdown or pending.result.outcome == PlayOutcome.INTERCEPTION
        phases = self.config.phases
        settle = phases.big_play_settle_delay if big else phases.settle_delay
        self.scheduler.schedule(settle, self._next_play, name="settle")

    def _next_play(self) -> None:
        if self.phase != PlayPhase.RESULT:
            return
        if self._drive.is_final:
            self._transition(PlayPhase.GAME_OVER, "final whistle")
            self.event_bus.emit_simple(
                EventType.GAME_OVER,
                self.now,
                self.play_number,
                f"Final: {self._drive.score}",
                score={"home": self._drive.score.home, "away": self._drive.score.away},
            )
            logger.info("Game over, final score %s", self._drive.score)
            return

        self.call = None
        self.snap_time = None
        self.ball = None
        self.result = None
        self._frozen_at = None
        self._intercept_attempts.clear()
        self._transition(PlayPhase.PRE_SNAP, "next play")

    # =========================================================================
    # Helpers
    # =========================================================================

    @property
    def _qb(self) -> Vec2:
        los = self.call.line_of_scrimmage if self.call else self._drive.yard_line
        return qb_position(los)

    def _check_alive(self) -> None:
        if self._disposed:
            raise SessionDisposedError("Session has been disposed")

    def _reject(self, action: str, reason: str, value: Any) -> Any:
        """Report an input that is not valid in the current phase."""
        logger.warning("Rejected %s in %s: %s", action, self.phase.value, reason)
        self.event_bus.emit_simple(
            EventType.INVALID_TRANSITION,
            self.now,
            self.play_number,
            f"{action}: {reason}",
            action=action,
            phase=self.phase.value,
            reason=reason,
        )
        return value

    def _transition(self, target: PlayPhase, reason: str) -> PhaseTransition:
        return self.fsm.transition_to(
            target, reason=reason, tick=self.scheduler.tick_count, time=self.now
        )

    def _on_transition(self, transition: PhaseTransition) -> None:
        self.event_bus.emit_simple(
            EventType.PHASE_CHANGE,
            transition.time,
            self.play_number,
            f"{transition.from_phase.value} -> {transition.to_phase.value} ({transition.reason})",
            from_phase=transition.from_phase.value,
            phase=transition.to_phase.value,
            snapshot=self.snapshot(),
        )

    def _route_progress(self, play_time: float) -> float:
        return route_progress(
            max(0.0, play_time), self.config.phases.route_duration, self._frozen_at
        )

    def _receiver_at(self, index: int, play_time: float) -> Vec2:
        call = self.call
        return receiver_position(
            call.play.route_for(index), self._route_progress(play_time), call.line_of_scrimmage
        )

    def _defenders_at(self, play_time: float) -> List[DefenderState]:
        call = self.call
        assert call is not None
        t = max(0.0, play_time)
        if self._frozen_at is not None:
            t = min(t, self._frozen_at)

        throw = None
        if self.ball is not None and self.snap_time is not None:
            throw = ThrowInfo(time=self.ball.release_time - self.snap_time, target=self.ball.target)

        return [
            defender_state(
                alignment,
                call.assignments[alignment.index],
                t,
                line_of_scrimmage=call.line_of_scrimmage,
                qb=self._qb,
                receiver_at=self._receiver_at,
                params=self.config.coverage,
                throw=throw,
            )
            for alignment in DEFENSIVE_SHELL
        ]

    def _attempt_time(self, at: Optional[float]) -> float:
        if at is None:
            return self.now
        assert self.ball is not None
        if not self.ball.release_time <= at <= self.now:
            raise ValueError(
                f"Attempt time {at} outside flight window [{self.ball.release_time}, {self.now}]"
            )
        return at

    def _best_target(self, progress: float) -> int:
        """Most open receiver: inside his window, else closest to its middle."""
        def distance_to_window(route) -> float:
            start, end = route.perfect_window
            return abs(progress - (start + end) / 2)

        return min(self.call.play.routes, key=distance_to_window).receiver_index

    def _cancel_pocket(self) -> None:
        if self._pocket_timer is not None:
            self._pocket_timer.cancel()
            self._pocket_timer = None

    def _emit_result_events(self, before: DriveState, result: PlayResult) -> None:
        bus, now, n = self.event_bus, self.now, self.play_number
        bus.emit_simple(
            EventType.PLAY_RESULT, now, n, result.description,
            result=result.to_dict(), drive=self._drive.to_dict(),
        )
        if result.is_touchdown:
            bus.emit_simple(EventType.TOUCHDOWN, now, n, result.description, side=before.possession.value)
        if result.is_first_down:
            bus.emit_simple(EventType.FIRST_DOWN, now, n, result.description)
        if result.is_safety:
            bus.emit_simple(EventType.SAFETY, now, n, result.description)
        if result.is_turnover:
            bus.emit_simple(
                EventType.TURNOVER, now, n, result.description,
                possession=self._drive.possession.value,
            )
        if self._drive.quarter != before.quarter or (self._drive.is_final and not before.is_final):
            bus.emit_simple(
                EventType.QUARTER_END, now, n, f"End of quarter {before.quarter}",
                quarter=before.quarter,
            )


def _with_timings(result: PlayResult, catch: CatchTiming, throw: ThrowTiming) -> PlayResult:
    return replace(result, catch_timing=catch, throw_timing=throw)
