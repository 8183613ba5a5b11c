"""Phase State Machine - Explicit play phase transitions.

Manages the lifecycle of one down with validated transitions.
All phase changes go through this state machine so that a transition
that is not in the table can never be applied silently.

Play Lifecycle:
    PRE_SNAP → SNAP → DROPBACK → READ → THROW → BALL_FLIGHT → CATCH → RESULT

    From SNAP / DROPBACK / READ:
        → RESULT (sack: pocket collapsed or blitzer arrived)

    From RESULT:
        → PRE_SNAP (next play)
        → GAME_OVER (terminal)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Set


class PlayPhase(str, Enum):
    """Current phase of play execution."""
    PRE_SNAP = "pre_snap"        # Play selection, coverage drawn
    SNAP = "snap"                # Ball snapped, routes start
    DROPBACK = "dropback"        # QB setting up in the pocket
    READ = "read"                # Throw window open, pocket clock running
    THROW = "throw"              # Wind-up, target locked
    BALL_FLIGHT = "ball_flight"  # Ball in the air, attempts accepted
    CATCH = "catch"              # Attempt resolved, animating
    RESULT = "result"            # Outcome committed to the drive
    GAME_OVER = "game_over"      # Terminal


# Valid phase transitions
VALID_TRANSITIONS: Dict[PlayPhase, Set[PlayPhase]] = {
    PlayPhase.PRE_SNAP: {PlayPhase.SNAP},
    PlayPhase.SNAP: {
        PlayPhase.DROPBACK,
        PlayPhase.RESULT,       # Sack
    },
    PlayPhase.DROPBACK: {
        PlayPhase.READ,
        PlayPhase.RESULT,       # Sack
    },
    PlayPhase.READ: {
        PlayPhase.THROW,
        PlayPhase.RESULT,       # Sack
    },
    PlayPhase.THROW: {PlayPhase.BALL_FLIGHT},
    PlayPhase.BALL_FLIGHT: {PlayPhase.CATCH},
    PlayPhase.CATCH: {PlayPhase.RESULT},
    PlayPhase.RESULT: {
        PlayPhase.PRE_SNAP,     # Next play
        PlayPhase.GAME_OVER,
    },
    PlayPhase.GAME_OVER: set(),
}

# Phases during which receivers and defenders move
ACTIVE_PHASES: frozenset[PlayPhase] = frozenset({
    PlayPhase.SNAP,
    PlayPhase.DROPBACK,
    PlayPhase.READ,
    PlayPhase.THROW,
    PlayPhase.BALL_FLIGHT,
})


@dataclass
class PhaseTransition:
    """Record of a phase transition."""
    from_phase: PlayPhase
    to_phase: PlayPhase
    reason: str
    tick: int
    time: float


TransitionCallback = Callable[[PhaseTransition], None]


class PhaseStateMachine:
    """Manages play phase transitions with validation.

    Usage:
        fsm = PhaseStateMachine()
        fsm.transition_to(PlayPhase.SNAP, reason="user snap", time=0.0)

        if fsm.can_transition_to(PlayPhase.DROPBACK):
            fsm.transition_to(PlayPhase.DROPBACK, reason="snap complete", time=0.2)
    """

    def __init__(self, initial_phase: PlayPhase = PlayPhase.PRE_SNAP):
        self._phase = initial_phase
        self._history: list[PhaseTransition] = []
        self._callbacks: list[TransitionCallback] = []

    @property
    def phase(self) -> PlayPhase:
        """Current phase."""
        return self._phase

    @property
    def history(self) -> list[PhaseTransition]:
        """History of phase transitions."""
        return self._history.copy()

    def can_transition_to(self, target: PlayPhase) -> bool:
        """Check if transition to target phase is valid."""
        return target in VALID_TRANSITIONS.get(self._phase, set())

    def transition_to(
        self,
        target: PlayPhase,
        reason: str = "",
        tick: int = 0,
        time: float = 0.0,
    ) -> PhaseTransition:
        """Transition to a new phase.

        Raises:
            InvalidPhaseTransition: If the transition is not in the table
        """
        if not self.can_transition_to(target):
            raise InvalidPhaseTransition(
                self._phase,
                target,
                f"Cannot transition from {self._phase.value} to {target.value}. "
                f"Valid targets: {sorted(p.value for p in VALID_TRANSITIONS.get(self._phase, set()))}",
            )

        transition = PhaseTransition(
            from_phase=self._phase,
            to_phase=target,
            reason=reason,
            tick=tick,
            time=time,
        )

        self._phase = target
        self._history.append(transition)

        for callback in self._callbacks:
            callback(transition)
        return transition

    def on_transition(self, callback: TransitionCallback) -> None:
        """Register a callback for phase transitions."""
        self._callbacks.append(callback)

    def clear_callbacks(self) -> None:
        self._callbacks.clear()

    # Convenience queries

    @property
    def is_pre_snap(self) -> bool:
        return self._phase == PlayPhase.PRE_SNAP

    @property
    def is_active(self) -> bool:
        """True while players are moving on the field."""
        return self._phase in ACTIVE_PHASES

    @property
    def in_pocket(self) -> bool:
        """True while a sack can still happen."""
        return self._phase in (PlayPhase.SNAP, PlayPhase.DROPBACK, PlayPhase.READ)

    @property
    def ball_in_air(self) -> bool:
        return self._phase == PlayPhase.BALL_FLIGHT

    @property
    def is_terminal(self) -> bool:
        return self._phase == PlayPhase.GAME_OVER


class InvalidPhaseTransition(Exception):
    """Raised when an invalid phase transition is attempted."""

    def __init__(self, from_phase: PlayPhase, to_phase: PlayPhase, message: str = ""):
        self.from_phase = from_phase
        self.to_phase = to_phase
        super().__init__(message or f"{from_phase.value} -> {to_phase.value}")
