"""Headless player policies.

Drives a ``PlaySession`` without a human: calls a play, snaps, throws
near the middle of the throw window and attempts the catch near the
perfect band, each with a little random error. Used by the CLI demo and
by long-running tests.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from pocketqb.game.drive import PlayLog, PlayResult
from pocketqb.game.session import PlayerRole, PlaySession
from pocketqb.simulation.core.phases import PlayPhase

logger = logging.getLogger(__name__)

# Longest a single down can take before something is considered stuck
MAX_DOWN_SECONDS = 30.0
FRAME = 1 / 30


@dataclass
class Autopilot:
    """AI quarterback and receiver.

    Attributes:
        rng: Random source for play calls and timing error
        throw_window: Route progress range the AI releases in
        catch_window: Flight progress range the AI attempts the catch in
    """
    rng: random.Random
    throw_window: tuple[float, float] = (0.42, 0.70)
    catch_window: tuple[float, float] = (0.60, 0.88)

    def call_play(self, session: PlaySession) -> str:
        plays = session.playbook.available(session.week)
        return self.rng.choice(plays).id

    def play_down(self, session: PlaySession) -> Optional[PlayResult]:
        """Run one down from PRE_SNAP until the next PRE_SNAP or GAME_OVER."""
        assert session.phase == PlayPhase.PRE_SNAP, f"not ready for a snap: {session.phase.value}"
        plays_before = len(session.history)

        session.select_play(self.call_play(session))
        session.snap()
        deadline = session.now + MAX_DOWN_SECONDS

        self._tick_while(session, {PlayPhase.SNAP, PlayPhase.DROPBACK}, deadline)

        if session.phase == PlayPhase.READ and session.role == PlayerRole.QUARTERBACK:
            release_at = self.rng.uniform(*self.throw_window) * session.config.phases.route_duration
            session.tick(max(0.0, release_at - session.play_time))
            if session.phase == PlayPhase.READ:
                session.throw()

        # In receiver mode the AI quarterback's throw is already scheduled
        self._tick_while(session, {PlayPhase.READ, PlayPhase.THROW}, deadline)

        if session.phase == PlayPhase.BALL_FLIGHT:
            ball = session.ball
            attempt_at = ball.release_time + self.rng.uniform(*self.catch_window) * ball.duration
            session.tick(max(0.0, attempt_at - session.now))
            if session.phase == PlayPhase.BALL_FLIGHT:
                session.attempt_catch()

        self._tick_while(
            session, {PlayPhase.BALL_FLIGHT, PlayPhase.CATCH, PlayPhase.RESULT}, deadline
        )

        if len(session.history) == plays_before:
            return None
        return session.history[-1].result

    def play_game(self, session: PlaySession, max_plays: int = 250) -> List[PlayLog]:
        """Play downs until the game is over (or ``max_plays``)."""
        for _ in range(max_plays):
            if session.phase == PlayPhase.GAME_OVER:
                break
            self.play_down(session)
        else:
            logger.warning("Stopped after %d plays without a final whistle", max_plays)
        return list(session.history)

    @staticmethod
    def _tick_while(session: PlaySession, phases: set[PlayPhase], deadline: float) -> None:
        while session.phase in phases:
            if session.now >= deadline:
                raise RuntimeError(f"Down stuck in {session.phase.value}")
            session.tick(FRAME)
