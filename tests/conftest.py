"""Shared pytest fixtures for PocketQB tests."""

import random

import pytest

from pocketqb.config import GameConfig, set_config
from pocketqb.game.drive import DriveState, Side
from pocketqb.game.session import PlayerRole, PlaySession
from pocketqb.simulation.core.events import EventBus
from pocketqb.simulation.plays.playbook import default_playbook


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture(autouse=True)
def reset_config():
    """Make every test see the default configuration."""
    set_config(GameConfig())
    yield
    set_config(None)


@pytest.fixture
def config() -> GameConfig:
    return GameConfig()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


class FixedRolls(random.Random):
    """Random source whose uniform rolls are all the same value.

    0.99 always draws plain zone and never drops or picks off a pass;
    0.2 draws man coverage at week 1; 0.0 always draws a blitz.
    """

    def __init__(self, roll: float):
        super().__init__(0)
        self.roll = roll

    def random(self) -> float:
        return self.roll


@pytest.fixture
def calm_rng() -> random.Random:
    return FixedRolls(0.99)


@pytest.fixture
def man_rng() -> random.Random:
    return FixedRolls(0.2)


@pytest.fixture
def blitz_rng() -> random.Random:
    return FixedRolls(0.0)


# =============================================================================
# Drive Fixtures
# =============================================================================


@pytest.fixture
def opening_drive(config) -> DriveState:
    """1st & 10 at the home 20, full quarter on the clock."""
    return DriveState.kickoff(config.rules, Side.HOME)


@pytest.fixture
def make_drive(config):
    """Factory for drive states at an arbitrary spot."""
    def _make(down=1, yards_to_go=10, yard_line=20, **kwargs) -> DriveState:
        defaults = dict(
            quarter=1,
            time_remaining=config.rules.quarter_duration,
            possession=Side.HOME,
        )
        defaults.update(kwargs)
        return DriveState(down=down, yards_to_go=yards_to_go, yard_line=yard_line, **defaults)
    return _make


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def playbook():
    return default_playbook()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def session(event_bus, calm_rng):
    """Week 1 quarterback session facing plain zone, no drops."""
    s = PlaySession(week=1, rng=calm_rng, event_bus=event_bus)
    yield s
    s.dispose()


@pytest.fixture
def receiver_session(event_bus, calm_rng):
    """Receiver-mode session; the AI throws."""
    s = PlaySession(week=1, role=PlayerRole.RECEIVER, rng=calm_rng, event_bus=event_bus)
    yield s
    s.dispose()


def advance_to(session: PlaySession, phase, limit: float = 30.0, step: float = 1 / 60) -> None:
    """Tick a session in small steps until it reaches ``phase``."""
    deadline = session.now + limit
    while session.phase != phase:
        assert session.now < deadline, f"never reached {phase.value}, stuck in {session.phase.value}"
        session.tick(step)


@pytest.fixture
def advance():
    """Helper that ticks a session until it reaches a phase."""
    return advance_to
