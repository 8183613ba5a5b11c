"""Play catalog - the route packages a user can call.

Plays are immutable and loaded once. A malformed play (no routes, bad
waypoint timings, duplicate receivers) is rejected at load time and is
never selectable, so a configuration mistake cannot fail mid-play.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..systems.coverage import CoverageType
from .routes import ReceiverRoute, RouteType, route

logger = logging.getLogger(__name__)


class PlaybookError(ValueError):
    """A play definition is malformed."""
    pass


class UnknownPlayError(KeyError):
    """No selectable play with the requested id."""
    pass


class PlayCategory(str, Enum):
    QUICK = "quick"
    MEDIUM = "medium"
    DEEP = "deep"
    TRICK = "trick"


class RiskLevel(str, Enum):
    """How much the play exposes the ball."""
    SAFE = "safe"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"


@dataclass(frozen=True)
class PlayDefinition:
    """A pass play: which receivers run which routes."""
    id: str
    name: str
    short_name: str
    category: PlayCategory
    risk: RiskLevel
    unlock_week: int
    routes: tuple[ReceiverRoute, ...]
    description: str = ""
    best_against: tuple[CoverageType, ...] = ()

    def validate(self) -> None:
        """Raise ``PlaybookError`` listing every structural problem."""
        issues: list[str] = []
        if not self.id:
            issues.append("missing id")
        if self.unlock_week < 1:
            issues.append(f"unlock week must be >= 1, got {self.unlock_week}")
        if not self.routes:
            issues.append("play has no routes")

        indexes = [r.receiver_index for r in self.routes]
        if len(set(indexes)) != len(indexes):
            issues.append(f"duplicate receiver index in {indexes}")

        for r in self.routes:
            issues.extend(r.problems())

        if issues:
            raise PlaybookError(f"Play {self.id or '<unnamed>'}: " + "; ".join(issues))

    def route_for(self, receiver_index: int) -> ReceiverRoute:
        for r in self.routes:
            if r.receiver_index == receiver_index:
                return r
        raise KeyError(f"{self.id} has no receiver {receiver_index}")

    @property
    def receiver_count(self) -> int:
        return len(self.routes)

    @property
    def receiver_indexes(self) -> frozenset[int]:
        return frozenset(r.receiver_index for r in self.routes)


@dataclass
class Playbook:
    """The selectable plays, plus the ones rejected at load time."""
    plays: Dict[str, PlayDefinition] = field(default_factory=dict)
    rejected: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def load(cls, definitions: Iterable[PlayDefinition]) -> Playbook:
        """Validate definitions, keeping the good ones.

        Invalid plays are logged and recorded in ``rejected`` (id -> reason).
        """
        book = cls()
        for play in definitions:
            try:
                play.validate()
            except PlaybookError as e:
                logger.error("Rejected play %s: %s", play.id, e)
                book.rejected[play.id] = str(e)
                continue
            if play.id in book.plays:
                reason = f"duplicate play id {play.id}"
                logger.error("Rejected play %s: %s", play.id, reason)
                book.rejected[play.id] = reason
                continue
            book.plays[play.id] = play

        logger.debug("Loaded %d plays (%d rejected)", len(book.plays), len(book.rejected))
        return book

    def get(self, play_id: str) -> PlayDefinition:
        play = self.plays.get(play_id)
        if play is None:
            if play_id in self.rejected:
                raise UnknownPlayError(f"Play {play_id} was rejected: {self.rejected[play_id]}")
            raise UnknownPlayError(f"Unknown play: {play_id}")
        return play

    def available(self, week: int) -> List[PlayDefinition]:
        """Plays unlocked by ``week``, in catalog order."""
        return [p for p in self.plays.values() if p.unlock_week <= week]

    def by_category(self, category: PlayCategory) -> List[PlayDefinition]:
        return [p for p in self.plays.values() if p.category == category]

    def __contains__(self, play_id: str) -> bool:
        return play_id in self.plays

    def __len__(self) -> int:
        return len(self.plays)


# =============================================================================
# Catalog
# =============================================================================
# Waypoints are (x, depth, timing): x in yards from the middle of the field,
# depth in yards past the line of scrimmage.

PLAY_DEFINITIONS: List[PlayDefinition] = [
    # === QUICK (week 1) ===
    PlayDefinition(
        id="slant-flood",
        name="Slant Flood",
        short_name="SLANT",
        category=PlayCategory.QUICK,
        risk=RiskLevel.SAFE,
        unlock_week=1,
        description="Quick slants with a flat route underneath",
        best_against=(CoverageType.MAN, CoverageType.BLITZ),
        routes=(
            route(0, RouteType.SLANT, [(-12.5, 0, 0), (-5, 12, 0.5), (2.5, 25, 1)], (0.4, 0.6), 8),
            route(1, RouteType.FLAT, [(2.5, 0, 0), (10, 3, 0.4), (17.5, 5, 1)], (0.3, 0.5), 5),
            route(2, RouteType.SLANT, [(12.5, 0, 0), (5, 12, 0.5), (-2.5, 25, 1)], (0.45, 0.65), 10),
        ),
    ),
    PlayDefinition(
        id="quick-out",
        name="Quick Outs",
        short_name="OUTS",
        category=PlayCategory.QUICK,
        risk=RiskLevel.SAFE,
        unlock_week=1,
        description="Quick out routes to the sidelines",
        best_against=(CoverageType.COVER3, CoverageType.ZONE),
        routes=(
            route(0, RouteType.OUT, [(-10, 0, 0), (-10, 8, 0.4), (-20, 8, 1)], (0.35, 0.55), 6),
            route(1, RouteType.DRAG, [(0, 0, 0), (-7.5, 5, 0.5), (-15, 5, 1)], (0.4, 0.6), 5),
            route(2, RouteType.OUT, [(10, 0, 0), (10, 8, 0.4), (20, 8, 1)], (0.35, 0.55), 6),
        ),
    ),
    PlayDefinition(
        id="mesh",
        name="Mesh Concept",
        short_name="MESH",
        category=PlayCategory.QUICK,
        risk=RiskLevel.SAFE,
        unlock_week=1,
        description="Crossing routes that mesh in the middle",
        best_against=(CoverageType.MAN,),
        routes=(
            route(0, RouteType.DRAG, [(-12.5, 0, 0), (-7.5, 6, 0.3), (7.5, 6, 0.7), (15, 8, 1)], (0.5, 0.7), 7),
            route(1, RouteType.GO, [(0, 0, 0), (0, 20, 0.5), (0, 40, 1)], (0.6, 0.8), 15),
            route(2, RouteType.DRAG, [(12.5, 0, 0), (7.5, 6, 0.3), (-7.5, 6, 0.7), (-15, 8, 1)], (0.5, 0.7), 7),
        ),
    ),
    # === MEDIUM (week 2) ===
    PlayDefinition(
        id="curl-flat",
        name="Curl Flat",
        short_name="CURL",
        category=PlayCategory.MEDIUM,
        risk=RiskLevel.BALANCED,
        unlock_week=2,
        description="Curl routes with flat option",
        best_against=(CoverageType.COVER3,),
        routes=(
            route(0, RouteType.CURL, [(-12.5, 0, 0), (-12.5, 15, 0.6), (-10, 12, 1)], (0.55, 0.75), 12),
            route(1, RouteType.FLAT, [(0, 0, 0), (-10, 3, 0.5), (-17.5, 3, 1)], (0.35, 0.55), 4),
            route(2, RouteType.CORNER, [(12.5, 0, 0), (12.5, 12, 0.4), (20, 25, 1)], (0.5, 0.7), 18),
        ),
    ),
    PlayDefinition(
        id="smash",
        name="Smash Concept",
        short_name="SMASH",
        category=PlayCategory.MEDIUM,
        risk=RiskLevel.BALANCED,
        unlock_week=2,
        description="High-low concept with hitch and corner",
        best_against=(CoverageType.COVER2,),
        routes=(
            route(0, RouteType.HITCH, [(-12.5, 0, 0), (-12.5, 6, 0.5), (-14, 5, 1)], (0.4, 0.6), 5),
            route(1, RouteType.CORNER, [(-5, 0, 0), (-5, 12, 0.4), (-15, 25, 1)], (0.55, 0.75), 20),
            route(2, RouteType.HITCH, [(12.5, 0, 0), (12.5, 6, 0.5), (14, 5, 1)], (0.4, 0.6), 5),
        ),
    ),
    # === DEEP (week 3) ===
    PlayDefinition(
        id="five-verts",
        name="Five Verticals",
        short_name="VERTS",
        category=PlayCategory.DEEP,
        risk=RiskLevel.AGGRESSIVE,
        unlock_week=3,
        description="All 5 receivers run go routes - max vertical threat",
        best_against=(CoverageType.COVER3, CoverageType.ZONE),
        routes=(
            route(0, RouteType.GO, [(-19, 0, 0), (-19, 30, 0.5), (-19, 60, 1)], (0.6, 0.8), 35),
            route(1, RouteType.GO, [(-9, 0, 0), (-9, 30, 0.5), (-9, 60, 1)], (0.6, 0.8), 28),
            route(2, RouteType.GO, [(0, 0, 0), (0, 30, 0.5), (0, 60, 1)], (0.55, 0.75), 25),
            route(3, RouteType.GO, [(9, 0, 0), (9, 30, 0.5), (9, 60, 1)], (0.6, 0.8), 28),
            route(4, RouteType.GO, [(19, 0, 0), (19, 30, 0.5), (19, 60, 1)], (0.6, 0.8), 35),
        ),
    ),
    PlayDefinition(
        id="post-corner",
        name="Post Corner",
        short_name="POST",
        category=PlayCategory.DEEP,
        risk=RiskLevel.AGGRESSIVE,
        unlock_week=3,
        description="Post route with corner combo",
        best_against=(CoverageType.COVER2,),
        routes=(
            route(0, RouteType.POST, [(-12.5, 0, 0), (-12.5, 15, 0.4), (-2.5, 35, 1)], (0.55, 0.75), 25),
            route(1, RouteType.FLAT, [(0, 0, 0), (-7.5, 3, 0.5), (-12.5, 3, 1)], (0.35, 0.55), 4),
            route(2, RouteType.CORNER, [(12.5, 0, 0), (12.5, 15, 0.4), (22.5, 30, 1)], (0.5, 0.7), 22),
        ),
    ),
    # === TRICK (week 5) ===
    PlayDefinition(
        id="wheel",
        name="Wheel Route",
        short_name="WHEEL",
        category=PlayCategory.TRICK,
        risk=RiskLevel.AGGRESSIVE,
        unlock_week=5,
        description="RB wheel route for big play",
        best_against=(CoverageType.MAN,),
        routes=(
            route(0, RouteType.CURL, [(-12.5, 0, 0), (-12.5, 12, 0.5), (-10, 10, 1)], (0.45, 0.65), 10),
            route(
                1,
                RouteType.WHEEL,
                [(2.5, -5, 0), (-5, 0, 0.2), (-12.5, 8, 0.4), (-17.5, 30, 0.7), (-20, 50, 1)],
                (0.6, 0.8),
                35,
            ),
            route(2, RouteType.GO, [(12.5, 0, 0), (12.5, 25, 0.5), (12.5, 50, 1)], (0.65, 0.85), 28),
        ),
    ),
    PlayDefinition(
        id="texas",
        name="Texas Route",
        short_name="TEXAS",
        category=PlayCategory.TRICK,
        risk=RiskLevel.BALANCED,
        unlock_week=5,
        description="RB angle route with crossers",
        best_against=(CoverageType.MAN, CoverageType.BLITZ),
        routes=(
            route(0, RouteType.IN, [(-12.5, 0, 0), (-12.5, 12, 0.4), (5, 12, 1)], (0.5, 0.7), 12),
            route(
                1,
                RouteType.FLAT,
                [(2.5, -5, 0), (10, 3, 0.3), (17.5, 15, 0.7), (20, 25, 1)],
                (0.55, 0.75),
                18,
            ),
            route(2, RouteType.GO, [(15, 0, 0), (15, 25, 0.5), (15, 50, 1)], (0.65, 0.85), 30),
        ),
    ),
]


_default_playbook: Optional[Playbook] = None


def default_playbook() -> Playbook:
    """The built-in catalog, validated once."""
    global _default_playbook
    if _default_playbook is None:
        _default_playbook = Playbook.load(PLAY_DEFINITIONS)
    return _default_playbook
