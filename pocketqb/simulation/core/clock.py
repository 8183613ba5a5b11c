"""Simulation clock and timer scheduling.

One ``Scheduler`` per play session is the single source of time. The host
advances it by whatever delta its render loop produces; every delayed
phase transition (pocket countdown, settle delay, ball arrival) is a timer
on this scheduler rather than a blocking wait or a host-side callback.

Simulation time therefore never depends on rendering cadence: ticking
once by 1.0s or twenty times by 0.05s fires the same timers in the same
order.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


class SchedulerClosed(RuntimeError):
    """Raised when scheduling on a scheduler that has been closed."""
    pass


@dataclass(eq=False)
class TimerHandle:
    """A scheduled callback. Cancel it with ``cancel()``."""
    name: str
    due: float
    callback: Callable[[], None] = field(repr=False)
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def is_pending(self) -> bool:
        return not (self.cancelled or self.fired)


class Scheduler:
    """Simulation clock plus an ordered queue of future callbacks.

    Usage:
        sched = Scheduler()
        sched.schedule(0.2, lambda: fsm.transition_to(...), name="snap->dropback")
        sched.advance(0.05)   # called by the host every frame
    """

    def __init__(self, start_time: float = 0.0):
        self._now = start_time
        self._tick_count = 0
        self._queue: list[tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()
        self._closed = False

    # =========================================================================
    # Time
    # =========================================================================

    @property
    def now(self) -> float:
        """Current simulation time in seconds."""
        return self._now

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def closed(self) -> bool:
        return self._closed

    def advance(self, dt: float) -> int:
        """Advance time by ``dt`` seconds, firing every timer that comes due.

        Timers fire in due-time order (ties in scheduling order) with
        ``now`` set to their due time, so a callback observes the exact
        instant it was scheduled for. Timers scheduled by a callback are
        fired in the same call if they fall inside the window.

        Returns:
            Number of timers fired
        """
        assert dt >= 0, f"negative time step: {dt}"
        if self._closed:
            return 0

        target = self._now + dt
        fired = 0
        while self._queue and self._queue[0][0] <= target and not self._closed:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, due)
            handle.fired = True
            fired += 1
            logger.debug("timer %s fired at %.3fs", handle.name, self._now)
            handle.callback()

        if not self._closed:
            self._now = target
        self._tick_count += 1
        return fired

    # =========================================================================
    # Timers
    # =========================================================================

    def schedule(self, delay: float, callback: Callable[[], None], name: str = "") -> TimerHandle:
        """Run ``callback`` ``delay`` seconds from now."""
        if self._closed:
            raise SchedulerClosed(f"Cannot schedule {name!r}: scheduler is closed")
        assert delay >= 0, f"negative delay for {name}: {delay}"

        handle = TimerHandle(name=name, due=self._now + delay, callback=callback)
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle))
        return handle

    def cancel_all(self) -> int:
        """Cancel every pending timer. Returns how many were pending."""
        pending = 0
        for _, _, handle in self._queue:
            if handle.is_pending:
                handle.cancel()
                pending += 1
        self._queue.clear()
        return pending

    def close(self) -> int:
        """Cancel everything and refuse further scheduling."""
        cancelled = self.cancel_all()
        self._closed = True
        return cancelled

    @property
    def pending(self) -> list[TimerHandle]:
        """Pending timers in firing order."""
        return [h for _, _, h in sorted(self._queue, key=lambda e: (e[0], e[1])) if h.is_pending]

    def __repr__(self) -> str:
        return f"Scheduler(time={self._now:.3f}s, pending={len(self.pending)})"
