"""Event system for play simulation output.

The session emits events on every phase change and at play resolution.
Presentation, audio and scoreboard collaborators subscribe to them; the
core never calls into those layers directly.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Types of events that can occur during a play."""

    # =========================================================================
    # Play Lifecycle
    # =========================================================================
    PHASE_CHANGE = "phase_change"
    PLAY_SELECTED = "play_selected"
    SNAP = "snap"
    THROW = "throw"
    CATCH_ATTEMPT = "catch_attempt"
    INTERCEPTION_ATTEMPT = "interception_attempt"
    SACK = "sack"
    PLAY_RESULT = "play_result"

    # =========================================================================
    # Drive / Game
    # =========================================================================
    FIRST_DOWN = "first_down"
    TOUCHDOWN = "touchdown"
    SAFETY = "safety"
    TURNOVER = "turnover"
    QUARTER_END = "quarter_end"
    GAME_OVER = "game_over"

    # =========================================================================
    # System
    # =========================================================================
    INVALID_TRANSITION = "invalid_transition"
    SESSION_DISPOSED = "session_disposed"


@dataclass
class Event:
    """An event that occurred during simulation.

    Attributes:
        type: The type of event
        time: Simulation time in seconds when the event occurred
        play_number: Which play of the session produced it
        data: Event-specific payload (phase snapshots, results)
        description: Human-readable description
    """
    type: EventType
    time: float
    play_number: int = 0
    data: dict[str, Any] = field(default_factory=dict)
    description: str = ""

    def __str__(self) -> str:
        parts = [f"[{self.time:.2f}s]", f"#{self.play_number}", self.type.value]
        if self.description:
            parts.append(f"- {self.description}")
        return " ".join(parts)


EventHandler = Callable[[Event], None]


class EventBus:
    """Pub/sub event bus for simulation events.

    Usage:
        bus = EventBus()
        bus.subscribe(EventType.PLAY_RESULT, scoreboard.on_result)
        bus.subscribe_all(audio.on_event)
    """

    def __init__(self, history_limit: Optional[int] = 500) -> None:
        self._handlers: dict[EventType, list[EventHandler]] = defaultdict(list)
        self._global_handlers: list[EventHandler] = []
        self._history: list[Event] = []
        self._history_limit = history_limit

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe to a specific event type."""
        self._handlers[event_type].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to all events."""
        self._global_handlers.append(handler)

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Unsubscribe from a specific event type."""
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)

    def clear_subscribers(self) -> None:
        self._handlers.clear()
        self._global_handlers.clear()

    def emit(self, event: Event) -> None:
        """Emit an event to all subscribers."""
        self._history.append(event)
        if self._history_limit is not None and len(self._history) > self._history_limit:
            del self._history[: len(self._history) - self._history_limit]

        logger.debug("%s", event)

        for handler in list(self._handlers[event.type]):
            handler(event)
        for handler in list(self._global_handlers):
            handler(event)

    def emit_simple(
        self,
        event_type: EventType,
        time: float,
        play_number: int = 0,
        description: str = "",
        **data: Any,
    ) -> Event:
        """Convenience method to emit an event with less boilerplate."""
        event = Event(
            type=event_type,
            time=time,
            play_number=play_number,
            description=description,
            data=data,
        )
        self.emit(event)
        return event

    @property
    def history(self) -> list[Event]:
        """Recorded events (most recent last)."""
        return self._history

    def get_events_by_type(self, event_type: EventType) -> list[Event]:
        """Get all events of a specific type from history."""
        return [e for e in self._history if e.type == event_type]

    def format_history(self, last_n: Optional[int] = None) -> str:
        """Format event history as readable text."""
        events = self._history[-last_n:] if last_n else self._history
        return "\n".join(str(e) for e in events)

    def __len__(self) -> int:
        return len(self._history)

    def __bool__(self) -> bool:
        """EventBus is always truthy (even with empty history)."""
        return True
