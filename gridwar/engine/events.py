"""
Game events for collaborator hooks and logging.
Events describe what happened while a command was processed.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Every notification the engine publishes."""

    GAME_STARTED = "gameStarted"
    GAME_ENDED = "gameEnded"
    PHASE_CHANGED = "phaseChanged"
    TURN_STARTED = "turnStarted"
    TURN_ENDED = "turnEnded"
    UNIT_CREATED = "unitCreated"
    UNIT_MOVED = "unitMoved"
    UNIT_ATTACKED = "unitAttacked"
    UNIT_REMOVED = "unitRemoved"
    BASE_DESTROYED = "baseDestroyed"
    RESOURCES_GATHERED = "resourcesGathered"
    RESOURCES_REGENERATED = "resourcesRegenerated"
    INCOME_COLLECTED = "incomeCollected"
    VICTORY_CHECK = "victoryCheck"
    PLAYER_SURRENDERED = "playerSurrendered"
    DRAW_DECLARED = "drawDeclared"
    STALEMATE_DETECTED = "stalemateDetected"
    COMMAND_UNDONE = "commandUndone"
    COMMAND_REDONE = "commandRedone"


@dataclass
class GameEvent:
    """Base event class. All events have a kind and payload."""

    kind: EventKind
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind.value, "payload": self.payload}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameEvent":
        return cls(kind=EventKind(data["type"]), payload=data["payload"])


Handler = Callable[[GameEvent], None]


class EventBus:
    """Synchronous publish/subscribe channel.

    Handlers run in subscription order, inside the command that produced
    the event. Each dispatch iterates over a copy of the handler list, so
    subscribing or unsubscribing from a handler affects the next event only.
    """

    def __init__(self):
        self._subscribers: Dict[EventKind, List[Handler]] = {}
        self._wildcard: List[Handler] = []
        self._depth = 0
        self._history: Optional[List[GameEvent]] = None

    @property
    def dispatching(self) -> bool:
        """True while a handler is running."""
        return self._depth > 0

    def subscribe(self, kind: EventKind, handler: Handler) -> None:
        """Register a handler for one event kind."""
        if not callable(handler):
            raise TypeError("Event handler must be callable")
        self._subscribers.setdefault(EventKind(kind), []).append(handler)

    def subscribe_all(self, handler: Handler) -> None:
        """Register a handler that receives every event."""
        if not callable(handler):
            raise TypeError("Event handler must be callable")
        self._wildcard.append(handler)

    def unsubscribe(self, kind: EventKind, handler: Handler) -> bool:
        """Remove a handler. Returns False if it was not registered."""
        handlers = self._subscribers.get(EventKind(kind), [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def unsubscribe_all(self, handler: Handler) -> bool:
        if handler in self._wildcard:
            self._wildcard.remove(handler)
            return True
        return False

    def emit(self, kind: EventKind, **payload: Any) -> GameEvent:
        """Build an event and publish it."""
        event = GameEvent(kind, payload)
        self.publish(event)
        return event

    def publish(self, event: GameEvent) -> None:
        """Notify all handlers subscribed to this event's kind."""
        logger.debug(f"Event {event.kind.value}: {event.payload}")
        if self._history is not None:
            self._history.append(event)

        handlers = list(self._subscribers.get(event.kind, [])) + list(self._wildcard)
        self._depth += 1
        try:
            for handler in handlers:
                handler(event)
        finally:
            self._depth -= 1

    def start_recording(self) -> None:
        """Start recording events for replay/debugging."""
        self._history = []

    def stop_recording(self) -> List[GameEvent]:
        """Stop recording and return event history."""
        history = self._history or []
        self._history = None
        return history

    def clear(self) -> None:
        """Clear all subscribers."""
        self._subscribers.clear()
        self._wildcard.clear()
