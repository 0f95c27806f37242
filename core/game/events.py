"""Events published by the round engine."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable


class EventType(Enum):
    """What happened during a round."""

    ROUND_STARTED = "round_started"
    ROUND_ENDED = "round_ended"

    CARD_DEALT = "card_dealt"
    SHOE_SHUFFLED = "shoe_shuffled"

    PLAYER_HIT = "player_hit"
    PLAYER_STAND = "player_stand"
    PLAYER_DOUBLE = "player_double"
    PLAYER_SPLIT = "player_split"
    PLAYER_BLACKJACK = "player_blackjack"
    PLAYER_BUSTS = "player_busts"

    DEALER_REVEALS = "dealer_reveals"
    DEALER_HITS = "dealer_hits"
    DEALER_STANDS = "dealer_stands"
    DEALER_BUSTS = "dealer_busts"
    DEALER_BLACKJACK = "dealer_blackjack"

    # An action was refused; the round is unchanged
    INVALID_ACTION = "invalid_action"


@dataclass(frozen=True)
class RoundEvent:
    """
    A single thing that happened in a round.

    Lets the presentation layer follow a round card by card without
    reaching into the shoe or the hands. Face-down cards are reported
    as "??".
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.value} {self.data}"


EventHandler = Callable[[RoundEvent], None]


class EventEmitter:
    """
    Synchronous publish/subscribe for round events.

    Handlers registered for a specific type run before catch-all handlers
    (registered with ``None``). The most recent events are also kept for
    callers that poll instead of subscribing.
    """

    def __init__(self, history_limit: int = 500) -> None:
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._history: deque[RoundEvent] = deque(maxlen=history_limit)

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: RoundEvent) -> None:
        self._history.append(event)
        for handler in self._handlers.get(event.event_type, []):
            handler(event)
        for handler in self._handlers.get(None, []):
            handler(event)

    def emit_new(self, event_type: EventType, **data: Any) -> RoundEvent:
        """Build an event from keyword data and emit it."""
        event = RoundEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    def events_of(self, event_type: EventType) -> list[RoundEvent]:
        """Recorded events of one type, oldest first."""
        return [e for e in self._history if e.event_type == event_type]

    @property
    def history(self) -> list[RoundEvent]:
        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()
