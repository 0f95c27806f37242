"""Round engine and state management."""

from core.game.events import RoundEvent, EventType
from core.game.state import GamePhase, TrainerMode
from core.game.outcome import (
    ActionOutcome,
    Continuing,
    HandComplete,
    Outcome,
    Rejected,
    RoundResult,
    SplitOccurred,
    calculate_payout,
    settle,
)
from core.game.engine import ActionCheck, RoundEngine, RoundSnapshot

__all__ = [
    "RoundEvent",
    "EventType",
    "GamePhase",
    "TrainerMode",
    "ActionOutcome",
    "Continuing",
    "HandComplete",
    "Outcome",
    "Rejected",
    "RoundResult",
    "SplitOccurred",
    "calculate_payout",
    "settle",
    "ActionCheck",
    "RoundEngine",
    "RoundSnapshot",
]
