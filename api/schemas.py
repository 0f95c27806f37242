"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


# Game schemas
class DealRequest(BaseModel):
    """Request to deal a hand."""

    amount: int | None = Field(default=None, ge=1, description="Bet amount; keeps the last bet if omitted")


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal["hit", "stand", "double", "split"]


class ModeRequest(BaseModel):
    """Request to switch between learning and test mode."""

    mode: Literal["learning", "test"]


class CardResponse(BaseModel):
    """Card representation. Face-down cards hide rank, suit and value."""

    model_config = ConfigDict(from_attributes=True)

    rank: str | None
    suit: str | None
    value: int | None
    face_up: bool


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    total: int
    is_soft: bool
    is_pair: bool
    is_blackjack: bool
    is_busted: bool


class OptimalPlayResponse(BaseModel):
    """Basic strategy recommendation."""

    action: str
    short_action: str
    hand_type: str
    explanation: str
    chart: Literal["hard", "soft", "pairs"]


class RoundResultResponse(BaseModel):
    """Round result."""

    outcome: Literal["win", "lose", "push", "blackjack"]
    message: str


class GameStateResponse(BaseModel):
    """Current round state. In test mode the pending optimal play is withheld."""

    phase: str
    mode: Literal["learning", "test"]
    player_hand: HandResponse
    dealer_hand: HandResponse
    parked_hand: list[CardResponse]
    dealer_upcard: int | None
    awaiting_decision: bool
    optimal_play: OptimalPlayResponse | None
    can_double: bool
    can_split: bool
    bet: int
    next_bet: int
    doubled: bool
    last_payout: float
    result: RoundResultResponse | None
    bankroll: float


class ActionCheckResponse(BaseModel):
    """Grading of the player's decision."""

    correct: bool
    player_action: str
    optimal_action: str | None = None
    explanation: str | None = None
    situation: str | None = None
    chart: Literal["hard", "soft", "pairs"] | None = None


class ActionResponse(BaseModel):
    """What an action did, with the resulting state."""

    kind: Literal["continuing", "split", "complete"]
    check: ActionCheckResponse | None = None
    payout: float | None = None
    state: GameStateResponse


# Strategy schemas
class ChartResponse(BaseModel):
    """A strategy chart for display."""

    chart: Literal["hard", "soft", "pairs"]
    headers: list[str]
    rows: list[tuple[str, list[str]]]


class LookupRequest(BaseModel):
    """Look up the play for arbitrary cards."""

    cards: list[str] = Field(..., min_length=2, max_length=11, description="Player cards, e.g. ['A♠', '7H']")
    dealer_upcard: int = Field(..., ge=2, le=11, description="Dealer upcard value (Ace = 11)")
    can_double: bool = True
    can_split: bool = True


# Statistics schemas
class SessionStatsResponse(BaseModel):
    """Current session statistics."""

    correct: int
    incorrect: int
    total: int
    accuracy: int
    bankroll: float
    session_profit: float
    total_wagered: float


class ChartAccuracy(BaseModel):
    """Accuracy on one chart."""

    accuracy: int
    total: int


class MissedSituationResponse(BaseModel):
    """A frequently missed situation."""

    situation: str
    count: int
    correct_action: str


class SessionSummaryResponse(BaseModel):
    """An archived session."""

    date: str
    correct: int
    incorrect: int
    hands: int


class OverallStatsResponse(BaseModel):
    """Lifetime statistics."""

    total_decisions: int
    correct_decisions: int
    incorrect_decisions: int
    accuracy: int
    by_chart: dict[str, ChartAccuracy]
    missed_situations: list[MissedSituationResponse]
    last_played: str | None
    recent_sessions: list[SessionSummaryResponse]
    bankroll: float
    net_result: float


class TrendResponse(BaseModel):
    """Improvement trend."""

    trend: Literal["up", "down", "stable", "neutral"]
    message: str
