"""Game API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Header

from api.schemas import (
    ActionCheckResponse,
    ActionRequest,
    ActionResponse,
    CardResponse,
    DealRequest,
    GameStateResponse,
    HandResponse,
    ModeRequest,
    OptimalPlayResponse,
    RoundResultResponse,
)
from api.session import (
    SessionNotFound,
    TrainerSession,
    create_trainer,
    get_trainer,
    save_trainer,
)
from core.cards import Card
from core.game import (
    ActionCheck,
    ActionOutcome,
    HandComplete,
    Rejected,
    RoundSnapshot,
    SplitOccurred,
    TrainerMode,
)
from core.hand import HandInfo
from core.strategy.basic import OptimalPlay

logger = logging.getLogger(__name__)

router = APIRouter()

SessionHeader = Annotated[str | None, Header(alias="X-Session-ID")]


async def load_trainer(token: str | None) -> tuple[str, TrainerSession]:
    """Resolve the session header, mapping unknown sessions to 404."""
    try:
        return await get_trainer(token)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _card_to_response(card: Card) -> CardResponse:
    """Convert a Card, hiding face-down cards."""
    if not card.face_up:
        return CardResponse(rank=None, suit=None, value=None, face_up=False)
    return CardResponse(rank=str(card.rank), suit=str(card.suit), value=card.value, face_up=True)


def _hand_to_response(cards: tuple[Card, ...], info: HandInfo) -> HandResponse:
    """Convert cards plus their evaluation to a HandResponse."""
    return HandResponse(
        cards=[_card_to_response(c) for c in cards],
        total=info.total,
        is_soft=info.is_soft,
        is_pair=info.is_pair,
        is_blackjack=info.is_blackjack,
        is_busted=info.is_busted,
    )


def play_to_response(play: OptimalPlay) -> OptimalPlayResponse:
    """Convert an OptimalPlay to its response."""
    return OptimalPlayResponse(
        action=play.action.name,
        short_action=play.short_action,
        hand_type=play.hand_type,
        explanation=play.explanation,
        chart=play.chart.value,
    )


def _check_to_response(check: ActionCheck) -> ActionCheckResponse:
    return ActionCheckResponse(
        correct=check.correct,
        player_action=check.player_action.name,
        optimal_action=check.optimal_action.name if check.optimal_action else None,
        explanation=check.explanation,
        situation=check.situation,
        chart=check.chart.value if check.chart else None,
    )


def _state_response(snapshot: RoundSnapshot, trainer: TrainerSession) -> GameStateResponse:
    """Convert a round snapshot to response."""
    result = None
    if snapshot.result is not None:
        result = RoundResultResponse(
            outcome=snapshot.result.outcome.value,
            message=snapshot.result.message,
        )

    # Test mode keeps the answer back until the player has acted
    optimal_play = None
    if snapshot.optimal_play and (
        trainer.mode.reveals_optimal_play or not snapshot.awaiting_decision
    ):
        optimal_play = play_to_response(snapshot.optimal_play)

    return GameStateResponse(
        phase=snapshot.phase.name,
        mode=trainer.mode.value,
        player_hand=_hand_to_response(snapshot.player_cards, snapshot.player_info),
        dealer_hand=_hand_to_response(snapshot.dealer_cards, snapshot.dealer_info),
        parked_hand=[_card_to_response(c) for c in snapshot.parked_cards],
        dealer_upcard=snapshot.dealer_upcard,
        awaiting_decision=snapshot.awaiting_decision,
        optimal_play=optimal_play,
        can_double=snapshot.can_double,
        can_split=snapshot.can_split,
        bet=snapshot.bet,
        next_bet=snapshot.next_bet,
        doubled=snapshot.doubled,
        last_payout=float(snapshot.last_payout),
        result=result,
        bankroll=float(trainer.bankroll.balance),
    )


def _settle_bankroll(trainer: TrainerSession, outcome: HandComplete) -> None:
    """Count the hand's total stake and apply its payout."""
    snapshot = trainer.engine.snapshot()
    trainer.bankroll.record_wager(snapshot.bet * (2 if snapshot.doubled else 1))
    trainer.bankroll.apply_payout(outcome.payout)


def _action_response(
    outcome: ActionOutcome,
    trainer: TrainerSession,
    check: ActionCheck | None = None,
) -> ActionResponse:
    if isinstance(outcome, Rejected):
        raise HTTPException(status_code=400, detail=outcome.reason)

    payout = None
    if isinstance(outcome, HandComplete):
        kind = "complete"
        payout = float(outcome.payout)
    elif isinstance(outcome, SplitOccurred):
        kind = "split"
    else:
        kind = "continuing"

    return ActionResponse(
        kind=kind,
        check=_check_to_response(check) if check is not None else None,
        payout=payout,
        state=_state_response(trainer.engine.snapshot(), trainer),
    )


@router.post("/new")
async def new_game() -> dict[str, str]:
    """Create a new trainer session."""
    token, _ = await create_trainer()
    return {"session_id": token}


@router.get("/state")
async def get_state(session_id: SessionHeader = None) -> GameStateResponse:
    """Get current round state."""
    _, trainer = await load_trainer(session_id)
    return _state_response(trainer.engine.snapshot(), trainer)


@router.post("/mode")
async def set_mode(request: ModeRequest, session_id: SessionHeader = None) -> GameStateResponse:
    """Switch between learning mode and test mode."""
    raw_id, trainer = await load_trainer(session_id)
    trainer.mode = TrainerMode(request.mode)
    logger.debug("Session %s switched to %s mode", raw_id, trainer.mode.value)

    await save_trainer(raw_id, trainer)
    return _state_response(trainer.engine.snapshot(), trainer)


@router.post("/deal")
async def deal(request: DealRequest, session_id: SessionHeader = None) -> ActionResponse:
    """Place a bet and deal a hand."""
    raw_id, trainer = await load_trainer(session_id)
    engine = trainer.engine

    amount = engine.next_bet if request.amount is None else request.amount
    if not trainer.bankroll.can_afford(amount):
        raise HTTPException(status_code=400, detail="Insufficient bankroll")

    outcome = engine.start_hand(amount)
    if isinstance(outcome, HandComplete):
        _settle_bankroll(trainer, outcome)

    response = _action_response(outcome, trainer)
    await save_trainer(raw_id, trainer)
    return response


@router.post("/action")
async def player_action(
    request: ActionRequest,
    session_id: SessionHeader = None,
) -> ActionResponse:
    """Grade the chosen action against basic strategy, then play it."""
    raw_id, trainer = await load_trainer(session_id)
    engine = trainer.engine

    if request.action == "double" and not trainer.bankroll.can_afford(engine.round.bet * 2):
        raise HTTPException(status_code=400, detail="Insufficient bankroll to double")

    actions = {
        "hit": engine.hit,
        "stand": engine.stand,
        "double": engine.double,
        "split": engine.split,
    }

    check = engine.check_action(request.action)
    outcome = actions[request.action]()
    if isinstance(outcome, Rejected):
        raise HTTPException(status_code=400, detail=outcome.reason)

    trainer.tracker.record_decision(check)
    if isinstance(outcome, HandComplete):
        _settle_bankroll(trainer, outcome)

    response = _action_response(outcome, trainer, check)
    await save_trainer(raw_id, trainer)
    return response
