"""Strategy chart and lookup endpoints."""

from fastapi import APIRouter, HTTPException

from api.routes.game import play_to_response
from api.schemas import ChartResponse, LookupRequest, OptimalPlayResponse
from config import config
from core.cards import Card
from core.hand import evaluate
from core.strategy import BasicStrategy, Chart

router = APIRouter()

_strategy = BasicStrategy(config.trainer.rules)


@router.get("/chart/{chart}")
async def get_chart(chart: Chart) -> ChartResponse:
    """Get one strategy chart laid out for display."""
    data = _strategy.chart(chart)
    return ChartResponse(
        chart=data.chart.value,
        headers=list(data.headers),
        rows=[(label, list(codes)) for label, codes in data.rows],
    )


@router.post("/lookup")
async def lookup(request: LookupRequest) -> OptimalPlayResponse:
    """Look up the basic strategy play for any set of player cards."""
    try:
        cards = [Card.from_string(s) for s in request.cards]
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    play = _strategy.get_optimal_play(
        evaluate(cards),
        request.dealer_upcard,
        can_double=request.can_double,
        can_split=request.can_split,
    )
    return play_to_response(play)
