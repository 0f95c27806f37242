"""Statistics API endpoints."""

from fastapi import APIRouter

from api.routes.game import SessionHeader, load_trainer
from api.schemas import OverallStatsResponse, SessionStatsResponse, TrendResponse
from api.session import save_trainer

router = APIRouter()


@router.get("/session")
async def get_session_stats(session_id: SessionHeader = None) -> SessionStatsResponse:
    """Decision accuracy and bankroll for the current session."""
    _, trainer = await load_trainer(session_id)
    bankroll = trainer.bankroll
    return SessionStatsResponse(
        **trainer.tracker.session_stats(),
        bankroll=float(bankroll.balance),
        session_profit=float(bankroll.session_profit),
        total_wagered=float(bankroll.total_wagered),
    )


@router.get("/overall")
async def get_overall_stats(session_id: SessionHeader = None) -> OverallStatsResponse:
    """Lifetime accuracy, per-chart accuracy and most missed situations."""
    _, trainer = await load_trainer(session_id)
    return OverallStatsResponse(
        **trainer.tracker.overall_stats(),
        bankroll=float(trainer.bankroll.balance),
        net_result=float(trainer.bankroll.net_result),
    )


@router.get("/trend")
async def get_trend(session_id: SessionHeader = None) -> TrendResponse:
    """Accuracy trend over recent sessions."""
    _, trainer = await load_trainer(session_id)
    trend = trainer.tracker.improvement_trend()
    return TrendResponse(trend=trend.trend, message=trend.message)


@router.post("/session/reset")
async def reset_session(session_id: SessionHeader = None) -> SessionStatsResponse:
    """Archive the current session and start a fresh one."""
    raw_id, trainer = await load_trainer(session_id)
    trainer.tracker.reset_session()
    trainer.bankroll.start_session()
    await save_trainer(raw_id, trainer)
    return await get_session_stats(session_id)


@router.post("/reset")
async def reset_all(session_id: SessionHeader = None) -> dict[str, str]:
    """Forget all statistics and restore the starting bankroll."""
    raw_id, trainer = await load_trainer(session_id)
    trainer.tracker.reset_all()
    trainer.bankroll.reset()
    await save_trainer(raw_id, trainer)
    return {"status": "reset"}
