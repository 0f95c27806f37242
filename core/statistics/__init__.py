"""Decision statistics and bankroll tracking."""

from core.statistics.bankroll import Bankroll, DEFAULT_BANKROLL
from core.statistics.decisions import DecisionTracker, Trend

__all__ = [
    "Bankroll",
    "DEFAULT_BANKROLL",
    "DecisionTracker",
    "Trend",
]
