"""Strategy tables and table rules."""

from core.strategy.rules import RuleSet
from core.strategy.actions import Action, Chart
from core.strategy.basic import BasicStrategy, ChartData, OptimalPlay

__all__ = [
    "RuleSet",
    "Action",
    "Chart",
    "BasicStrategy",
    "ChartData",
    "OptimalPlay",
]
