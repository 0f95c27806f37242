"""Core blackjack trainer engine - 100% UI-agnostic."""

from core.cards import Card, Shoe, Rank, Suit
from core.hand import Hand, HandInfo, evaluate

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "Hand",
    "HandInfo",
    "evaluate",
]
