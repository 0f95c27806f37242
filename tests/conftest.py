"""Pytest fixtures for strategy trainer tests."""

import pytest
from random import Random

from core.cards import Card, Shoe, Rank, Suit
from core.hand import Hand
from core.game import RoundEngine
from core.strategy import BasicStrategy, RuleSet


class StackedShoe(Shoe):
    """
    A single-deck shoe that deals the given cards first, in order.

    Once the stack runs out it behaves like a normal seeded shoe.
    """

    def __init__(self, cards: list[Card], rng: Random | None = None) -> None:
        super().__init__(num_decks=1, penetration=1.0, rng=rng or Random(42))
        self._cards = list(reversed(cards))

    @property
    def needs_shuffle(self) -> bool:
        return not self._cards


def make_cards(*codes: str) -> list[Card]:
    """Build cards from strings like 'AS', '10H', 'KC'."""
    return [Card.from_string(code) for code in codes]


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled 6-deck shoe."""
    s = Shoe(num_decks=6, penetration=0.75, rng=rng)
    s.shuffle()
    return s


@pytest.fixture
def rules():
    """Default ruleset."""
    return RuleSet()


@pytest.fixture
def basic_strategy(rules):
    """Basic strategy for default rules."""
    return BasicStrategy(rules)


@pytest.fixture
def engine(rng):
    """A round engine dealing from a seeded shoe."""
    return RoundEngine(rng=rng)


@pytest.fixture
def stacked_engine():
    """
    Factory for engines whose shoe deals the given cards in order.

    Deal order is player, dealer, player, dealer (hole card), then any hits.
    """

    def make(*codes: str, rules: RuleSet | None = None) -> RoundEngine:
        return RoundEngine(rules=rules, shoe=StackedShoe(make_cards(*codes)))

    return make


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return Hand([Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS)])


@pytest.fixture
def soft_18_hand():
    """A soft 18 hand (A-7)."""
    return Hand([Card(Rank.ACE, Suit.SPADES), Card(Rank.SEVEN, Suit.HEARTS)])


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return Hand([Card(Rank.TEN, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS)])


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return Hand([Card(Rank.EIGHT, Suit.SPADES), Card(Rank.EIGHT, Suit.HEARTS)])


@pytest.fixture
def bust_hand():
    """A busted hand (10-6-K)."""
    return Hand(
        [
            Card(Rank.TEN, Suit.SPADES),
            Card(Rank.SIX, Suit.HEARTS),
            Card(Rank.KING, Suit.CLUBS),
        ]
    )
