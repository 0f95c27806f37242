"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from core.cards import Card


@dataclass(frozen=True)
class HandInfo:
    """Derived state of a set of cards. Only face-up cards count."""

    total: int
    is_soft: bool
    is_pair: bool
    is_blackjack: bool
    is_busted: bool
    num_cards: int
    pair_value: int | None = None


def evaluate(cards: Iterable[Card]) -> HandInfo:
    """
    Evaluate a set of cards.

    Aces start at 11 and are softened to 1 one at a time while the total
    is over 21. Face-down cards contribute nothing except to blackjack
    detection, which looks at every card so a dealer natural is found
    with the hole card still down.
    """
    cards = list(cards)
    total = 0
    aces = 0

    for card in cards:
        if card.face_up:
            total += card.value
            if card.is_ace:
                aces += 1

    # Reduce aces from 11 to 1 as needed
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1

    is_pair = (
        len(cards) == 2
        and cards[0].face_up
        and cards[1].face_up
        and cards[0].value == cards[1].value
    )
    is_blackjack = len(cards) == 2 and {c.value for c in cards} == {10, 11}

    return HandInfo(
        total=total,
        is_soft=aces > 0 and total <= 21,
        is_pair=is_pair,
        is_blackjack=is_blackjack,
        is_busted=total > 21,
        num_cards=len(cards),
        pair_value=cards[0].value if is_pair else None,
    )


@dataclass
class Hand:
    """An ordered set of cards. Every derived value is re-evaluated on access."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def clear(self) -> None:
        """Remove all cards from the hand."""
        self.cards.clear()

    def reveal_all(self) -> None:
        """Turn every card face up."""
        self.cards = [card.revealed() for card in self.cards]

    @property
    def info(self) -> HandInfo:
        return evaluate(self.cards)

    @property
    def upcard(self) -> Card | None:
        """Return the first face-up card, if any."""
        return next((card for card in self.cards if card.face_up), None)

    @property
    def value(self) -> int:
        """Return the best total of the visible cards."""
        return self.info.total

    @property
    def is_soft(self) -> bool:
        return self.info.is_soft

    @property
    def is_pair(self) -> bool:
        return self.info.is_pair

    @property
    def is_blackjack(self) -> bool:
        return self.info.is_blackjack

    @property
    def is_busted(self) -> bool:
        return self.info.is_busted

    @property
    def has_hidden_cards(self) -> bool:
        """Check if any card is still face down."""
        return any(not card.face_up for card in self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        info = self.info
        value_str = f"({info.total})"
        if info.is_soft:
            value_str = f"(soft {info.total})"
        if info.is_blackjack and not self.has_hidden_cards:
            value_str = "(BLACKJACK)"
        if info.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"
