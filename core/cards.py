"""Cards and the dealing shoe."""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from random import Random
from typing import Iterator

logger = logging.getLogger(__name__)


class Suit(Enum):
    """Card suits, valued by their symbol."""

    SPADES = "♠"
    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    """Card ranks in shoe-building order (Ace first)."""

    ACE = 14
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        return self.label

    @property
    def label(self) -> str:
        """Short label: 2-10, J, Q, K or A."""
        return str(self.value) if self.value <= 10 else self.name[0]

    @property
    def blackjack_value(self) -> int:
        """Point value with the Ace counted high (11); face cards are 10."""
        if self is Rank.ACE:
            return 11
        return min(self.value, 10)

    @property
    def is_ace(self) -> bool:
        return self is Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """
    Immutable playing card.

    Visibility is not part of a card's identity: two cards of the same
    rank and suit compare equal whether face up or face down. Flipping a
    card produces a new instance.
    """

    rank: Rank
    suit: Suit
    face_up: bool = field(default=True, compare=False)

    def __str__(self) -> str:
        if not self.face_up:
            return "??"
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        state = "" if self.face_up else ", face_down"
        return f"Card({self.rank.name}, {self.suit.name}{state})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    def revealed(self) -> "Card":
        """Return this card turned face up."""
        if self.face_up:
            return self
        return replace(self, face_up=True)

    def face_down(self) -> "Card":
        """Return this card turned face down."""
        if not self.face_up:
            return self
        return replace(self, face_up=False)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """
        Parse a card such as 'A♠', 'AS', '10h' or 'Td'.

        The last character is the suit (symbol or initial), the rest the rank.
        """
        text = s.strip().upper()
        rank = _RANKS_BY_LABEL.get(text[:-1])
        suit = _SUITS_BY_LABEL.get(text[-1:])
        if rank is None or suit is None:
            raise ValueError(f"Invalid card string: {s!r}")
        return cls(rank, suit)


_RANKS_BY_LABEL = {rank.label: rank for rank in Rank}
_RANKS_BY_LABEL["T"] = Rank.TEN
_SUITS_BY_LABEL = {suit.value: suit for suit in Suit}
_SUITS_BY_LABEL.update({suit.name[0]: suit for suit in Suit})


class Shoe:
    """
    A multi-deck shoe dealt from the back.

    Once the dealt fraction reaches ``penetration`` the next draw rebuilds
    and reshuffles the whole shoe first.
    """

    def __init__(
        self,
        num_decks: int = 6,
        penetration: float = 0.75,
        rng: Random | None = None,
    ) -> None:
        if num_decks < 1:
            raise ValueError(f"num_decks must be at least 1, got {num_decks}")
        if not 0.0 < penetration <= 1.0:
            raise ValueError(f"penetration must be in (0, 1], got {penetration}")

        self.num_decks = num_decks
        self.penetration = penetration
        self.shuffle_count = 0
        self._rng = rng or Random()
        self._cards: list[Card] = []
        self.build()

    def build(self) -> None:
        """Refill the shoe in deck order: each suit A-K, once per deck."""
        self._cards = [
            Card(rank, suit) for _ in range(self.num_decks) for suit in Suit for rank in Rank
        ]

    def shuffle(self) -> None:
        """Shuffle the cards left in the shoe."""
        # Random.shuffle is an in-place Fisher-Yates walk from the last index down
        self._rng.shuffle(self._cards)
        self.shuffle_count += 1
        logger.debug("Shoe shuffled (%d decks, shuffle #%d)", self.num_decks, self.shuffle_count)

    def draw(self, face_up: bool = True) -> Card:
        """Draw the last card, rebuilding and reshuffling first if penetration was reached."""
        if self.needs_shuffle:
            logger.debug(
                "Penetration %.2f reached after %d cards, reshuffling",
                self.penetration_used,
                self.cards_dealt,
            )
            self.build()
            self.shuffle()

        assert self._cards, "Cannot draw from empty shoe"
        card = self._cards.pop()
        return card if face_up else card.face_down()

    @property
    def needs_shuffle(self) -> bool:
        return self.penetration_used >= self.penetration

    @property
    def penetration_used(self) -> float:
        """Fraction of a full shoe already dealt."""
        return self.cards_dealt / self.total_cards

    @property
    def total_cards(self) -> int:
        return self.num_decks * len(Rank) * len(Suit)

    @property
    def cards_dealt(self) -> int:
        return self.total_cards - len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
