"""Round settlement, payouts and action outcomes."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Union

from core.cards import Card
from core.hand import HandInfo
from core.strategy.basic import OptimalPlay


class Outcome(Enum):
    """Terminal result of a hand."""

    BLACKJACK = "blackjack"
    WIN = "win"
    LOSE = "lose"
    PUSH = "push"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RoundResult:
    """Settled result of a hand."""

    outcome: Outcome
    message: str


def settle(player: HandInfo, dealer: HandInfo) -> RoundResult:
    """
    Settle a hand. Rules are checked in order, first match wins.

    Both hands must be fully revealed.
    """
    if player.is_busted:
        return RoundResult(Outcome.LOSE, "Bust! You lose.")

    if player.is_blackjack and not dealer.is_blackjack:
        return RoundResult(Outcome.BLACKJACK, "Blackjack! You win!")

    if dealer.is_blackjack and not player.is_blackjack:
        return RoundResult(Outcome.LOSE, "Dealer Blackjack. You lose.")

    if player.is_blackjack and dealer.is_blackjack:
        return RoundResult(Outcome.PUSH, "Push - both Blackjack.")

    if dealer.is_busted:
        return RoundResult(Outcome.WIN, "Dealer busts! You win!")

    if player.total > dealer.total:
        return RoundResult(Outcome.WIN, f"You win! {player.total} beats {dealer.total}.")

    if player.total < dealer.total:
        return RoundResult(Outcome.LOSE, f"You lose. {dealer.total} beats {player.total}.")

    return RoundResult(Outcome.PUSH, f"Push. Both have {player.total}.")


def calculate_payout(
    result: RoundResult | Outcome,
    bet: int | Decimal,
    doubled: bool = False,
    blackjack_payout: float = 1.5,
) -> Decimal:
    """
    Net amount won (positive) or lost (negative) on a settled hand.

    A doubled hand wins or loses twice the bet. Blackjack always pays
    on the base bet, since a natural can't be doubled.
    """
    outcome = result.outcome if isinstance(result, RoundResult) else result
    stake = Decimal(str(bet))
    multiplier = 2 if doubled else 1

    if outcome == Outcome.BLACKJACK:
        return stake * Decimal(str(blackjack_payout))
    if outcome == Outcome.WIN:
        return stake * multiplier
    if outcome == Outcome.LOSE:
        return -stake * multiplier
    return Decimal("0")


# Action outcomes: every engine action returns exactly one of these.


@dataclass(frozen=True)
class Continuing:
    """The player still has a decision to make."""

    optimal_play: OptimalPlay


@dataclass(frozen=True)
class SplitOccurred:
    """The pair was split; play continues on the first hand."""

    parked_cards: tuple[Card, ...]
    optimal_play: OptimalPlay


@dataclass(frozen=True)
class HandComplete:
    """The hand is settled."""

    result: RoundResult
    payout: Decimal


@dataclass(frozen=True)
class Rejected:
    """The action was not allowed; nothing changed."""

    action: str
    reason: str


ActionOutcome = Union[Continuing, SplitOccurred, HandComplete, Rejected]
