"""Table rules for the trainer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RuleSet:
    """
    Blackjack table rules configuration.

    The trainer plays one fixed ruleset: six decks, dealer stands on
    soft 17, double after split allowed, no surrender, blackjack pays 3:2.
    """

    # Deck configuration
    num_decks: int = 6
    reshuffle_penetration: float = 0.75  # Fraction of the shoe dealt before rebuild

    # Betting limits
    min_bet: int = 5
    max_bet: int = 500
    default_bet: int = 25

    # Dealer rules
    dealer_hits_soft_17: bool = False  # S17

    # Blackjack payout (3:2 = 1.5)
    blackjack_payout: float = 1.5

    # Double down rules
    double_after_split: bool = True  # DAS

    def __post_init__(self) -> None:
        """Validate rule values."""
        if self.num_decks < 1 or self.num_decks > 8:
            raise ValueError("num_decks must be between 1 and 8")
        if not 0.0 < self.reshuffle_penetration <= 1.0:
            raise ValueError("reshuffle_penetration must be between 0 and 1")
        if self.blackjack_payout < 1.0:
            raise ValueError("blackjack_payout must be at least 1.0")
        if self.min_bet < 1 or self.max_bet < self.min_bet:
            raise ValueError("Bet limits must satisfy 1 <= min_bet <= max_bet")
        if not self.min_bet <= self.default_bet <= self.max_bet:
            raise ValueError("default_bet must be within the bet limits")

    def is_valid_bet(self, amount: int) -> bool:
        """Check if a bet is within the table limits."""
        return self.min_bet <= amount <= self.max_bet
