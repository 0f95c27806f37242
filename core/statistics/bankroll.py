"""Simulated bankroll for the trainer."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

DEFAULT_BANKROLL = Decimal("1000")


@dataclass
class Bankroll:
    """
    Running balance fed by hand payouts.

    The engine never touches this: the caller records the wager when a hand
    is dealt and applies the payout once it is settled.
    """

    starting_balance: Decimal = DEFAULT_BANKROLL
    balance: Decimal = DEFAULT_BANKROLL
    total_wagered: Decimal = Decimal("0")
    session_profit: Decimal = Decimal("0")
    hands_played: int = 0

    @classmethod
    def starting_with(cls, amount: Decimal) -> "Bankroll":
        """Create a bankroll with a given starting balance."""
        return cls(starting_balance=amount, balance=amount)

    def can_afford(self, amount: int | Decimal) -> bool:
        """Check if the balance covers a wager."""
        return Decimal(str(amount)) <= self.balance

    def record_wager(self, amount: int | Decimal) -> None:
        """Count a wager towards the total wagered."""
        if amount <= 0:
            raise ValueError("Wager must be positive")
        self.total_wagered += Decimal(str(amount))
        self.hands_played += 1

    def apply_payout(self, payout: Decimal) -> Decimal:
        """
        Apply a settled payout.

        Returns:
            The new balance
        """
        self.balance += payout
        self.session_profit += payout
        return self.balance

    @property
    def net_result(self) -> Decimal:
        """Balance change since the start."""
        return self.balance - self.starting_balance

    def start_session(self) -> None:
        """Zero the session profit, keeping the balance."""
        self.session_profit = Decimal("0")

    def reset(self) -> None:
        """Return to the starting balance."""
        self.balance = self.starting_balance
        self.total_wagered = Decimal("0")
        self.session_profit = Decimal("0")
        self.hands_played = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize for a session store; Decimals become strings."""
        return {
            "starting_balance": str(self.starting_balance),
            "balance": str(self.balance),
            "total_wagered": str(self.total_wagered),
            "session_profit": str(self.session_profit),
            "hands_played": self.hands_played,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Bankroll":
        """Restore from to_dict() output."""
        return cls(
            starting_balance=Decimal(data["starting_balance"]),
            balance=Decimal(data["balance"]),
            total_wagered=Decimal(data.get("total_wagered", "0")),
            session_profit=Decimal(data.get("session_profit", "0")),
            hands_played=data.get("hands_played", 0),
        )
