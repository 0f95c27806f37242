"""Basic strategy tables for blackjack."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from core.hand import HandInfo
from core.strategy.actions import Action, Chart
from core.strategy.explanations import card_label, explain
from core.strategy.rules import RuleSet


# Type aliases for clarity
DealerUpcard = int  # 2-11 (11 = Ace)
TableRow = tuple[Action, ...]  # One action per dealer upcard 2..10, A

DEALER_UPCARDS: tuple[DealerUpcard, ...] = tuple(range(2, 12))


def dealer_index(dealer_upcard: DealerUpcard) -> int:
    """Map a dealer upcard value (2-11) to its chart column (0-9)."""
    return dealer_upcard - 2


@dataclass(frozen=True)
class OptimalPlay:
    """The recommended action for one decision."""

    action: Action
    hand_type: str
    explanation: str
    chart: Chart

    @property
    def short_action(self) -> str:
        """Return the chart code of the action."""
        return self.action.code

    def __str__(self) -> str:
        return f"{self.action.name} ({self.hand_type})"


@dataclass(frozen=True)
class ChartData:
    """A strategy chart laid out for display."""

    chart: Chart
    headers: tuple[str, ...]
    rows: tuple[tuple[str, tuple[str, ...]], ...]


class BasicStrategy:
    """
    Basic strategy lookup tables.

    Six decks, dealer stands on soft 17, double after split, no surrender.
    Rows are keyed by hand total (or pair card value); each row holds one
    action per dealer upcard.
    """

    def __init__(self, rules: RuleSet | None = None) -> None:
        """
        Initialize basic strategy for the table rules.

        Args:
            rules: Rule set to generate strategy for. Uses default if None.
        """
        self.rules = rules or RuleSet()
        self._hard_table = self._build_hard_table()
        self._soft_table = self._build_soft_table()
        self._pair_table = self._build_pair_table()

    def get_optimal_play(
        self,
        info: HandInfo,
        dealer_upcard: DealerUpcard,
        can_double: bool = True,
        can_split: bool = True,
    ) -> OptimalPlay:
        """
        Get the basic strategy play for a hand.

        The hand must not be busted and the dealer upcard must be 2-11.

        Args:
            info: Evaluated player hand
            dealer_upcard: Dealer's upcard value (2-11, Ace=11)
            can_double: Whether doubling is allowed
            can_split: Whether splitting is allowed

        Returns:
            The recommended play with its explanation
        """
        column = dealer_index(dealer_upcard)

        if can_split and info.is_pair and info.pair_value is not None:
            action = self._pair_table[info.pair_value][column]
            chart = Chart.PAIRS
            label = card_label(info.pair_value)
            hand_type = f"{label},{label}"
        elif info.is_soft:
            row = self._soft_table.get(info.total)
            action = row[column] if row else Action.HIT
            chart = Chart.SOFT
            hand_type = f"Soft {info.total}"
        else:
            action = self._hard_action(info.total, column)
            chart = Chart.HARD
            hand_type = str(info.total)

        action = self._resolve_action(action, info.total, column, can_double, can_split)

        return OptimalPlay(
            action=action,
            hand_type=hand_type,
            explanation=explain(
                action,
                chart,
                total=info.total,
                pair_value=info.pair_value if chart is Chart.PAIRS else None,
                dealer_upcard=dealer_upcard,
                hand_type=hand_type,
            ),
            chart=chart,
        )

    def _hard_action(self, total: int, column: int) -> Action:
        """Look up the hard chart; totals below 5 always hit."""
        row = self._hard_table.get(min(total, 21))
        if row is None:
            return Action.HIT
        return row[column]

    def _resolve_action(
        self,
        action: Action,
        total: int,
        column: int,
        can_double: bool,
        can_split: bool,
    ) -> Action:
        """Resolve chart actions the player is not allowed to take."""
        if action == Action.DOUBLE and not can_double:
            action = Action.HIT
        if action == Action.DOUBLE_OR_STAND and not can_double:
            action = Action.STAND
        if action == Action.SPLIT and not can_split:
            # Play the pair as its hard total
            action = self._hard_action(total, column)
            if action == Action.DOUBLE and not can_double:
                action = Action.HIT
        if action == Action.DOUBLE_OR_STAND:
            action = Action.DOUBLE
        return action

    def _build_hard_table(self) -> Mapping[int, TableRow]:
        """Build hard totals strategy table."""
        H = Action.HIT
        S = Action.STAND
        D = Action.DOUBLE

        table: dict[int, TableRow] = {}

        # Dealer upcards: 2, 3, 4, 5, 6, 7, 8, 9, 10, A
        for total in range(5, 9):
            table[total] = (H, H, H, H, H, H, H, H, H, H)

        table[9] = (H, D, D, D, D, H, H, H, H, H)
        table[10] = (D, D, D, D, D, D, D, D, H, H)
        table[11] = (D, D, D, D, D, D, D, D, D, D)
        table[12] = (H, H, S, S, S, H, H, H, H, H)

        for total in range(13, 17):
            table[total] = (S, S, S, S, S, H, H, H, H, H)

        for total in range(17, 22):
            table[total] = (S, S, S, S, S, S, S, S, S, S)

        return MappingProxyType(table)

    def _build_soft_table(self) -> Mapping[int, TableRow]:
        """Build soft totals strategy table (A,2 through A,10)."""
        H = Action.HIT
        S = Action.STAND
        D = Action.DOUBLE
        Ds = Action.DOUBLE_OR_STAND

        table: dict[int, TableRow] = {}

        table[13] = (H, H, H, D, D, H, H, H, H, H)  # A,2
        table[14] = (H, H, H, D, D, H, H, H, H, H)  # A,3
        table[15] = (H, H, D, D, D, H, H, H, H, H)  # A,4
        table[16] = (H, H, D, D, D, H, H, H, H, H)  # A,5
        table[17] = (H, D, D, D, D, H, H, H, H, H)  # A,6
        table[18] = (S, Ds, Ds, Ds, Ds, S, S, H, H, H)  # A,7

        for total in range(19, 22):
            table[total] = (S, S, S, S, S, S, S, S, S, S)

        return MappingProxyType(table)

    def _build_pair_table(self) -> Mapping[int, TableRow]:
        """Build pair splitting strategy table, keyed by card value (11 = Aces)."""
        H = Action.HIT
        S = Action.STAND
        D = Action.DOUBLE
        P = Action.SPLIT

        table: dict[int, TableRow] = {}

        table[2] = (P, P, P, P, P, P, H, H, H, H)
        table[3] = (P, P, P, P, P, P, H, H, H, H)
        table[4] = (H, H, H, P, P, H, H, H, H, H)
        table[5] = (D, D, D, D, D, D, D, D, H, H)  # Played as hard 10
        table[6] = (P, P, P, P, P, H, H, H, H, H)
        table[7] = (P, P, P, P, P, P, H, H, H, H)
        table[8] = (P, P, P, P, P, P, P, P, P, P)
        table[9] = (P, P, P, P, P, S, P, P, S, S)
        table[10] = (S, S, S, S, S, S, S, S, S, S)
        table[11] = (P, P, P, P, P, P, P, P, P, P)

        return MappingProxyType(table)

    def chart(self, chart: Chart) -> ChartData:
        """Lay out one strategy chart for display, strongest row first."""
        headers = ("", "2", "3", "4", "5", "6", "7", "8", "9", "10", "A")

        def codes(row: TableRow) -> tuple[str, ...]:
            return tuple(action.code for action in row)

        if chart is Chart.HARD:
            hard = self._hard_table
            rows = [("17+", codes(hard[17]))]
            rows += [(str(total), codes(hard[total])) for total in range(16, 7, -1)]
            rows.append(("5-7", codes(hard[5])))
        elif chart is Chart.SOFT:
            rows = [
                (f"A,{total - 11}", codes(self._soft_table[total]))
                for total in range(20, 12, -1)
            ]
        else:
            rows = [("A,A", codes(self._pair_table[11]))]
            rows += [
                (f"{value},{value}", codes(self._pair_table[value]))
                for value in range(10, 1, -1)
            ]

        return ChartData(chart=chart, headers=headers, rows=tuple(rows))

    @property
    def hard_table(self) -> Mapping[int, TableRow]:
        """Return the hard totals strategy table."""
        return self._hard_table

    @property
    def soft_table(self) -> Mapping[int, TableRow]:
        """Return the soft totals strategy table."""
        return self._soft_table

    @property
    def pair_table(self) -> Mapping[int, TableRow]:
        """Return the pair splitting strategy table."""
        return self._pair_table
