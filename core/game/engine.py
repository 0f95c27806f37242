"""Blackjack round engine with state machine."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from random import Random
from typing import Callable

from transitions import Machine

from core.cards import Card, Shoe
from core.hand import Hand, HandInfo
from core.strategy.actions import Action, Chart
from core.strategy.basic import BasicStrategy, OptimalPlay
from core.strategy.explanations import dealer_label
from core.strategy.rules import RuleSet
from core.game.events import EventEmitter, EventType, RoundEvent
from core.game.outcome import (
    ActionOutcome,
    Continuing,
    HandComplete,
    Rejected,
    RoundResult,
    SplitOccurred,
    calculate_payout,
    settle,
)
from core.game.state import GamePhase

logger = logging.getLogger(__name__)


@dataclass
class RoundState:
    """Mutable record of the current hand. Only the engine writes to it."""

    bet: int
    doubled: bool = False
    awaiting_decision: bool = False
    optimal_play: OptimalPlay | None = None
    result: RoundResult | None = None
    last_payout: Decimal = Decimal("0")


@dataclass(frozen=True)
class RoundSnapshot:
    """Read-only view of a round for the presentation and stats layers."""

    phase: GamePhase
    player_cards: tuple[Card, ...]
    dealer_cards: tuple[Card, ...]
    parked_cards: tuple[Card, ...]
    player_info: HandInfo
    dealer_info: HandInfo
    dealer_upcard: int | None
    awaiting_decision: bool
    optimal_play: OptimalPlay | None
    can_double: bool
    can_split: bool
    bet: int
    next_bet: int
    doubled: bool
    last_payout: Decimal
    result: RoundResult | None


@dataclass(frozen=True)
class ActionCheck:
    """How a chosen action compares to basic strategy."""

    correct: bool
    player_action: Action
    optimal_action: Action | None = None
    explanation: str | None = None
    situation: str | None = None  # e.g. "16 vs 10", "Soft 18 vs A"
    chart: Chart | None = None


class RoundEngine:
    """
    Single-player round engine using a state machine.

    Deals from its own shoe, grades every decision point against basic
    strategy and settles the hand. UI-agnostic: callers read snapshots,
    return values and events only.
    """

    # State machine states
    STATES = [p.name.lower() for p in GamePhase]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "deal", "source": "betting", "dest": "player_turn"},
        {"trigger": "natural", "source": "betting", "dest": "complete"},
        {"trigger": "finish_player", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "player_busts", "source": "player_turn", "dest": "complete"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "complete"},
        {"trigger": "new_round", "source": "complete", "dest": "betting"},
    ]

    def __init__(
        self,
        rules: RuleSet | None = None,
        shoe: Shoe | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a new round engine.

        Args:
            rules: Table rules (uses defaults if not provided)
            shoe: Pre-built shoe; a fresh shuffled shoe is made from the rules if None
            rng: Random number generator for reproducible shuffles
        """
        self.rules = rules or RuleSet()
        if shoe is None:
            shoe = Shoe(
                num_decks=self.rules.num_decks,
                penetration=self.rules.reshuffle_penetration,
                rng=rng,
            )
            shoe.shuffle()
        self.shoe = shoe
        self.strategy = BasicStrategy(self.rules)

        self.player_hand = Hand()
        self.dealer_hand = Hand()
        self.parked_hand = Hand()
        self.round = RoundState(bet=self.rules.default_bet)
        # Bet for the next deal; the finished round keeps its own
        self.next_bet = self.rules.default_bet
        self.events = EventEmitter()

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="betting",
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_log_phase",
        )

    @property
    def phase(self) -> GamePhase:
        """Get current phase as enum."""
        return GamePhase[self._machine_state.upper()]  # type: ignore

    def subscribe(
        self,
        handler: Callable[[RoundEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to round events."""
        self.events.subscribe(handler, event_type)

    def set_bet(self, amount: int) -> bool:
        """
        Set the bet for the next hand.

        Returns:
            True if the bet was accepted
        """
        if self.phase not in (GamePhase.BETTING, GamePhase.COMPLETE):
            self._reject("bet", "Cannot change the bet during a hand")
            return False
        if not self.rules.is_valid_bet(amount):
            self._reject(
                "bet",
                f"Bet must be between {self.rules.min_bet} and {self.rules.max_bet}",
            )
            return False

        self.next_bet = amount
        return True

    def start_hand(self, bet: int | None = None) -> ActionOutcome:
        """
        Deal a new hand.

        Naturals are settled at once; otherwise the player is asked for
        a decision.

        Args:
            bet: Bet for this hand (uses ``next_bet`` if None)
        """
        if self.phase not in (GamePhase.BETTING, GamePhase.COMPLETE):
            return self._reject("deal", "A hand is already in progress")

        amount = self.next_bet if bet is None else bet
        if not self.rules.is_valid_bet(amount):
            return self._reject(
                "deal",
                f"Bet must be between {self.rules.min_bet} and {self.rules.max_bet}",
            )

        if self.phase == GamePhase.COMPLETE:
            self.new_round()

        self.player_hand.clear()
        self.dealer_hand.clear()
        self.parked_hand.clear()
        self.round = RoundState(bet=amount)
        self.next_bet = amount

        # Deal: player, dealer, player, dealer (face down)
        self._deal_card_to_hand(self.player_hand)
        self._deal_card_to_hand(self.dealer_hand)
        self._deal_card_to_hand(self.player_hand)
        self._deal_card_to_hand(self.dealer_hand, face_up=False)

        self.events.emit_new(EventType.ROUND_STARTED, bet=amount)

        player_bj = self.player_hand.is_blackjack
        dealer_bj = self.dealer_hand.is_blackjack

        if player_bj or dealer_bj:
            if player_bj:
                self.events.emit_new(EventType.PLAYER_BLACKJACK)
            if dealer_bj:
                self.events.emit_new(EventType.DEALER_BLACKJACK)
            self._reveal_dealer()
            self.natural()
            return self._resolve_round()

        self.deal()
        self.round.awaiting_decision = True
        return Continuing(self._update_optimal_play())

    def hit(self) -> ActionOutcome:
        """Player hits (takes another card)."""
        if self.phase != GamePhase.PLAYER_TURN or not self.round.awaiting_decision:
            return self._reject("hit", "Cannot hit now")

        self._deal_card_to_hand(self.player_hand)
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=self.player_hand.value)

        if self.player_hand.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=self.player_hand.value)
            self._reveal_dealer()
            self.player_busts()
            return self._resolve_round()

        return Continuing(self._update_optimal_play())

    def stand(self) -> ActionOutcome:
        """Player stands (keeps current hand)."""
        if self.phase != GamePhase.PLAYER_TURN:
            return self._reject("stand", "Cannot stand now")

        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self.player_hand.value)
        self.finish_player()
        return self._play_dealer()

    def double(self) -> ActionOutcome:
        """Player doubles down: one more card, then the hand is over."""
        if not self.can_double:
            return self._reject("double", "Can only double on the first two cards")

        self.round.doubled = True
        self._deal_card_to_hand(self.player_hand)
        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            hand_value=self.player_hand.value,
            total_bet=self.round.bet * 2,
        )

        if self.player_hand.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=self.player_hand.value)
            self._reveal_dealer()
            self.player_busts()
            return self._resolve_round()

        self.finish_player()
        return self._play_dealer()

    def split(self) -> ActionOutcome:
        """
        Player splits a pair.

        Only the first hand is played: the second original card and a
        fresh card are parked and never settled.
        """
        if not self.can_split:
            return self._reject("split", "Can only split an unsplit pair")

        second_card = self.player_hand.cards.pop()
        self._deal_card_to_hand(self.player_hand)

        self.parked_hand.add_card(second_card)
        self._deal_card_to_hand(self.parked_hand)

        self.events.emit_new(
            EventType.PLAYER_SPLIT,
            hand_value=self.player_hand.value,
            parked_value=self.parked_hand.value,
        )

        return SplitOccurred(
            parked_cards=tuple(self.parked_hand.cards),
            optimal_play=self._update_optimal_play(),
        )

    def check_action(self, action: str | Action) -> ActionCheck:
        """
        Grade an action against the pending optimal play.

        Args:
            action: Action name ("hit", "stand", "double", "split") or Action

        Returns:
            The grading, with the situation label used for statistics
        """
        chosen = action if isinstance(action, Action) else Action.from_name(action)
        play = self.round.optimal_play

        if play is None or not self.round.awaiting_decision:
            return ActionCheck(correct=True, player_action=chosen)

        upcard = self.dealer_upcard
        situation = f"{play.hand_type} vs {dealer_label(upcard)}" if upcard else None

        return ActionCheck(
            correct=chosen.code == play.short_action,
            player_action=chosen,
            optimal_action=play.action,
            explanation=play.explanation,
            situation=situation,
            chart=play.chart,
        )

    def snapshot(self) -> RoundSnapshot:
        """Capture the current round state."""
        return RoundSnapshot(
            phase=self.phase,
            player_cards=tuple(self.player_hand.cards),
            dealer_cards=tuple(self.dealer_hand.cards),
            parked_cards=tuple(self.parked_hand.cards),
            player_info=self.player_hand.info,
            dealer_info=self.dealer_hand.info,
            dealer_upcard=self.dealer_upcard,
            awaiting_decision=self.round.awaiting_decision,
            optimal_play=self.round.optimal_play,
            can_double=self.can_double,
            can_split=self.can_split,
            bet=self.round.bet,
            next_bet=self.next_bet,
            doubled=self.round.doubled,
            last_payout=self.round.last_payout,
            result=self.round.result,
        )

    @property
    def dealer_upcard(self) -> int | None:
        """Value of the dealer's first face-up card (2-11)."""
        upcard = self.dealer_hand.upcard
        return upcard.value if upcard else None

    @property
    def can_double(self) -> bool:
        """Check if doubling is allowed."""
        if self.phase != GamePhase.PLAYER_TURN or self.round.doubled:
            return False
        if len(self.player_hand) != 2:
            return False
        if self.parked_hand.cards and not self.rules.double_after_split:
            return False
        return True

    @property
    def can_split(self) -> bool:
        """Check if splitting is allowed (one split per hand)."""
        if self.phase != GamePhase.PLAYER_TURN:
            return False
        return self.player_hand.is_pair and not self.parked_hand.cards

    def _deal_card_to_hand(self, hand: Hand, face_up: bool = True) -> Card:
        """Deal a card to a hand."""
        shuffles = self.shoe.shuffle_count
        card = self.shoe.draw(face_up=face_up)
        if self.shoe.shuffle_count != shuffles:
            self.events.emit_new(EventType.SHOE_SHUFFLED)

        hand.add_card(card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card),
            hand=self._hand_name(hand),
            hand_value=hand.value,
        )
        return card

    def _hand_name(self, hand: Hand) -> str:
        if hand is self.dealer_hand:
            return "dealer"
        if hand is self.parked_hand:
            return "parked"
        return "player"

    def _update_optimal_play(self) -> OptimalPlay:
        """Recompute the optimal play for the pending decision."""
        play = self.strategy.get_optimal_play(
            self.player_hand.info,
            self.dealer_upcard,
            can_double=self.can_double,
            can_split=self.can_split,
        )
        self.round.optimal_play = play
        return play

    def _reveal_dealer(self) -> None:
        """Turn the hole card over."""
        if self.dealer_hand.has_hidden_cards:
            self.dealer_hand.reveal_all()
            self.events.emit_new(
                EventType.DEALER_REVEALS,
                card=str(self.dealer_hand.cards[1]),
                hand_value=self.dealer_hand.value,
            )

    def _play_dealer(self) -> ActionOutcome:
        """Dealer plays their hand, then the round is settled."""
        self._reveal_dealer()

        # Dealer hits until 17+ (or soft 17 if H17 rules)
        while self._dealer_should_hit():
            self._deal_card_to_hand(self.dealer_hand)
            self.events.emit_new(EventType.DEALER_HITS, hand_value=self.dealer_hand.value)

        if self.dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer_hand.value)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)

        self.dealer_done()
        return self._resolve_round()

    def _dealer_should_hit(self) -> bool:
        """Determine if dealer should hit."""
        info = self.dealer_hand.info
        if info.total < 17:
            return True
        if info.total == 17 and info.is_soft and self.rules.dealer_hits_soft_17:
            return True
        return False

    def _resolve_round(self) -> HandComplete:
        """Settle the hand and compute the payout."""
        result = settle(self.player_hand.info, self.dealer_hand.info)
        payout = calculate_payout(
            result,
            self.round.bet,
            doubled=self.round.doubled,
            blackjack_payout=self.rules.blackjack_payout,
        )

        self.round.result = result
        self.round.last_payout = payout
        self.round.awaiting_decision = False

        logger.info(
            "Hand settled: %s (%s vs %s), payout %s",
            result.outcome,
            self.player_hand,
            self.dealer_hand,
            payout,
        )
        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=result.outcome.value,
            message=result.message,
            payout=float(payout),
        )
        return HandComplete(result=result, payout=payout)

    def _reject(self, action: str, reason: str) -> Rejected:
        """Refuse an action without touching the round."""
        logger.debug("Rejected %s in %s: %s", action, self.phase, reason)
        self.events.emit_new(
            EventType.INVALID_ACTION,
            action=action,
            message=reason,
            phase=self.phase.name,
        )
        return Rejected(action=action, reason=reason)

    def _log_phase(self) -> None:
        logger.debug("Round phase is now %s", self.phase)
