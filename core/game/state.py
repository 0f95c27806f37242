"""Round phase and trainer mode enumerations."""

from enum import Enum, auto


class GamePhase(Enum):
    """
    Round state machine phases.

    Flow: BETTING → PLAYER_TURN → DEALER_TURN → COMPLETE, strictly forward.
    A round returns to BETTING only when the next hand is dealt.
    """

    # Waiting for the next deal
    BETTING = auto()

    # Player decisions
    PLAYER_TURN = auto()

    # Dealer plays
    DEALER_TURN = auto()

    # Hand settled
    COMPLETE = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid phase transitions
VALID_TRANSITIONS: dict[GamePhase, list[GamePhase]] = {
    GamePhase.BETTING: [GamePhase.PLAYER_TURN, GamePhase.COMPLETE],  # COMPLETE on a natural
    GamePhase.PLAYER_TURN: [GamePhase.DEALER_TURN, GamePhase.COMPLETE],  # COMPLETE on a bust
    GamePhase.DEALER_TURN: [GamePhase.COMPLETE],
    GamePhase.COMPLETE: [GamePhase.BETTING],
}


def is_valid_transition(from_phase: GamePhase, to_phase: GamePhase) -> bool:
    """
    Check if a phase transition is valid.

    Args:
        from_phase: Current phase
        to_phase: Desired phase

    Returns:
        True if the transition is allowed
    """
    return to_phase in VALID_TRANSITIONS.get(from_phase, [])


class TrainerMode(Enum):
    """
    How much the trainer tells the player.

    In learning mode the recommended play is shown with each decision; in
    test mode it stays hidden until the player has acted.
    """

    LEARNING = "learning"
    TEST = "test"

    @property
    def reveals_optimal_play(self) -> bool:
        return self is TrainerMode.LEARNING
