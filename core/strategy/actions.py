"""Player actions and strategy chart identifiers."""

from enum import Enum


class Action(Enum):
    """Possible player actions, valued by their chart code."""

    HIT = "H"
    STAND = "S"
    DOUBLE = "D"
    SPLIT = "P"

    # Chart-only conditional action, resolved before it reaches the player
    DOUBLE_OR_STAND = "Ds"  # Double if allowed, else stand

    def __str__(self) -> str:
        return self.name.replace("_", "/")

    @property
    def code(self) -> str:
        """Short chart code (H, S, D, P, Ds)."""
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "Action":
        """Parse a player action name such as 'hit' or 'Double'."""
        names = {
            "hit": cls.HIT,
            "stand": cls.STAND,
            "double": cls.DOUBLE,
            "split": cls.SPLIT,
        }
        try:
            return names[name.strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown action: {name}") from None


class Chart(Enum):
    """Strategy chart a decision was read from."""

    HARD = "hard"
    SOFT = "soft"
    PAIRS = "pairs"

    def __str__(self) -> str:
        return self.value
