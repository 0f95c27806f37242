"""Decision accuracy tracking for the strategy trainer."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from core.game.engine import ActionCheck
from core.strategy.actions import Chart

MAX_SESSION_HISTORY = 30
TREND_WINDOW = 5


def _percent(correct: int, total: int) -> int:
    """Rounded percentage, 0 when nothing was recorded."""
    return round(correct / total * 100) if total > 0 else 0


@dataclass
class ChartTally:
    """Correct decisions out of total for one chart."""

    correct: int = 0
    total: int = 0

    @property
    def accuracy(self) -> int:
        return _percent(self.correct, self.total)


@dataclass
class MissedSituation:
    """A situation the player got wrong, and what they should have done."""

    count: int
    correct_action: str


@dataclass
class DecisionRecord:
    """One graded decision in the current session."""

    situation: str
    chart: str
    correct: bool
    player_action: str
    correct_action: str


@dataclass
class SessionSummary:
    """Archived totals of a finished session."""

    date: str
    correct: int
    incorrect: int
    hands: int

    @property
    def accuracy(self) -> float:
        total = self.correct + self.incorrect
        return self.correct / total if total > 0 else 0.0


@dataclass
class Trend:
    """Direction of recent accuracy."""

    trend: str  # "up", "down", "stable" or "neutral"
    message: str


@dataclass
class DecisionTracker:
    """
    Lifetime and per-session decision statistics.

    Purely in memory: the owner decides where (and whether) to store the
    dictionary produced by to_dict().
    """

    total_decisions: int = 0
    correct_decisions: int = 0
    incorrect_decisions: int = 0
    by_chart: dict[str, ChartTally] = field(
        default_factory=lambda: {chart.value: ChartTally() for chart in Chart}
    )
    missed_situations: dict[str, MissedSituation] = field(default_factory=dict)
    sessions: list[SessionSummary] = field(default_factory=list)
    session_decisions: list[DecisionRecord] = field(default_factory=list)
    last_played: str | None = None

    def record_decision(self, check: ActionCheck) -> None:
        """
        Record a graded decision.

        Checks made with no pending decision carry no situation and are ignored.
        """
        if check.situation is None or check.chart is None or check.optimal_action is None:
            return

        chart = check.chart.value
        correct_action = check.optimal_action.name

        self.total_decisions += 1
        self.by_chart[chart].total += 1
        if check.correct:
            self.correct_decisions += 1
            self.by_chart[chart].correct += 1
        else:
            self.incorrect_decisions += 1
            missed = self.missed_situations.setdefault(
                check.situation, MissedSituation(count=0, correct_action=correct_action)
            )
            missed.count += 1

        self.session_decisions.append(
            DecisionRecord(
                situation=check.situation,
                chart=chart,
                correct=check.correct,
                player_action=check.player_action.name,
                correct_action=correct_action,
            )
        )
        self.last_played = datetime.now().isoformat()

    def session_stats(self) -> dict[str, int]:
        """Counts and accuracy for the current session."""
        correct = sum(1 for d in self.session_decisions if d.correct)
        total = len(self.session_decisions)
        return {
            "correct": correct,
            "incorrect": total - correct,
            "total": total,
            "accuracy": _percent(correct, total),
        }

    def overall_stats(self) -> dict[str, Any]:
        """Lifetime accuracy, per-chart accuracy and the most missed situations."""
        missed = sorted(
            self.missed_situations.items(), key=lambda item: item[1].count, reverse=True
        )
        return {
            "total_decisions": self.total_decisions,
            "correct_decisions": self.correct_decisions,
            "incorrect_decisions": self.incorrect_decisions,
            "accuracy": _percent(
                self.correct_decisions, self.correct_decisions + self.incorrect_decisions
            ),
            "by_chart": {
                name: {"accuracy": tally.accuracy, "total": tally.total}
                for name, tally in self.by_chart.items()
            },
            "missed_situations": [
                {
                    "situation": situation,
                    "count": entry.count,
                    "correct_action": entry.correct_action,
                }
                for situation, entry in missed[:5]
            ],
            "last_played": self.last_played,
            "recent_sessions": [asdict(s) for s in self.sessions[-10:]],
        }

    def reset_session(self) -> None:
        """Archive the current session, if it has decisions, and start a new one."""
        if self.session_decisions:
            stats = self.session_stats()
            self.sessions.append(
                SessionSummary(
                    date=datetime.now().isoformat(),
                    correct=stats["correct"],
                    incorrect=stats["incorrect"],
                    hands=stats["total"],
                )
            )
            self.sessions = self.sessions[-MAX_SESSION_HISTORY:]
        self.session_decisions = []

    def reset_all(self) -> None:
        """Forget everything."""
        fresh = DecisionTracker()
        self.__dict__.update(fresh.__dict__)

    def improvement_trend(self) -> Trend:
        """Compare the last five sessions' accuracy with the five before them."""
        if len(self.sessions) < TREND_WINDOW:
            return Trend("neutral", "Play more sessions to see trends")

        recent = self.sessions[-TREND_WINDOW:]
        previous = self.sessions[-2 * TREND_WINDOW:-TREND_WINDOW]
        if len(previous) < TREND_WINDOW:
            return Trend("neutral", "Keep practicing!")

        recent_accuracy = sum(s.accuracy for s in recent) / len(recent)
        previous_accuracy = sum(s.accuracy for s in previous) / len(previous)
        diff = recent_accuracy - previous_accuracy

        if diff > 0.05:
            return Trend("up", f"Improving! +{round(diff * 100)}% from previous sessions")
        if diff < -0.05:
            return Trend(
                "down", f"Focus needed. {round(abs(diff) * 100)}% drop from previous sessions"
            )
        return Trend("stable", "Consistent performance!")

    def to_dict(self) -> dict[str, Any]:
        """Serialize for a session store."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DecisionTracker":
        """Restore from to_dict() output; missing keys fall back to defaults."""
        tracker = cls(
            total_decisions=data.get("total_decisions", 0),
            correct_decisions=data.get("correct_decisions", 0),
            incorrect_decisions=data.get("incorrect_decisions", 0),
            missed_situations={
                situation: MissedSituation(**entry)
                for situation, entry in data.get("missed_situations", {}).items()
            },
            sessions=[SessionSummary(**s) for s in data.get("sessions", [])],
            session_decisions=[DecisionRecord(**d) for d in data.get("session_decisions", [])],
            last_played=data.get("last_played"),
        )
        for name, tally in data.get("by_chart", {}).items():
            tracker.by_chart[name] = ChartTally(**tally)
        return tracker
