"""
Domain models for learner progress.

These are pure data structures with no I/O or external dependencies.
Every model is frozen: updates go through ``dataclasses.replace`` and
produce a new object.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from .constants import DEFAULT_DISPLAY_NAME, DEFAULT_EASE_FACTOR
from .errors import InvalidInput


class Level(str, Enum):
    """Proficiency levels, in curriculum order."""

    A1 = "A1"
    A2 = "A2"
    B1 = "B1"

    @classmethod
    def parse(cls, value: "str | Level") -> "Level":
        if isinstance(value, Level):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError as e:
            allowed = ", ".join(lvl.value for lvl in cls)
            raise InvalidInput(f"Unknown level {value!r} (expected one of: {allowed})") from e


@dataclass(frozen=True)
class CardIdentity:
    """
    Key of one vocabulary card: its level plus the front (German) text.

    The storage form ``"A1|Danke"`` is what ends up in the persisted document.
    """

    level: Level
    front: str

    @property
    def key(self) -> str:
        return f"{self.level.value}|{self.front}"

    @classmethod
    def from_key(cls, key: str) -> "CardIdentity":
        level, sep, front = key.partition("|")
        if not sep:
            raise InvalidInput(f"Malformed card key: {key!r}")
        return cls(level=Level.parse(level), front=front)


@dataclass(frozen=True)
class ReviewRecord:
    """
    SM-2-light state for a single card.

    Attributes:
        ease_factor: Interval growth multiplier, never below 1.3.
        interval: Days until the card is due again.
        repetitions: Consecutive successful reviews; reset on failure.
        due_at: Epoch milliseconds when the card becomes due (None until first scheduled).
    """

    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0
    repetitions: int = 0
    due_at: int | None = None


@dataclass(frozen=True)
class ActivityEntry:
    """XP earned on one calendar day."""

    date: date
    xp: int


@dataclass(frozen=True)
class SessionState:
    """
    The full persisted aggregate for one learner.

    ``review_store`` and ``exam_results`` are treated as read-only; every
    update builds new mappings.
    """

    current_level: Level = Level.A1
    total_xp: int = 0
    review_store: dict[CardIdentity, ReviewRecord] = field(default_factory=dict)
    activity_history: tuple[ActivityEntry, ...] = ()
    exam_results: dict[Level, int] = field(default_factory=dict)
    display_name: str = DEFAULT_DISPLAY_NAME
    dark_mode: bool = False


@dataclass(frozen=True)
class ChartPoint:
    """One point of the XP-per-day chart."""

    label: str  # MM-DD
    xp: int


@dataclass(frozen=True)
class ProgressSummary:
    """Dashboard figures derived from a SessionState."""

    level: Level
    display_name: str
    total_xp: int
    streak: int
    due_count: int
    exam_percent: int | None
    weekly_goal_percent: float
