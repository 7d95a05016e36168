"""
Ports (interfaces) for the engine's side effects.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from .models import SessionState


@dataclass(frozen=True)
class PersistResult:
    """Outcome of a save. Callers may ignore it; the store never raises."""

    ok: bool
    error: str | None = None


class StateStore(ABC):
    """
    Port for loading and saving the learner's SessionState.

    Implementations:
        - JsonFileStateStore: one JSON document on disk.
    """

    @abstractmethod
    def load(self) -> SessionState | None:
        """
        Read the persisted aggregate.

        Returns:
            The stored SessionState, or None when nothing usable is stored
            (missing, malformed, or wrong shape).
        """
        pass

    @abstractmethod
    def save(self, state: SessionState) -> PersistResult:
        """
        Serialize and store the complete aggregate.

        Returns:
            PersistResult describing success or the swallowed failure.
        """
        pass


class Clock(ABC):
    """Port for wall-clock reads so scheduling math stays testable."""

    @abstractmethod
    def now_ms(self) -> int:
        """Current time as epoch milliseconds."""
        pass

    @abstractmethod
    def today(self) -> date:
        """Current local calendar date."""
        pass


class Speaker(ABC):
    """
    Port for text-to-speech. Fire-and-forget: no result, no errors.

    Implementations must cancel any in-flight utterance before starting a new one.
    """

    @abstractmethod
    def speak(self, text: str, language_tag: str) -> None:
        pass
