from datetime import date, timedelta

import pytest

from deutschme.domain.constants import DAY_MS
from deutschme.domain.curriculum import (
    Curriculum,
    FillBlank,
    GrammarRule,
    LevelContent,
    ListeningTask,
    MultipleChoice,
    VocabEntry,
    WordOrder,
)
from deutschme.domain.models import Level, SessionState
from deutschme.domain.ports import Clock, PersistResult, StateStore

# Fixed instant; tests only compare against offsets from it
NOW_MS = 1_792_324_800_000


class FrozenClock(Clock):
    """Clock that only moves when a test tells it to."""

    def __init__(self, now_ms: int = NOW_MS, today: date = date(2026, 10, 18)):
        self._now_ms = now_ms
        self._today = today

    def now_ms(self) -> int:
        return self._now_ms

    def today(self) -> date:
        return self._today

    def advance_days(self, days: int) -> None:
        self._now_ms += days * DAY_MS
        self._today += timedelta(days=days)


class MemoryStateStore(StateStore):
    """Keeps saved states in a list; can be told to fail."""

    def __init__(self, initial: SessionState | None = None, fail: bool = False):
        self.initial = initial
        self.fail = fail
        self.saved: list[SessionState] = []

    def load(self) -> SessionState | None:
        return self.initial

    def save(self, state: SessionState) -> PersistResult:
        if self.fail:
            return PersistResult(ok=False, error="disk full")
        self.saved.append(state)
        return PersistResult(ok=True)


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def memory_store():
    return MemoryStateStore()


@pytest.fixture
def a1_content():
    return LevelContent(
        level=Level.A1,
        title="A1: База",
        goals=("Приветствия",),
        vocab=(
            VocabEntry("Guten Morgen", "Доброе утро", "формальное"),
            VocabEntry("Danke", "Спасибо"),
            VocabEntry("Bitte", "Пожалуйста"),
            VocabEntry("Wasser", "вода"),
        ),
        grammar=(
            GrammarRule("Глагол sein", "ich bin, du bist", ("Ich bin Alex.", "Wir sind hier.")),
        ),
        listening=(
            ListeningTask(
                transcript="Guten Morgen! Mir geht es gut.",
                question="Как дела у говорящего?",
                options=("Хорошо", "Плохо", "Голоден"),
                correct_index=0,
            ),
        ),
        exam=(
            MultipleChoice("Как перевести: Danke?", ("Спасибо", "Пожалуйста", "Привет"), 0),
            FillBlank("Ich ___ Alex.", "bin"),
            WordOrder("Соберите: komme / ich / aus", ("komme", "ich", "aus"), "ich komme aus"),
        ),
    )


@pytest.fixture
def curriculum(a1_content):
    a2 = LevelContent(
        level=Level.A2,
        title="A2",
        vocab=(VocabEntry("Bahnhof", "вокзал"),),
    )
    return Curriculum(levels={Level.A1: a1_content, Level.A2: a2})


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config and state from the real home directory
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "DEUTSCHME_STATE_PATH",
        "DEUTSCHME_CURRICULUM_PATH",
        "DEUTSCHME_STORAGE_KEY",
        "DEUTSCHME_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("DEUTSCHME_SPEECH_ENABLED", "false")
    return home
