"""
Curriculum and exam content types.

Content is read-only reference data: the engine never mutates it.
Exam and quiz items form a closed set of variants, each able to judge
a submitted answer on its own.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .models import Level


@dataclass(frozen=True)
class VocabEntry:
    front: str  # German
    back: str  # translation
    hint: str | None = None


@dataclass(frozen=True)
class GrammarRule:
    title: str
    rule: str
    examples: tuple[str, ...] = ()


@dataclass(frozen=True)
class ListeningTask:
    transcript: str
    question: str
    options: tuple[str, ...]
    correct_index: int


@dataclass(frozen=True)
class MultipleChoice:
    prompt: str
    options: tuple[str, ...]
    correct_index: int

    def is_correct(self, answer: Any) -> bool:
        # bool is an int subclass; True must not count as option 1
        if isinstance(answer, bool) or not isinstance(answer, int):
            return False
        return answer == self.correct_index


@dataclass(frozen=True)
class FillBlank:
    prompt: str
    expected: str

    def is_correct(self, answer: Any) -> bool:
        if not isinstance(answer, str):
            return False
        return answer.strip().lower() == self.expected


@dataclass(frozen=True)
class WordOrder:
    prompt: str
    parts: tuple[str, ...]
    expected: str

    def is_correct(self, answer: Any) -> bool:
        if isinstance(answer, str):
            text = answer
        elif isinstance(answer, Sequence) and all(isinstance(p, str) for p in answer):
            text = " ".join(answer)
        else:
            return False
        return text.strip().lower() == self.expected


ExamItem = MultipleChoice | FillBlank | WordOrder


@dataclass(frozen=True)
class LevelContent:
    """Everything the curriculum holds for one level."""

    level: Level
    title: str
    goals: tuple[str, ...] = ()
    vocab: tuple[VocabEntry, ...] = ()
    grammar: tuple[GrammarRule, ...] = ()
    listening: tuple[ListeningTask, ...] = ()
    exam: tuple[ExamItem, ...] = ()

    def first_word_order(self) -> WordOrder | None:
        return next((item for item in self.exam if isinstance(item, WordOrder)), None)


@dataclass(frozen=True)
class Curriculum:
    levels: dict[Level, LevelContent] = field(default_factory=dict)

    def for_level(self, level: Level) -> LevelContent:
        try:
            return self.levels[level]
        except KeyError:
            # An empty level still lets the engine run; nothing is due, no exam.
            return LevelContent(level=level, title=level.value)
