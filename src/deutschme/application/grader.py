"""Scoring of quiz and exam answers against an answer key."""

from collections.abc import Mapping, Sequence
from typing import Any

from deutschme.application.utils.common import round_half_up
from deutschme.domain.curriculum import ExamItem


def is_correct(item: ExamItem, answer: Any) -> bool:
    return item.is_correct(answer)


def count_correct(pool: Sequence[ExamItem], answers: Mapping[int, Any]) -> int:
    """Missing answers count as wrong."""
    return sum(1 for i, item in enumerate(pool) if i in answers and item.is_correct(answers[i]))


def grade(pool: Sequence[ExamItem], answers: Mapping[int, Any]) -> int:
    """
    Percentage of correct answers, rounded half up.

    Args:
        pool: Ordered exam or quiz items.
        answers: Submitted answers keyed by item index.

    Returns:
        0-100. An empty pool scores 0.
    """
    if not pool:
        return 0
    return round_half_up(count_correct(pool, answers) / len(pool) * 100)
