"""
Progress ledger: XP totals, per-day activity, streaks and chart data.

Pure functions over SessionState; persistence is the caller's job.
"""

from collections.abc import Sequence
from dataclasses import replace
from datetime import date, timedelta

from deutschme.domain.constants import WEEKLY_XP_GOAL
from deutschme.domain.errors import InvalidInput
from deutschme.domain.models import ActivityEntry, ChartPoint, SessionState


def add_xp(state: SessionState, amount: int, today: date) -> SessionState:
    """
    Award ``amount`` XP for one learner action.

    Same-day awards merge into the last history entry; a new day appends.
    Not idempotent: two calls award twice.
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidInput(f"XP amount must be a non-negative integer, got {amount!r}")

    history = list(state.activity_history)
    last = history[-1] if history else None
    if last is None or last.date != today:
        history.append(ActivityEntry(date=today, xp=amount))
    else:
        history[-1] = replace(last, xp=last.xp + amount)

    return replace(state, total_xp=state.total_xp + amount, activity_history=tuple(history))


def current_streak(history: Sequence[ActivityEntry], today: date) -> int:
    """
    Number of consecutive active days ending today.

    A run that ended yesterday still counts; today is not over yet.
    """
    active = {entry.date for entry in history}
    day = today if today in active else today - timedelta(days=1)

    streak = 0
    while day in active:
        streak += 1
        day -= timedelta(days=1)
    return streak


def chart_series(history: Sequence[ActivityEntry], today: date) -> list[ChartPoint]:
    """XP per day labelled MM-DD; an empty history charts a single zero for today."""
    entries = history or [ActivityEntry(date=today, xp=0)]
    return [ChartPoint(label=e.date.strftime("%m-%d"), xp=e.xp) for e in entries]


def weekly_goal_progress(total_xp: int, goal: int = WEEKLY_XP_GOAL) -> float:
    """Percent of the current goal block filled, 0-100."""
    if goal <= 0:
        raise InvalidInput(f"XP goal must be positive, got {goal}")
    return min(100.0, (total_xp % goal) / goal * 100)
