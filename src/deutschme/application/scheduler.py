"""
SM-2-light scheduler.

This is a pure computation module with no I/O. The only impurity is the
wall-clock read when the caller does not pass ``now``.
"""

from dataclasses import replace

from deutschme.application.utils.common import epoch_ms, round_half_up
from deutschme.domain.constants import (
    DAY_MS,
    FIRST_INTERVAL,
    MAX_QUALITY,
    MIN_EASE_FACTOR,
    MIN_QUALITY,
    PASSING_QUALITY,
    SECOND_INTERVAL,
)
from deutschme.domain.errors import InvalidInput
from deutschme.domain.models import ReviewRecord


def validate_quality(quality: int) -> int:
    """Reject grades outside the 0-4 scale instead of clamping them."""
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidInput(f"Quality must be an integer, got {quality!r}")
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidInput(
            f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {quality}"
        )
    return quality


def next_ease_factor(ease_factor: float, quality: int) -> float:
    """
    SM-2 ease update, floored at 1.3.

    EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
    """
    miss = 5 - quality
    return max(MIN_EASE_FACTOR, ease_factor + (0.1 - miss * (0.08 + miss * 0.02)))


def schedule(record: ReviewRecord, quality: int, now: int | None = None) -> ReviewRecord:
    """
    Apply one review to a card's record.

    Args:
        record: Current state of the card (use ``ReviewRecord()`` for a new card).
        quality: Learner grade, 0 (blackout) to 4 (perfect).
        now: Epoch milliseconds of the review. Defaults to the wall clock.

    Returns:
        A new ReviewRecord; ``record`` is left untouched.

    Raises:
        InvalidInput: If ``quality`` is not an integer in [0, 4].
    """
    validate_quality(quality)
    if now is None:
        now = epoch_ms()

    ease_factor = record.ease_factor
    if quality < PASSING_QUALITY:
        # relearn tomorrow
        repetitions = 0
        interval = FIRST_INTERVAL
    else:
        if record.repetitions == 0:
            interval = FIRST_INTERVAL
        elif record.repetitions == 1:
            interval = SECOND_INTERVAL
        else:
            interval = round_half_up(record.interval * record.ease_factor)
        ease_factor = next_ease_factor(record.ease_factor, quality)
        repetitions = record.repetitions + 1

    return replace(
        record,
        ease_factor=ease_factor,
        interval=interval,
        repetitions=repetitions,
        due_at=now + interval * DAY_MS,
    )
