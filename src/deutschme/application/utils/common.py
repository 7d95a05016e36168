import math
import time


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives (2.5 -> 3)."""
    return math.floor(value + 0.5)


def epoch_ms() -> int:
    return int(time.time() * 1000)
