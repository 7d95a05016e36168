from datetime import date

from deutschme.application.utils.common import epoch_ms
from deutschme.domain.ports import Clock


class SystemClock(Clock):
    """Wall clock; ``today`` is the local calendar date."""

    def now_ms(self) -> int:
        return epoch_ms()

    def today(self) -> date:
        return date.today()
