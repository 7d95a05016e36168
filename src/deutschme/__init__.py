"""deutschme: self-study German with spaced repetition."""

from deutschme.consts import VERSION

__version__ = VERSION
