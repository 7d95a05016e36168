class InvalidInput(ValueError):
    """Raised when a caller passes a value outside an operation's contract."""


class CurriculumError(ValueError):
    """Raised when curriculum data cannot be parsed into levels and items."""
