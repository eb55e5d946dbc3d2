"""Exceptions raised by the cycle engine."""


class CycleEngineError(Exception):
    """Base class for cycle engine errors."""


class NoActiveProfileError(CycleEngineError, LookupError):
    """A mutation was requested but no profile has been created yet."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"No active profile: cannot {operation}")
        self.operation = operation


class InvalidCycleLengthError(CycleEngineError, ValueError):
    """A manually entered cycle length is outside the accepted band."""

    def __init__(self, length: int, min_length: int, max_length: int) -> None:
        super().__init__(
            f"Cycle length {length} is outside the accepted range "
            f"[{min_length}, {max_length}]"
        )
        self.length = length
