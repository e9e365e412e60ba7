"""
Engine error kinds.

All errors raised by the circuit engine derive from CircuitError so that
hosts can catch them in one place.  Each also subclasses the closest
builtin so plain ``except ValueError`` style handlers keep working.
"""


class CircuitError(Exception):
    """Base class for circuit engine errors."""

    pass


class OutOfRangeWeek(CircuitError, ValueError):
    """Raised when a week outside the program's phase table is looked up."""

    def __init__(self, week: int, min_week: int, max_week: int):
        self.week = week
        super().__init__(f"Week {week} is outside the program ({min_week}-{max_week})")


class UnknownExercise(CircuitError, LookupError):
    """Raised when an exercise key is absent from the catalog."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unknown exercise '{key}'")


class InvalidIndex(CircuitError, IndexError):
    """Raised when a step or round index falls outside the current bounds."""

    pass


class CatalogError(CircuitError):
    """Raised when the bundled program data is malformed."""

    pass
