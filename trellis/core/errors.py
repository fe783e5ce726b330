"""Exception hierarchy for the trellis test engine.

Two families with different fates:

- UsageError and its subclasses signal a defect in the test suite itself
  (mis-scoped declarations, nested units, spying on non-callables). The
  engine never catches them; they abort the run.
- ExpectationFailure signals a failed assertion. It is recovered by
  Tester.it, counted as a failure, and the run continues.
"""

from typing import Any


class TrellisError(Exception):
    """Base exception for all trellis errors."""

    pass


class UsageError(TrellisError):
    """The test suite called the engine API in an illegal way."""

    pass


class InvalidContextError(UsageError):
    """A declaration was made while a unit body was executing."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Illegal context for {operation}()")


class NestedUnitError(UsageError):
    """it() was called from inside another unit."""

    def __init__(self) -> None:
        super().__init__("Cannot nest it() units. Use a describe() for the outer.")


class NotCallableError(UsageError):
    """spy_on() target is missing or not callable."""

    def __init__(self, target: Any, method_name: str):
        self.target = target
        self.method_name = method_name
        owner = target.__name__ if isinstance(target, type) else type(target).__name__
        super().__init__(f"Can only spy on functions: {owner}.{method_name} is not callable")


class NotASpyError(UsageError):
    """Spy.assert_spy() was given something that is not a spy."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Expected a spy, got {value!r}")


class ExpectationFailure(AssertionError):
    """A matcher did not match.

    Carries the human-readable expected-vs-actual message plus the raw
    values for callers that want to render them differently.
    """

    def __init__(self, message: str, actual: Any = None, expected: Any = None):
        super().__init__(message)
        self.message = message
        self.actual = actual
        self.expected = expected


__all__ = [
    "ExpectationFailure",
    "InvalidContextError",
    "NestedUnitError",
    "NotASpyError",
    "NotCallableError",
    "TrellisError",
    "UsageError",
]
