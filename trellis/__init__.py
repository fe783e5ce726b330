"""trellis: a nested describe/it test engine with reversible spies."""

from .core import (
    Expectation,
    ExpectationFailure,
    Spy,
    SpyMatcher,
    SuiteRunner,
    TestResult,
    TestSuite,
    Tester,
    UsageError,
)

__version__ = "0.1.0"

__all__ = [
    "Expectation",
    "ExpectationFailure",
    "Spy",
    "SpyMatcher",
    "SuiteRunner",
    "TestResult",
    "TestSuite",
    "Tester",
    "UsageError",
    "__version__",
]
