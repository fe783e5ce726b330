"""Core engine for the trellis test runner.

This package contains zero external dependencies: the Tester, Spy and
Expectation machinery plus the port interfaces that adapters implement.
"""

from .errors import (
    ExpectationFailure,
    InvalidContextError,
    NestedUnitError,
    NotASpyError,
    NotCallableError,
    TrellisError,
    UsageError,
)
from .expectation import Expectation, SpyMatcher
from .models import (
    DescriptionContext,
    SpyCall,
    SpyStrategy,
    TestResult,
    UnitStatus,
)
from .ports import ReporterPort, TestSuite
from .runner import SuiteRunner
from .spy import Spy
from .tester import Tester

__all__ = [
    "DescriptionContext",
    "Expectation",
    "ExpectationFailure",
    "InvalidContextError",
    "NestedUnitError",
    "NotASpyError",
    "NotCallableError",
    "ReporterPort",
    "Spy",
    "SpyCall",
    "SpyMatcher",
    "SpyStrategy",
    "SuiteRunner",
    "TestResult",
    "TestSuite",
    "Tester",
    "TrellisError",
    "UnitStatus",
    "UsageError",
]
