"""Port interfaces for the trellis test engine.

These abstract base classes define the boundaries between the core
engine and the code around it. Implementations live in the adapters/
package (reporters) or in user code (suites).

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - ReporterPort: Deliver a finished run's report somewhere

2. **Driving Ports** (user code plugs into the core)
   - TestSuite: A named group of declarations run against a Tester
"""

from abc import ABC, abstractmethod

from .models import TestResult
from .tester import Tester


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class ReporterPort(ABC):
    """Port for presenting a finished run.

    Implementations must print the report lines unchanged (they are
    already indented) and may add a summary of their own.
    """

    @abstractmethod
    def report(self, result: TestResult, title: str | None = None) -> None:
        """Present the result of one run.

        Args:
            result: Counters and indented report lines from Tester.finish().
            title: Optional heading for the report (e.g. the run's name).
        """


# ============================================================================
# DRIVING PORTS (User code plugs into the core)
# ============================================================================


class TestSuite(ABC):
    """A named collection of scopes and units.

    The runner wraps each suite in its own describe(), so ``run`` should
    only declare: hooks, spies, nested describe() calls and it() units on
    the tester it is given.

    Example::

        class MathSuite(TestSuite):
            name = "MathSuite"

            def run(self, t: Tester) -> None:
                t.it("adds", lambda: t.expect(1 + 1).to_equal(2))
    """

    __test__ = False  # not a pytest test class

    name: str = ""

    @abstractmethod
    def run(self, t: Tester) -> None:
        """Declare this suite's contents on ``t``."""

    @property
    def display_name(self) -> str:
        return self.name or type(self).__name__
