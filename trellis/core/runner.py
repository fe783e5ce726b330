"""Runs a list of suites in one tester and produces a single result."""

import logging
from collections.abc import Sequence

from .models import TestResult
from .ports import TestSuite
from .tester import Tester

logger = logging.getLogger(__name__)


class SuiteRunner:
    """Executes suites in order, each inside its own top-level describe().

    A fresh Tester is built for every run() call, so one runner can be run
    repeatedly without results leaking between runs.
    """

    def __init__(
        self,
        suites: Sequence[TestSuite],
        verbose: bool = False,
        indent_per_level: int = Tester.INDENT_PER_LEVEL,
        show_tracebacks: bool = True,
    ):
        self.suites = list(suites)
        self.verbose = verbose
        self.indent_per_level = indent_per_level
        self.show_tracebacks = show_tracebacks

    def run(self) -> TestResult:
        """Run every suite and close the run.

        Returns:
            The TestResult from Tester.finish().

        Raises:
            UsageError: If a suite misuses the declaration API.
        """
        t = Tester(
            verbose=self.verbose,
            indent_per_level=self.indent_per_level,
            show_tracebacks=self.show_tracebacks,
        )
        for suite in self.suites:
            logger.info(f"Running suite {suite.display_name}")
            t.describe(suite.display_name, lambda suite=suite: suite.run(t))

        result = t.finish()
        if result.passed:
            logger.info(f"All {result.total} unit(s) passed")
        else:
            logger.warning(
                f"{result.failure_count} of {result.total} unit(s) failed"
            )
        return result
