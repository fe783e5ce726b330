"""Logging reporter adapter.

Implements ReporterPort by emitting each report line through a logger,
for environments where a log console is the only display.
"""

import logging

from trellis.core.models import TestResult
from trellis.core.ports import ReporterPort

from .stdout import format_totals

logger = logging.getLogger(__name__)


class LoggingReporter(ReporterPort):
    """Writes the report line by line at INFO level.

    The summary line goes out at WARNING when the run had failures.
    """

    def __init__(self, target: logging.Logger | None = None):
        self.logger = target or logger

    def report(self, result: TestResult, title: str | None = None) -> None:
        if title:
            self.logger.info(title)
        for line in result.output:
            self.logger.info(line)
        level = logging.INFO if result.passed else logging.WARNING
        self.logger.log(level, format_totals(result))
