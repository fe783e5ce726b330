"""Stdout reporter adapter.

Implements ReporterPort by printing the report to a text stream with a
short summary footer.
"""

import sys
from typing import TextIO

from trellis.core.models import TestResult
from trellis.core.ports import ReporterPort


class StdoutReporter(ReporterPort):
    """Prints the indented report followed by a summary."""

    def __init__(self, stream: TextIO | None = None):
        """Initialize stdout reporter.

        Args:
            stream: Where to write. Defaults to sys.stdout at report time,
                so captured or redirected stdout is honored.
        """
        self.stream = stream

    def report(self, result: TestResult, title: str | None = None) -> None:
        """Write the report for a finished run."""
        stream = self.stream or sys.stdout
        if title:
            print(self._format_header(title), file=stream)
        for line in result.output:
            print(line, file=stream)
        print(self._format_summary(result), file=stream)

    @staticmethod
    def _format_header(title: str) -> str:
        return "\n".join(["=" * 80, title, "=" * 80])

    @staticmethod
    def _format_summary(result: TestResult) -> str:
        """Format the footer with pass/fail totals."""
        lines = [
            "",
            "-" * 80,
            format_totals(result),
        ]
        if not result.passed:
            lines.append("FAILED")
        return "\n".join(lines)


def format_totals(result: TestResult) -> str:
    """One-line totals shared by the reporters."""
    return f"{result.success_count} passed, {result.failure_count} failed"
