"""Fake ReporterPort implementation for testing."""

from trellis.core.models import TestResult
from trellis.core.ports import ReporterPort


class FakeReporterPort(ReporterPort):
    """In-memory reporter for testing.

    Captures every report sent through this port for test assertions.
    """

    def __init__(self):
        """Initialize with empty report history."""
        self.reports: list[tuple[TestResult, str | None]] = []
        self.should_fail: bool = False
        self.fail_message: str = "Reporter failed"

    def report(self, result: TestResult, title: str | None = None) -> None:
        if self.should_fail:
            raise RuntimeError(self.fail_message)
        self.reports.append((result, title))

    def get_last_report(self) -> TestResult | None:
        """Get the most recent result, if any."""
        if self.reports:
            return self.reports[-1][0]
        return None

    def get_report_count(self) -> int:
        return len(self.reports)

    def set_should_fail(self, should_fail: bool, message: str = "Reporter failed") -> None:
        """Configure the reporter to fail on the next report."""
        self.should_fail = should_fail
        self.fail_message = message

    def reset(self) -> None:
        """Reset all collected reports and state."""
        self.reports.clear()
        self.should_fail = False
        self.fail_message = "Reporter failed"
