"""Fake implementations of core ports for testing.

- FakeReporterPort: Captured reports for assertion
- FakeSuite: A suite built from a plain declaration callable
- PassingSuite / FailingSuite / MisusingSuite: Importable suites for
  composition-root tests
"""

from .reporter import FakeReporterPort
from .suite import FailingSuite, FakeSuite, MisusingSuite, PassingSuite

__all__ = [
    "FailingSuite",
    "FakeReporterPort",
    "FakeSuite",
    "MisusingSuite",
    "PassingSuite",
]
