"""Tests for SuiteRunner."""

import pytest

from trellis.core.errors import NestedUnitError
from trellis.core.runner import SuiteRunner
from trellis.core.tester import Tester
from trellis.tests.fakes import FailingSuite, FakeSuite, MisusingSuite, PassingSuite


def test_runs_suites_in_order() -> None:
    order: list[str] = []
    first = FakeSuite("first", lambda t: order.append("first"))
    second = FakeSuite("second", lambda t: order.append("second"))

    SuiteRunner([first, second]).run()

    assert order == ["first", "second"]


def test_each_suite_gets_its_own_scope() -> None:
    depths: list[int] = []
    suite = FakeSuite("scoped", lambda t: depths.append(t.depth))

    SuiteRunner([suite]).run()

    assert depths == [1]


def test_aggregates_counts_across_suites() -> None:
    result = SuiteRunner([PassingSuite(), FailingSuite()]).run()

    assert result.success_count == 3
    assert result.failure_count == 1
    assert "  FailingSuite" in result.output
    assert "  PassingSuite" not in result.output


def test_verbose_lists_suite_names() -> None:
    result = SuiteRunner([PassingSuite()], verbose=True).run()

    assert "  PassingSuite" in result.output
    assert "    arithmetic" in result.output


def test_fresh_tester_per_run() -> None:
    suite = FakeSuite("twice", lambda t: t.it("unit", lambda: None))
    runner = SuiteRunner([suite])

    first = runner.run()
    second = runner.run()

    assert first.success_count == second.success_count == 1
    assert suite.run_count == 2
    assert suite.testers[0] is not suite.testers[1]
    assert all(isinstance(t, Tester) for t in suite.testers)


def test_usage_error_aborts_run() -> None:
    with pytest.raises(NestedUnitError):
        SuiteRunner([MisusingSuite()]).run()


def test_display_name_falls_back_to_class_name() -> None:
    suite = FakeSuite("", lambda t: None)
    assert suite.display_name == "FakeSuite"
