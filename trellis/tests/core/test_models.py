"""Tests for engine data models."""

import pytest

from trellis.core.models import DescriptionContext, SpyCall, TestResult, UnitStatus


# ============================================================================
# DescriptionContext
# ============================================================================


def test_new_context_has_pending_before_alls() -> None:
    context = DescriptionContext(description="group")
    assert context.before_alls_pending
    assert context.units_run == 0


def test_before_alls_not_pending_once_called() -> None:
    context = DescriptionContext()
    context.before_alls_called = True
    assert not context.before_alls_pending


def test_before_alls_not_pending_once_a_unit_ran() -> None:
    context = DescriptionContext()
    context.record_failure()
    assert not context.before_alls_pending


def test_absorb_folds_counters() -> None:
    parent = DescriptionContext()
    parent.record_success()
    child = DescriptionContext(description="child")
    child.record_success()
    child.record_failure()

    parent.absorb(child)

    assert parent.success_count == 2
    assert parent.failure_count == 1


def test_snapshot_is_detached_from_context() -> None:
    context = DescriptionContext()
    context.output.append("  line")
    result = context.snapshot()

    context.output.append("  later")

    assert result.output == ("  line",)


# ============================================================================
# TestResult
# ============================================================================


def test_result_totals_and_exit_code() -> None:
    result = TestResult(success_count=3, failure_count=1, output=("a", "b"))

    assert result.total == 4
    assert not result.passed
    assert result.exit_code == 1
    assert result.render() == "a\nb"


def test_result_rejects_negative_counts() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        TestResult(success_count=-1, failure_count=0, output=())


# ============================================================================
# SpyCall / UnitStatus
# ============================================================================


def test_spy_call_kwargs_are_read_only() -> None:
    call = SpyCall(args=(1,), kwargs={"key": "v"})

    with pytest.raises(TypeError):
        call.kwargs["key"] = "other"  # type: ignore[index]


def test_spy_call_repr() -> None:
    assert repr(SpyCall(args=(1, "a"), kwargs={"flag": True})) == "(1, 'a', flag=True)"
    assert repr(SpyCall(args=())) == "()"


def test_unit_status_glyphs_are_distinct() -> None:
    glyphs = {status.value for status in UnitStatus}
    assert len(glyphs) == 3
