"""Assertions over a single captured value.

Expectation is the fluent object handed out by Tester.expect(). Every
matcher either returns quietly or raises ExpectationFailure with an
expected-vs-actual message; Tester.it is the only place that catches it.
"""

import dataclasses
import math
from collections.abc import Callable, Mapping, Set
from typing import Any

from .errors import ExpectationFailure
from .models import SpyCall
from .spy import Spy

# Values compared by value in to_be(); everything else needs identity.
_PRIMITIVES = (bool, int, float, complex, str, bytes, type(None))


class SpyMatcher:
    """A predicate standing in for a literal argument in call assertions.

    Example::

        t.expect(sender.send).to_have_been_called_with(
            t.matcher(lambda body: "Balance" in body)
        )
    """

    def __init__(self, predicate: Callable[[Any], bool]):
        self.predicate = predicate

    def matches(self, value: Any) -> bool:
        return bool(self.predicate(value))

    def __repr__(self) -> str:
        name = getattr(self.predicate, "__name__", type(self.predicate).__name__)
        return f"<matcher {name}>"


def find_difference(actual: Any, expected: Any, path: str = "") -> str | None:
    """Describe the first place where two values differ structurally.

    Composite values (mappings, lists, tuples, sets, dataclasses and plain
    objects without a custom ``__eq__``) must have the same type and are
    compared member by member. Scalars are compared with ``==``; two NaNs
    count as equal.

    Returns:
        None when the values are deeply equal, otherwise a one-line
        description naming the path of the differing member.
    """
    return _difference(actual, expected, path, set())


def _difference(
    actual: Any, expected: Any, path: str, seen: set[tuple[int, int]]
) -> str | None:
    if actual is expected or (_is_nan(actual) and _is_nan(expected)):
        return None

    where = path or "value"
    if _is_composite(actual) or _is_composite(expected):
        if type(actual) is not type(expected):
            return (
                f"{where}: expected {type(expected).__name__} {expected!r}, "
                f"got {type(actual).__name__} {actual!r}"
            )
        pair = (id(actual), id(expected))
        if pair in seen:
            return None
        seen.add(pair)
        return _composite_difference(actual, expected, path, seen)

    try:
        equal = bool(actual == expected)
    except Exception:  # a broken __eq__ counts as unequal
        equal = False
    if equal:
        return None
    return f"{where}: expected {expected!r}, got {actual!r}"


def _composite_difference(
    actual: Any, expected: Any, path: str, seen: set[tuple[int, int]]
) -> str | None:
    where = path or "value"

    if isinstance(expected, Mapping):
        missing = [key for key in expected if key not in actual]
        if missing:
            return f"{where}: missing key {missing[0]!r}"
        extra = [key for key in actual if key not in expected]
        if extra:
            return f"{where}: unexpected key {extra[0]!r}"
        for key in expected:
            diff = _difference(actual[key], expected[key], f"{path}[{key!r}]", seen)
            if diff:
                return diff
        return None

    if isinstance(expected, (list, tuple)):
        for index, (a, e) in enumerate(zip(actual, expected)):
            diff = _difference(a, e, f"{path}[{index}]", seen)
            if diff:
                return diff
        if len(actual) != len(expected):
            return f"{where}: expected length {len(expected)}, got {len(actual)}"
        return None

    if isinstance(expected, Set):
        if actual == expected:
            return None
        missing = sorted(map(repr, expected - actual))
        extra = sorted(map(repr, actual - expected))
        details = []
        if missing:
            details.append(f"missing {', '.join(missing)}")
        if extra:
            details.append(f"unexpected {', '.join(extra)}")
        return f"{where}: {'; '.join(details)}"

    if isinstance(expected, BaseException):
        diff = _difference(actual.args, expected.args, f"{path}.args", seen)
        if diff:
            return diff

    if dataclasses.is_dataclass(expected):
        members = [f.name for f in dataclasses.fields(expected)]
        actual_members = {name: getattr(actual, name) for name in members}
        expected_members = {name: getattr(expected, name) for name in members}
    else:
        actual_members = vars(actual)
        expected_members = vars(expected)
        if actual_members.keys() != expected_members.keys():
            names = sorted(actual_members.keys() ^ expected_members.keys())
            return f"{where}: attribute sets differ ({', '.join(names)})"

    for name in expected_members:
        diff = _difference(
            actual_members[name], expected_members[name], f"{path}.{name}", seen
        )
        if diff:
            return diff
    return None


def _is_composite(value: Any) -> bool:
    if isinstance(value, (Mapping, list, tuple, Set)):
        return True
    if isinstance(value, type):
        return False
    if dataclasses.is_dataclass(value):
        return True
    # Plain objects compare by attributes unless they define equality.
    return hasattr(value, "__dict__") and type(value).__eq__ is object.__eq__ and not callable(value)


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _argument_matches(actual: Any, expected: Any) -> bool:
    if isinstance(expected, SpyMatcher):
        return expected.matches(actual)
    return find_difference(actual, expected) is None


def _call_matches(call: SpyCall, args: tuple[Any, ...], kwargs: dict[str, Any]) -> bool:
    if len(call.args) != len(args) or call.kwargs.keys() != kwargs.keys():
        return False
    if not all(_argument_matches(a, e) for a, e in zip(call.args, args)):
        return False
    return all(_argument_matches(call.kwargs[key], kwargs[key]) for key in kwargs)


class Expectation:
    """Single-use assertion wrapper over one actual value.

    ``expectation.not_`` returns a negated copy, so
    ``t.expect(x).not_.to_equal(y)`` fails exactly when ``to_equal`` passes.
    """

    def __init__(self, actual: Any, negated: bool = False):
        self.actual = actual
        self.negated = negated

    @property
    def not_(self) -> "Expectation":
        return Expectation(self.actual, negated=not self.negated)

    def to_equal(self, expected: Any) -> None:
        """Deep structural equality."""
        diff = find_difference(self.actual, expected)
        message = f"Expected {self.actual!r} {self._to()}equal {expected!r}."
        if diff and not self.negated:
            message += f"\n{diff}"
        self._conclude(diff is None, message, expected)

    def to_be(self, expected: Any) -> None:
        """Identity, or value equality for scalars of the same type."""
        same = self.actual is expected
        if not same and type(self.actual) is type(expected) and isinstance(expected, _PRIMITIVES):
            same = self.actual == expected or (_is_nan(self.actual) and _is_nan(expected))
        self._conclude(
            same, f"Expected {self.actual!r} {self._to()}be {expected!r}.", expected
        )

    def to_have_been_called(self) -> None:
        spy = _require_spy(self.actual)
        self._conclude(
            spy.call_count > 0,
            f"Expected spy {spy.method_name} {self._to()}have been called.",
            None,
        )

    def to_have_been_called_times(self, expected: int) -> None:
        spy = _require_spy(self.actual)
        self._conclude(
            spy.call_count == expected,
            f"Expected spy {spy.method_name} {self._to()}have been called "
            f"{_times(expected)}. It was called {_times(spy.call_count)}.",
            expected,
        )

    def to_have_been_called_with(self, *args: Any, **kwargs: Any) -> None:
        """Some recorded call matches the arguments element-wise.

        Any argument may be a SpyMatcher, whose predicate replaces the
        equality check for that position.
        """
        spy = _require_spy(self.actual)
        wanted = SpyCall(args=args, kwargs=kwargs)
        matched = any(_call_matches(call, args, kwargs) for call in spy.calls)
        if spy.calls:
            actual_calls = ", ".join(repr(call) for call in spy.calls)
            detail = f"Actual calls were: {actual_calls}."
        else:
            detail = "It was never called."
        self._conclude(
            matched,
            f"Expected spy {spy.method_name} {self._to()}have been called with "
            f"{wanted!r}. {detail}",
            wanted,
        )

    def _to(self) -> str:
        return "not to " if self.negated else "to "

    def _conclude(self, matched: bool, message: str, expected: Any) -> None:
        if matched == self.negated:
            raise ExpectationFailure(message, actual=self.actual, expected=expected)


def _times(count: int) -> str:
    return "1 time" if count == 1 else f"{count} times"


def _require_spy(value: Any) -> Spy:
    # TypeError rather than NotASpyError: Tester.it counts it as a failed unit.
    if isinstance(value, Spy) or Spy.is_spy(value):
        return Spy.assert_spy(value)
    raise TypeError(f"Expected a spy, got {value!r}")
