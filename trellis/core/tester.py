"""Nested describe/it execution engine.

A Tester runs declarations as they are made: describe() executes its body
immediately, it() executes its unit immediately. The context stack holds
one DescriptionContext per open describe() plus the implicit root, which
finish() closes.

Lifecycle ordering:
- before_all hooks of a scope fire once, lazily, before the first unit or
  nested describe() in that scope, or before its after_all hooks if the
  scope turned out to be empty.
- before_each and after_each hooks run root to leaf around every unit.
- Spy call history is cleared after every unit; spies themselves are
  reset last-installed-first when their scope closes.
"""

import logging
import time
import traceback
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .errors import InvalidContextError, NestedUnitError, UsageError
from .expectation import Expectation, SpyMatcher
from .models import DescriptionContext, Hook, TestResult, UnitStatus
from .spy import Spy

if TYPE_CHECKING:
    from trellis.config import Settings

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Exception during test execution. No error details."


class Tester:
    """Declares and runs one tree of scopes and units.

    Test code receives the instance explicitly (``suite.run(t)``); there is
    no module-level default tester. A run is ``Tester(...)``, any number of
    describe()/it() calls, then exactly one finish().
    """

    __test__ = False  # not a pytest test class

    INDENT_PER_LEVEL = 2

    def __init__(
        self,
        verbose: bool = False,
        indent_per_level: int = INDENT_PER_LEVEL,
        show_tracebacks: bool = True,
    ):
        """Initialize a tester with an empty root scope.

        Args:
            verbose: If True, report every unit and scope, not only failures.
            indent_per_level: Spaces added per describe() nesting level.
            show_tracebacks: If False, diagnostics are a single
                ``ExceptionType: message`` line instead of a traceback.
        """
        if indent_per_level <= 0:
            raise ValueError(f"indent_per_level must be positive, got {indent_per_level}")
        self.verbose = verbose
        self.indent_per_level = indent_per_level
        self.show_tracebacks = show_tracebacks

        self._indentation = indent_per_level
        # The root scope allows hooks and units outside any describe().
        self._context_stack: list[DescriptionContext] = [DescriptionContext()]
        self._inside_unit = False
        self._finished = False

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Tester":
        return cls(
            verbose=settings.verbose,
            indent_per_level=settings.indent_per_level,
            show_tracebacks=settings.show_tracebacks,
        )

    @property
    def current_context(self) -> DescriptionContext:
        return self._context_stack[-1]

    @property
    def depth(self) -> int:
        """Number of open describe() scopes."""
        return len(self._context_stack) - 1

    @property
    def inside_unit(self) -> bool:
        return self._inside_unit

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def describe(self, description: str, body: Callable[[], None]) -> None:
        """Open a scope, run ``body`` in it, then close and fold it.

        The scope's counters always fold into the parent. Its report lines
        are kept only when the tester is verbose or the scope had failures.
        """
        self._require_declaration_context("describe")

        # The parent may have had no it() yet; its before_alls are due now.
        self._maybe_run_before_alls()

        context = DescriptionContext(description=description)
        self._context_stack.append(context)
        self._indent()
        logger.debug(f"Entering scope '{description}' at depth {self.depth}")

        try:
            body()

            # An empty scope still pairs its before_alls with its after_alls.
            self._maybe_run_before_alls()
            for after_all in context.after_alls:
                after_all()
        finally:
            self._dedent()
            self._context_stack.pop()
            self._reset_spies(context.spies)

        parent = self.current_context
        parent.absorb(context)
        if self.verbose or context.failure_count:
            parent.output.extend(["", self._pad(description), *context.output])

        logger.debug(
            f"Leaving scope '{description}': {context.success_count} passed, "
            f"{context.failure_count} failed"
        )

    def xdescribe(self, description: str, body: Callable[[], None]) -> None:
        """Record a skipped scope without running anything in it."""
        self._require_declaration_context("xdescribe")
        self._output(f"\n{description} (skipped)")
        logger.debug(f"Skipped scope '{description}'")

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def before_all(self, hook: Hook) -> None:
        self._require_declaration_context("before_all")
        self.current_context.before_alls.append(hook)

    def before_each(self, hook: Hook) -> None:
        self._require_declaration_context("before_each")
        self.current_context.before_eaches.append(hook)

    def after_each(self, hook: Hook) -> None:
        self._require_declaration_context("after_each")
        self.current_context.after_eaches.append(hook)

    def after_all(self, hook: Hook) -> None:
        self._require_declaration_context("after_all")
        self.current_context.after_alls.append(hook)

    # ------------------------------------------------------------------
    # Units
    # ------------------------------------------------------------------

    def it(self, name: str, body: Callable[[], None]) -> None:
        """Run one unit with every applicable hook around it.

        Failures raised by the body or by its before_each/after_each hooks
        are counted and reported, never propagated. UsageError always
        propagates.
        """
        if self._inside_unit:
            raise NestedUnitError()
        self._require_not_finished()

        self._maybe_run_before_alls()

        context = self.current_context
        start = time.perf_counter()
        failure: Exception | None = None

        try:
            for scope in self._context_stack:
                for before_each in scope.before_eaches:
                    before_each()
            self._inside_unit = True
            try:
                body()
            finally:
                self._inside_unit = False
        except UsageError:
            raise
        except Exception as e:
            failure = e

        for scope in self._context_stack:
            for after_each in scope.after_eaches:
                try:
                    after_each()
                except UsageError:
                    raise
                except Exception as e:
                    if failure is None:
                        failure = e
            for spy in scope.spies:
                spy.clear_calls()

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        status = UnitStatus.PASSED if failure is None else UnitStatus.FAILED
        if failure is None:
            context.record_success()
        else:
            context.record_failure()

        if self.verbose or failure is not None:
            self._output(f"{status.value} {name} (in {elapsed_ms} ms)")
        if failure is not None:
            self._output(self._diagnose(failure), extra_levels=1)

        logger.debug(f"Unit '{name}' {status.name.lower()} in {elapsed_ms} ms")

    def xit(self, name: str, body: Callable[[], None]) -> None:
        """Record a skipped unit; neither the body nor any hook runs."""
        if self._inside_unit:
            raise NestedUnitError()
        self._require_not_finished()
        self._output(f"{UnitStatus.SKIPPED.value} {name} (skipped)")
        logger.debug(f"Skipped unit '{name}'")

    # ------------------------------------------------------------------
    # Entry points into assertions and spies
    # ------------------------------------------------------------------

    def expect(self, actual: Any) -> Expectation:
        return Expectation(actual)

    def spy_on(self, target: Any, method_name: str) -> Spy:
        """Install a spy on ``target.method_name`` owned by the current scope.

        When ``target`` is a class and the attribute is a plain instance
        method, every instance shares the spy and each recorded call starts
        with the instance (``self``). Spy on the instance itself to record
        only the explicit arguments. Static and class methods never record
        a receiver.

        Raises:
            InvalidContextError: If called from inside a unit body.
            NotCallableError: If the attribute is missing or not callable.
        """
        if self._inside_unit:
            raise InvalidContextError("spy_on")
        self._require_not_finished()
        spy = Spy(target, method_name)
        self.current_context.spies.append(spy)
        return spy

    def stub_return(self, target: Any, method_name: str, value: Any) -> Spy:
        """Make ``target.method_name`` return ``value``.

        Reuses the spy already installed on that attribute, if any, so
        repeated calls change behavior instead of stacking wrappers.
        """
        current = getattr(target, method_name, None)
        if Spy.is_spy(current):
            spy = Spy.assert_spy(current)
        else:
            spy = self.spy_on(target, method_name)
        return spy.and_.return_value(value)

    def matcher(self, predicate: Callable[[Any], bool]) -> SpyMatcher:
        return SpyMatcher(predicate)

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def finish(self) -> TestResult:
        """Close the root scope and return the run's result.

        Must be the last call on this tester.
        """
        self._require_declaration_context("finish")
        if self.depth:
            raise UsageError(f"finish() called with {self.depth} describe() scope(s) still open")

        root = self.current_context
        try:
            self._maybe_run_before_alls()
            for after_all in root.after_alls:
                after_all()
        finally:
            self._finished = True
            self._reset_spies(root.spies)

        result = root.snapshot()
        logger.info(
            f"Run finished: {result.success_count} passed, {result.failure_count} failed"
        )
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _maybe_run_before_alls(self) -> None:
        context = self.current_context
        if not context.before_alls_pending:
            return
        context.before_alls_called = True
        if context.before_alls:
            logger.debug(
                f"Running {len(context.before_alls)} before_all hook(s) for "
                f"'{context.description or '<root>'}'"
            )
        for before_all in context.before_alls:
            before_all()

    def _reset_spies(self, spies: list[Spy]) -> None:
        """Reset spies last-installed-first.

        Every spy gets its reset() attempted; the first error is re-raised
        once the loop is done.
        """
        first_error: Exception | None = None
        for spy in reversed(spies):
            try:
                spy.reset()
            except Exception as e:
                logger.error(f"Failed to restore {spy!r}: {e}")
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def _require_declaration_context(self, operation: str) -> None:
        if self._inside_unit:
            raise InvalidContextError(operation)
        self._require_not_finished()

    def _require_not_finished(self) -> None:
        if self._finished:
            raise UsageError("This tester has already finished; construct a new one")

    def _diagnose(self, error: Exception) -> str:
        if self.show_tracebacks:
            text = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )
        else:
            detail = str(error)
            text = f"{type(error).__name__}: {detail}" if detail else ""
        return text.rstrip() or GENERIC_FAILURE_MESSAGE

    def _indent(self) -> None:
        self._indentation += self.indent_per_level

    def _dedent(self) -> None:
        self._indentation -= self.indent_per_level

    def _pad(self, line: str, extra_levels: int = 0) -> str:
        if not line:
            return ""
        return " " * (self._indentation + extra_levels * self.indent_per_level) + line

    def _output(self, text: str, extra_levels: int = 0) -> None:
        for line in text.split("\n"):
            self.current_context.output.append(self._pad(line, extra_levels))
