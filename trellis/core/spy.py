"""Reversible method interception for tests.

A Spy replaces one attribute of a target object with a recording
wrapper and keeps the original so reset() can put it back exactly as it
was found (own attribute restored, inherited attribute un-shadowed).
"""

import functools
import logging
import types
from collections.abc import Callable
from typing import Any

from .errors import NotASpyError, NotCallableError
from .models import SpyCall, SpyStrategy

logger = logging.getLogger(__name__)

# Attribute set on every installed wrapper, pointing back at its Spy.
SPY_MARKER = "__spy__"

_MISSING = object()


class SpyBehavior:
    """The ``spy.and_`` namespace for choosing how calls are answered.

    Each method returns the spy so declarations can be chained:
    ``t.spy_on(obj, "load").and_.return_value(42)``.
    """

    def __init__(self, spy: "Spy"):
        self._spy = spy

    def call_through(self) -> "Spy":
        """Invoke the original method (the default)."""
        self._spy._set_strategy(SpyStrategy.CALL_THROUGH)
        return self._spy

    def call_fake(self, fake: Callable[..., Any]) -> "Spy":
        """Invoke ``fake`` with the received arguments instead of the original."""
        if not callable(fake):
            raise TypeError(f"call_fake() needs a callable, got {fake!r}")
        self._spy._set_strategy(SpyStrategy.CALL_FAKE, fake=fake)
        return self._spy

    def return_value(self, value: Any) -> "Spy":
        """Return ``value`` without invoking the original."""
        self._spy._set_strategy(SpyStrategy.RETURN_VALUE, value=value)
        return self._spy


class Spy:
    """An installed interception wrapper around ``target.method_name``.

    Installation happens on construction. Every call through the wrapper
    is appended to ``calls`` whichever strategy is active. The spy stays
    installed until reset(); clear_calls() only empties the history.
    """

    def __init__(self, target: Any, method_name: str):
        original = getattr(target, method_name, _MISSING)
        if original is _MISSING or not callable(original):
            raise NotCallableError(target, method_name)

        self.target = target
        self.method_name = method_name
        self.original: Callable[..., Any] = original
        self.calls: list[SpyCall] = []
        self.strategy = SpyStrategy.CALL_THROUGH
        self.and_ = SpyBehavior(self)

        self._fake: Callable[..., Any] | None = None
        self._return_value: Any = None
        own_attrs = getattr(target, "__dict__", None)
        if own_attrs is None:
            # __slots__ objects: the attribute can only live on the instance
            self._raw_attribute: Any = original
        else:
            self._raw_attribute = own_attrs.get(method_name, _MISSING)
        self._installed = False

        self.wrapper = self._make_wrapper()
        self._install()

    @staticmethod
    def is_spy(fn: Any) -> bool:
        """Whether ``fn`` is a spy wrapper (or a method bound from one)."""
        return isinstance(getattr(_unbind(fn), SPY_MARKER, None), Spy)

    @staticmethod
    def assert_spy(fn: Any) -> "Spy":
        """Return the Spy behind ``fn``, or raise NotASpyError."""
        if isinstance(fn, Spy):
            return fn
        spy = getattr(_unbind(fn), SPY_MARKER, None)
        if not isinstance(spy, Spy):
            raise NotASpyError(fn)
        return spy

    @property
    def installed(self) -> bool:
        return self._installed

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def most_recent_call(self) -> SpyCall | None:
        return self.calls[-1] if self.calls else None

    def reset(self) -> None:
        """Put the original attribute back and detach.

        Calling reset() on an already reset spy does nothing.
        """
        if not self._installed:
            return
        if self._raw_attribute is _MISSING:
            # The method was inherited; removing the shadow exposes it again.
            delattr(self.target, self.method_name)
        else:
            setattr(self.target, self.method_name, self._raw_attribute)
        self._installed = False
        logger.debug(f"Restored {self._describe_target()} ({self.call_count} calls recorded)")

    def clear_calls(self) -> None:
        """Forget recorded calls; the spy stays installed."""
        self.calls.clear()

    def _set_strategy(
        self,
        strategy: SpyStrategy,
        fake: Callable[..., Any] | None = None,
        value: Any = None,
    ) -> None:
        self.strategy = strategy
        self._fake = fake
        self._return_value = value

    def _invoke(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        try:
            if self.strategy is SpyStrategy.RETURN_VALUE:
                return self._return_value
            if self.strategy is SpyStrategy.CALL_FAKE:
                assert self._fake is not None
                return self._fake(*args, **kwargs)
            return self.original(*args, **kwargs)
        finally:
            self.calls.append(SpyCall(args=args, kwargs=kwargs))

    def _make_wrapper(self) -> Callable[..., Any]:
        spy = self

        @functools.wraps(self.original)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return spy._invoke(args, kwargs)

        setattr(wrapper, SPY_MARKER, spy)
        return wrapper

    def _install(self) -> None:
        replacement: Any = self.wrapper
        if isinstance(self._raw_attribute, (staticmethod, classmethod)):
            # The original was already bound on lookup; keep the wrapper unbound.
            replacement = staticmethod(self.wrapper)
        setattr(self.target, self.method_name, replacement)
        self._installed = True
        logger.debug(f"Installed spy on {self._describe_target()}")

    def _describe_target(self) -> str:
        if isinstance(self.target, (type, types.ModuleType)):
            owner = self.target.__name__
        else:
            owner = type(self.target).__name__
        return f"{owner}.{self.method_name}"

    def __repr__(self) -> str:
        state = "installed" if self._installed else "reset"
        return (
            f"Spy({self._describe_target()}, strategy={self.strategy.value}, "
            f"calls={self.call_count}, {state})"
        )


def _unbind(fn: Any) -> Any:
    """Strip method binding so the wrapper's marker is visible."""
    return getattr(fn, "__func__", fn)
