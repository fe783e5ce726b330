"""Domain models for the trellis test engine.

All models in this module use only Python standard library types.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from .spy import Spy

Hook: TypeAlias = Callable[[], None]


class UnitStatus(Enum):
    """Outcome of a single unit, with the glyph used in the report."""

    PASSED = "✓"
    FAILED = "✗"
    SKIPPED = "○"


class SpyStrategy(Enum):
    """How an installed spy answers a call.

    Every strategy records the call; they differ only in what produces
    the return value.
    """

    CALL_THROUGH = "call_through"
    CALL_FAKE = "call_fake"
    RETURN_VALUE = "return_value"


@dataclass(frozen=True)
class SpyCall:
    """Arguments received by one invocation of a spied method."""

    args: tuple[Any, ...]
    kwargs: dict[str, Any] | MappingProxyType[str, Any] = field(
        default_factory=dict
    )  # converted to proxy in __post_init__

    def __post_init__(self) -> None:
        """Convert kwargs dict to read-only proxy."""
        if isinstance(self.kwargs, dict):
            object.__setattr__(self, "kwargs", MappingProxyType(self.kwargs))

    def __repr__(self) -> str:
        parts = [repr(arg) for arg in self.args]
        parts.extend(f"{key}={value!r}" for key, value in self.kwargs.items())
        return f"({', '.join(parts)})"


@dataclass
class DescriptionContext:
    """State for one level of describe() nesting, or the implicit root.

    Hook lists are append-only while the scope's body runs. Counters
    cover units run directly in this scope plus every child scope folded
    in on exit. Output lines are already indented.

    Note: This dataclass is intentionally mutable; the tester updates
    counters and output throughout the scope's lifetime.
    """

    description: str = ""
    before_alls: list[Hook] = field(default_factory=list)
    before_eaches: list[Hook] = field(default_factory=list)
    after_eaches: list[Hook] = field(default_factory=list)
    after_alls: list[Hook] = field(default_factory=list)
    before_alls_called: bool = False
    success_count: int = 0
    failure_count: int = 0
    output: list[str] = field(default_factory=list)
    spies: list["Spy"] = field(default_factory=list)

    @property
    def units_run(self) -> int:
        """Units executed in this scope and in already-folded children."""
        return self.success_count + self.failure_count

    @property
    def before_alls_pending(self) -> bool:
        """Whether before_all hooks still have to fire for this scope.

        Recomputed from the scope's history: once any unit has run, or the
        hooks have been fired explicitly, they are never due again.
        """
        return not self.before_alls_called and self.units_run == 0

    def record_success(self) -> None:
        """Count one passing unit."""
        self.success_count += 1

    def record_failure(self) -> None:
        """Count one failing unit."""
        self.failure_count += 1

    def absorb(self, child: "DescriptionContext") -> None:
        """Fold a finished child scope's counters into this scope."""
        self.success_count += child.success_count
        self.failure_count += child.failure_count

    def snapshot(self) -> "TestResult":
        """Freeze the current counters and output."""
        return TestResult(
            success_count=self.success_count,
            failure_count=self.failure_count,
            output=tuple(self.output),
        )


@dataclass(frozen=True)
class TestResult:
    """Summary of a finished run."""

    __test__ = False  # not a pytest test class

    success_count: int
    failure_count: int
    output: tuple[str, ...]  # immutable for frozen dataclass

    def __post_init__(self) -> None:
        """Validate result invariants on creation."""
        if self.success_count < 0 or self.failure_count < 0:
            raise ValueError(
                f"counts must be non-negative, got {self.success_count}/{self.failure_count}"
            )

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count

    @property
    def passed(self) -> bool:
        """True when the run recorded no failures."""
        return self.failure_count == 0

    @property
    def exit_code(self) -> int:
        """Process exit status for a wrapper: 0 on success, 1 on any failure."""
        return 0 if self.passed else 1

    def render(self) -> str:
        """Join the report lines into one printable block."""
        return "\n".join(self.output)
