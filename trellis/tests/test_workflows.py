"""End-to-end workflow tests.

A realistic suite drives a small registry service whose collaborators
are replaced by spies in before_each hooks, the way production suites
use the engine. The run must pass, and every collaborator must be back
to its original behavior afterwards.
"""

from trellis.core.ports import TestSuite
from trellis.core.runner import SuiteRunner
from trellis.core.spy import Spy
from trellis.core.tester import Tester


class Validator:
    """Stand-in for an external validation service."""

    @staticmethod
    def validate(sheet_id: str) -> None:
        raise RuntimeError("network access in tests")


class Throttle:
    @staticmethod
    def sleep(ms: int) -> None:
        raise RuntimeError("would really sleep")


class SheetRegistry:
    """Registers sheet ids that pass validation."""

    def __init__(self):
        self.sheet_ids: list[str] = []

    def register(self, sheet_id: str) -> None:
        if sheet_id in self.sheet_ids:
            return
        try:
            Validator.validate(sheet_id)
        except ValueError:
            return
        self.sheet_ids.append(sheet_id)

    def unregister(self, sheet_id: str) -> None:
        if sheet_id in self.sheet_ids:
            self.sheet_ids.remove(sheet_id)

    def for_each(self, fn) -> None:
        for sheet_id in self.sheet_ids:
            fn(sheet_id)
            Throttle.sleep(100)


class RegistrySuite(TestSuite):
    name = "SheetRegistryTest"

    def run(self, t: Tester) -> None:
        state = {"invalid": False, "registry": SheetRegistry()}

        def fake_validate(sheet_id: str) -> None:
            if state["invalid"]:
                raise ValueError("invalid sheet")

        def reset_state() -> None:
            state["invalid"] = False
            state["registry"] = SheetRegistry()
            t.spy_on(Validator, "validate").and_.call_fake(fake_validate)
            t.spy_on(Throttle, "sleep").and_.return_value(None)

        t.before_each(reset_state)

        def expect_registered(count: int) -> None:
            t.expect(len(state["registry"].sheet_ids)).to_equal(count)

        def register() -> None:
            t.before_each(lambda: expect_registered(0))

            def registers_valid() -> None:
                state["registry"].register("sheet-id")
                expect_registered(1)

            def skips_invalid() -> None:
                state["invalid"] = True
                state["registry"].register("sheet-id")
                expect_registered(0)

            def skips_duplicates() -> None:
                state["registry"].register("sheet-id")
                state["registry"].register("sheet-id")
                expect_registered(1)
                t.expect(Validator.validate).to_have_been_called_times(1)

            t.it("registers valid sheets", registers_valid)
            t.it("skips an invalid sheet", skips_invalid)
            t.it("skips an already registered sheet", skips_duplicates)

        def for_each() -> None:
            observer = Observer()

            def register_three() -> None:
                for sheet_id in ("sheet-1", "sheet-2", "sheet-3"):
                    state["registry"].register(sheet_id)
                t.spy_on(observer, "each")

            t.before_each(register_three)

            def touches_every_sheet() -> None:
                state["registry"].for_each(observer.each)
                t.expect(observer.each).to_have_been_called_times(3)
                t.expect(observer.each).to_have_been_called_with("sheet-1")
                t.expect(observer.each).to_have_been_called_with(
                    t.matcher(lambda sheet_id: sheet_id.endswith("3"))
                )

            def sleeps_after_every_sheet() -> None:
                state["registry"].for_each(lambda sheet_id: None)
                t.expect(Throttle.sleep).to_have_been_called_times(3)
                t.expect(Throttle.sleep).to_have_been_called_with(100)

            t.it("touches every registered sheet", touches_every_sheet)
            t.it("sleeps after every sheet", sleeps_after_every_sheet)

        t.describe("register", register)
        t.describe("for_each", for_each)


class Observer:
    def each(self, sheet_id: str) -> None:
        pass


def test_registry_suite_passes() -> None:
    result = SuiteRunner([RegistrySuite()]).run()

    assert result.failure_count == 0, result.render()
    assert result.success_count == 5


def test_collaborators_restored_after_run() -> None:
    SuiteRunner([RegistrySuite()]).run()

    assert not Spy.is_spy(Validator.validate)
    assert not Spy.is_spy(Throttle.sleep)
    assert isinstance(vars(Validator)["validate"], staticmethod)


def test_verbose_report_shape() -> None:
    result = SuiteRunner([RegistrySuite()], verbose=True).run()

    assert result.output[:4] == ("", "  SheetRegistryTest", "", "    register")
    markers = [line.strip().split(" (in ")[0] for line in result.output if "(in " in line]
    assert markers == [
        "✓ registers valid sheets",
        "✓ skips an invalid sheet",
        "✓ skips an already registered sheet",
        "✓ touches every registered sheet",
        "✓ sleeps after every sheet",
    ]
