"""Composition root for the trellis test runner.

This module is the ONLY location that imports both the core engine and
concrete adapter implementations. All wiring happens here.

Module Structure:
- Configuration loading via config module
- Suite loading from explicit module:attribute references
- Reporter selection
- Entry point and exit status
"""

import importlib
import logging
import sys
from collections.abc import Sequence

from trellis.adapters.reporter.log_console import LoggingReporter
from trellis.adapters.reporter.stdout import StdoutReporter
from trellis.config import Settings, load_settings
from trellis.core.errors import UsageError
from trellis.core.ports import ReporterPort, TestSuite
from trellis.core.runner import SuiteRunner

# Exit statuses
EXIT_FAILED = 1
EXIT_USAGE = 2


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Logs go to stderr so the report on stdout stays clean.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.WARNING)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def load_suite(ref: str) -> TestSuite:
    """Import a suite from a ``package.module:Attribute`` reference.

    A TestSuite subclass is instantiated with no arguments; a TestSuite
    instance is used as-is.

    Raises:
        ValueError: If the reference is malformed, cannot be imported, or
            does not name a TestSuite.
    """
    module_name, _, attribute = ref.partition(":")
    if not module_name or not attribute:
        raise ValueError(f"Suite reference must be module:attribute, got {ref!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import suite module {module_name!r}: {e}") from e

    try:
        target = getattr(module, attribute)
    except AttributeError as e:
        raise ValueError(f"Module {module_name!r} has no attribute {attribute!r}") from e

    if isinstance(target, type) and issubclass(target, TestSuite):
        return target()
    if isinstance(target, TestSuite):
        return target
    raise ValueError(f"{ref!r} is not a TestSuite")


def build_reporter(settings: Settings) -> ReporterPort:
    """Select the reporter adapter named in settings."""
    if settings.reporter == "logging":
        return LoggingReporter()
    return StdoutReporter()


def run_title(suites: Sequence[TestSuite]) -> str:
    """Heading for a run's report, naming its suites in order."""
    return f"trellis: {', '.join(suite.display_name for suite in suites)}"


def run(suites: Sequence[TestSuite], settings: Settings) -> int:
    """Run and report the given suites.

    Returns:
        Exit status: 0 if every unit passed, 1 otherwise.

    Raises:
        UsageError: If a suite misuses the declaration API.
    """
    runner = SuiteRunner(
        suites,
        verbose=settings.verbose,
        indent_per_level=settings.indent_per_level,
        show_tracebacks=settings.show_tracebacks,
    )
    result = runner.run()

    reporter = build_reporter(settings)
    reporter.report(result, title=run_title(suites))
    return result.exit_code


def main(argv: Sequence[str] | None = None) -> None:
    """Application entry point.

    Suite references come from the command line, falling back to the
    TRELLIS_SUITES setting.

    Exit codes:
        0: Every unit passed
        1: At least one unit failed
        2: Bad suite reference, misused declaration API or bad settings
    """
    logger = logging.getLogger(__name__)
    args = list(sys.argv[1:] if argv is None else argv)

    try:
        settings = load_settings()
    except Exception as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(EXIT_USAGE)

    configure_logging(settings.log_level, settings.log_format)

    suite_refs = args or settings.suites
    if not suite_refs:
        logger.error("No suites given. Pass module:Suite references or set TRELLIS_SUITES.")
        sys.exit(EXIT_USAGE)

    try:
        suites = [load_suite(ref) for ref in suite_refs]
    except ValueError as e:
        logger.error(f"Cannot load suites: {e}")
        sys.exit(EXIT_USAGE)
    logger.info(f"Loaded {len(suites)} suite(s)")

    try:
        exit_code = run(suites, settings)
    except UsageError as e:
        logger.error(f"Test suite misused the API: {e}", exc_info=True)
        sys.exit(EXIT_USAGE)
    except Exception as e:
        logger.error(f"Run aborted: {e}", exc_info=True)
        sys.exit(EXIT_FAILED)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
