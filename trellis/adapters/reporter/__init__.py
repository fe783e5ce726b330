"""Reporter adapters for presenting finished runs.

Both implementations print the indented plain-text report:
- Stdout (terminal)
- Logging (a logger, for log consoles)
"""

from .log_console import LoggingReporter
from .stdout import StdoutReporter

__all__ = ["LoggingReporter", "StdoutReporter"]
