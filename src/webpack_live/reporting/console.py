"""
Console output sinks.

The reporter is where everything the developer sees goes: coloured status
lines from the watch loop, the build report, and the child process's own
output. Writes are serialized so that lines from one source keep their
order even when the child's reader threads write concurrently.
"""

import logging
import sys
import threading
from typing import BinaryIO, Optional

from rich.console import Console

logger = logging.getLogger(__name__)

EXIT_HINT = "⌃C to exit."


class ConsoleReporter:
    """
    Info, warning and error sinks plus a raw passthrough for child output.

    Args:
        console: Rich console used for styled text (defaults to stdout)
        raw_stream: Binary stream receiving child stdout bytes verbatim
    """

    def __init__(self, console: Optional[Console] = None,
                 raw_stream: Optional[BinaryIO] = None):
        self.console = console or Console(highlight=False)
        self._raw_stream = raw_stream
        self._lock = threading.Lock()

    def _emit(self, text: str, style: Optional[str]) -> None:
        with self._lock:
            self.console.print(
                text, style=style, markup=False, highlight=False, soft_wrap=True
            )

    def info(self, text: str) -> None:
        self._emit(str(text), "green")

    def warning(self, text: str) -> None:
        self._emit(str(text), "yellow")

    def error(self, text: str) -> None:
        self._emit(str(text), "red")

    def plain(self, text: str) -> None:
        self._emit(str(text), None)

    def write_output(self, data: bytes) -> None:
        """Write child process output unchanged."""
        stream = self._raw_stream or sys.stdout.buffer
        with self._lock:
            self.console.file.flush()
            stream.write(data)
            stream.flush()

    def clear(self) -> None:
        """Clear the terminal and show how to stop the session."""
        with self._lock:
            self.console.clear()
        self.info(EXIT_HINT)
