"""
Learner-facing output sinks.

The pipeline reports progress and diagnostics through a Reporter rather than
printing directly, so batch callers and tests can capture what was shown.
"""

from typing import IO, List, Optional, Tuple

from rich.console import Console
from rich.text import Text


class Reporter:
    """Sink for success-styled, failure-styled and plain lines."""

    def line(self, message: str) -> None:
        raise NotImplementedError

    def success(self, message: str) -> None:
        raise NotImplementedError

    def failure(self, message: str) -> None:
        raise NotImplementedError


class ConsoleReporter(Reporter):
    """Writes to the terminal through rich, green for success and red for failure."""

    SUCCESS_STYLE = "green"
    FAILURE_STYLE = "red"

    def __init__(self, file: Optional[IO[str]] = None, no_color: bool = False):
        self.console = Console(file=file, no_color=no_color, highlight=False, soft_wrap=True)

    def _emit(self, message: str, style: Optional[str] = None) -> None:
        # Child process output must be shown verbatim, so no markup parsing
        self.console.print(Text(message, style=style or ""))

    def line(self, message: str) -> None:
        self._emit(message)

    def success(self, message: str) -> None:
        self._emit(message, self.SUCCESS_STYLE)

    def failure(self, message: str) -> None:
        self._emit(message, self.FAILURE_STYLE)


class RecordingReporter(Reporter):
    """Keeps every reported line as a (style, message) pair."""

    def __init__(self):
        self.entries: List[Tuple[str, str]] = []

    def line(self, message: str) -> None:
        self.entries.append(("line", message))

    def success(self, message: str) -> None:
        self.entries.append(("success", message))

    def failure(self, message: str) -> None:
        self.entries.append(("failure", message))

    @property
    def messages(self) -> List[str]:
        return [message for _, message in self.entries]

    def text(self) -> str:
        """All reported messages joined by newlines."""
        return "\n".join(self.messages)

    def clear(self) -> None:
        self.entries.clear()
