"""
Conversion event fan-out.

Native callbacks arrive on the worker thread during ``convert``; each one is
forwarded synchronously to every registered consumer in registration order.
A consumer that raises is logged and skipped so the remaining consumers and
the conversion itself carry on.
"""
import logging
from typing import Callable, List

from htmltox.core.models.progress import Progress

logger = logging.getLogger(__name__)

WarningConsumer = Callable[[str], None]
ErrorConsumer = Callable[[str], None]
ProgressConsumer = Callable[[Progress], None]
FinishedConsumer = Callable[[bool], None]


class ConversionEvents:
    """Ordered consumer lists for one converter."""

    def __init__(self):
        self.warning: List[WarningConsumer] = []
        self.error: List[ErrorConsumer] = []
        self.progress: List[ProgressConsumer] = []
        self.finished: List[FinishedConsumer] = []

    def copy(self) -> "ConversionEvents":
        """Independent lists with the same consumers, for per-call additions."""
        events = ConversionEvents()
        events.warning = list(self.warning)
        events.error = list(self.error)
        events.progress = list(self.progress)
        events.finished = list(self.finished)
        return events

    def emit_warning(self, message: str) -> None:
        self._emit("warning", self.warning, message)

    def emit_error(self, message: str) -> None:
        self._emit("error", self.error, message)

    def emit_progress(self, progress: Progress) -> None:
        self._emit("progress", self.progress, progress)

    def emit_finished(self, success: bool) -> None:
        self._emit("finished", self.finished, success)

    @staticmethod
    def _emit(event: str, consumers: List[Callable], payload) -> None:
        for consumer in consumers:
            try:
                consumer(payload)
            except Exception:
                logger.exception(f"{event} consumer {consumer!r} raised; continuing")


class ConversionLog:
    """Collects warning and error lines of a single conversion, in emission order."""

    def __init__(self):
        self.lines: List[str] = []

    def attach(self, events: ConversionEvents) -> None:
        events.warning.append(self._on_warning)
        events.error.append(self._on_error)

    def _on_warning(self, message: str) -> None:
        self.lines.append(f"Warning: {message}")

    def _on_error(self, message: str) -> None:
        self.lines.append(f"Error: {message}")

    def __str__(self) -> str:
        return "\n".join(self.lines)
