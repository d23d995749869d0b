"""
Shared conversion flow for the PDF and image converters.

A converter accumulates settings and event consumers on the calling thread.
A terminal operation copies that state into a task for the native worker,
which runs the whole request: init, settings, converter creation, callback
wiring, convert, output extraction and converter destruction.
"""
import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar

from prometheus_client import Counter, Histogram

from htmltox.core.events import (
    ConversionEvents,
    ConversionLog,
    ErrorConsumer,
    FinishedConsumer,
    ProgressConsumer,
    WarningConsumer,
)
from htmltox.core.exceptions import ConversionError, CoreError
from htmltox.core.executor import TaskExecutor, get_task_executor
from htmltox.core.lifecycle import NativeBindings
from htmltox.core.models.options import OUTPUT_KEY, setting_value
from htmltox.core.models.progress import Progress
from htmltox.core.ports.native import Handle, RendererPort

logger = logging.getLogger(__name__)

T = TypeVar("T")
C = TypeVar("C", bound="BaseConverter")
Action = Callable[[Any, Handle], T]

# Prometheus metrics
CONVERSIONS = Counter(
    "htmltox_conversions_total",
    "Conversions run by the native worker",
    ["kind", "target", "outcome"],
)
CONVERSION_DURATION = Histogram(
    "htmltox_conversion_duration_seconds",
    "Wall time of a conversion including queueing",
    ["kind"],
)


def read_progress(port: RendererPort, converter: Handle, percent: int) -> Progress:
    """Snapshot the converter's phase state alongside the reported percent."""
    phase = port.current_phase(converter)
    return Progress(
        phase=phase,
        phase_description=port.phase_description(converter, phase),
        phase_count=port.phase_count(converter),
        phase_progress=percent,
    )


class BaseConverter:
    """Settings, consumers and the native flow common to both renderer kinds.

    Subclasses provide the port selection, converter creation and, for PDF,
    object attachment.
    """

    kind = ""

    def __init__(
        self,
        settings: Optional[Dict[str, Any]] = None,
        executor: Optional[TaskExecutor] = None,
    ):
        self._settings: Dict[str, str] = {
            name: setting_value(value) for name, value in (settings or {}).items()
        }
        self._executor = executor
        self._events = ConversionEvents()

    @property
    def executor(self) -> TaskExecutor:
        if self._executor is None:
            self._executor = get_task_executor()
        return self._executor

    @property
    def settings(self) -> Dict[str, str]:
        """Copy of the global settings."""
        return dict(self._settings)

    def setting(self: C, name: str, value: Any) -> C:
        """Set an arbitrary global setting. The last write for a name wins."""
        self._settings[name] = setting_value(value)
        return self

    # Event consumers

    def on_warning(self: C, consumer: WarningConsumer) -> C:
        self._events.warning.append(consumer)
        return self

    def on_error(self: C, consumer: ErrorConsumer) -> C:
        self._events.error.append(consumer)
        return self

    def on_progress(self: C, consumer: ProgressConsumer) -> C:
        self._events.progress.append(consumer)
        return self

    def on_finished(self: C, consumer: FinishedConsumer) -> C:
        """Register a consumer receiving True on success and False on failure."""
        self._events.finished.append(consumer)
        return self

    def on_success(self: C, callback: Callable[[], None]) -> C:
        def _on_finished(success: bool) -> None:
            if success:
                callback()
        return self.on_finished(_on_finished)

    def on_failure(self: C, callback: Callable[[], None]) -> C:
        def _on_finished(success: bool) -> None:
            if not success:
                callback()
        return self.on_finished(_on_finished)

    # Terminal operations

    def render_to_path(self, path: str) -> bool:
        """Convert and let the native library write the result to ``path``.

        Returns:
            True if the native conversion reported success
        """
        settings = self.settings
        settings[OUTPUT_KEY] = str(path)

        def _convert(port, converter) -> bool:
            success = port.convert(converter)
            if not success:
                logger.warning(f"{self.kind} conversion to {path} failed")
            return success

        return self._run(settings, self._events.copy(), "path", _convert)

    def render_to_stream(self) -> bytes:
        """Convert into memory and return the output bytes.

        Raises:
            ConversionError: If the native conversion reported failure; the
                message lists every warning and error seen during the call
        """
        settings = self.settings
        settings.pop(OUTPUT_KEY, None)
        events = self._events.copy()
        log = ConversionLog()
        log.attach(events)

        def _convert(port, converter) -> bytes:
            if port.convert(converter):
                return port.get_output(converter)
            raise ConversionError(
                f"Conversion returned with failure. Log:\n{log}",
                log=log.lines,
                http_error_code=port.http_error_code(converter),
            )

        return self._run(settings, events, "stream", _convert)

    # Native flow

    def _run(
        self,
        settings: Dict[str, str],
        events: ConversionEvents,
        target: str,
        action: Action,
    ) -> T:
        source = self._snapshot_source()
        start = time.monotonic()
        outcome = "error"
        try:
            result = self.executor.run(
                lambda bindings: self._convert_task(bindings, settings, source, events, action)
            )
            outcome = "failure" if result is False else "success"
            return result
        except ConversionError:
            outcome = "failure"
            raise
        except CoreError as e:
            logger.error(f"{self.kind} conversion error: {e}")
            raise
        finally:
            CONVERSIONS.labels(self.kind, target, outcome).inc()
            CONVERSION_DURATION.labels(self.kind).observe(time.monotonic() - start)

    def _convert_task(
        self,
        bindings: NativeBindings,
        settings: Dict[str, str],
        source: Any,
        events: ConversionEvents,
        action: Action,
    ) -> T:
        port = self._port(bindings)
        bindings.ensure_initialized(port)
        with self._open_converter(port, settings, source) as converter:
            self._install_callbacks(port, converter, events)
            self._add_objects(port, converter, source)
            return action(port, converter)

    @contextmanager
    def _open_converter(
        self, port: RendererPort, settings: Dict[str, str], source: Any
    ) -> Iterator[Handle]:
        # The converter takes ownership of the global settings once created.
        global_settings = port.create_global_settings()
        try:
            for name, value in settings.items():
                if not port.set_global_setting(global_settings, name, value):
                    logger.debug(f"wkhtmlto{self.kind} rejected global setting {name}={value!r}")
            converter = self._create_converter(port, global_settings, source)
        except BaseException:
            port.destroy_global_settings(global_settings)
            raise
        try:
            yield converter
        finally:
            port.destroy_converter(converter)

    @staticmethod
    def _install_callbacks(
        port: RendererPort, converter: Handle, events: ConversionEvents
    ) -> None:
        port.set_warning_callback(converter, lambda _c, message: events.emit_warning(message))
        port.set_error_callback(converter, lambda _c, message: events.emit_error(message))
        port.set_progress_changed_callback(
            converter,
            lambda c, percent: events.emit_progress(read_progress(port, c, percent)),
        )
        port.set_finished_callback(converter, lambda _c, value: events.emit_finished(value == 1))

    def _snapshot_source(self) -> Any:
        """Copy of the content to convert, taken on the calling thread."""
        return None

    def _port(self, bindings: NativeBindings) -> RendererPort:
        raise NotImplementedError

    def _create_converter(
        self, port: RendererPort, global_settings: Handle, source: Any
    ) -> Handle:
        raise NotImplementedError

    def _add_objects(self, port: RendererPort, converter: Handle, source: Any) -> None:
        pass
