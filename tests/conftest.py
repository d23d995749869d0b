"""Shared fixtures: in-memory fakes of the wkhtmltox entry points."""
import itertools
import threading
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from htmltox.core.executor import TaskExecutor
from htmltox.core.lifecycle import NativeBindings
from htmltox.core.ports.native import ImageRendererPort, PdfRendererPort

MISSING_URL_PREFIX = "file:///path/that/does/not/exist"
PHASES = ["Loading pages", "Counting pages", "Printing pages"]


class _FakeRenderer:
    """Mimics the native library: handles are ints, callbacks fire during convert."""

    prefix = ""

    def __init__(self):
        self._ids = itertools.count(1)
        self.calls: List[str] = []
        self.threads = set()
        self.init_calls = 0
        self.global_settings: Dict[int, Dict[str, str]] = {}
        self.converters: Dict[int, dict] = {}
        self.destroyed: List[int] = []
        self.warnings: List[str] = []
        self.http_error = 0
        self.fail = False
        self.raise_on_convert: Optional[Exception] = None
        self.raise_on_create_converter: Optional[Exception] = None
        self.raise_on_add_object: Optional[Exception] = None
        self.rejected_settings = set()

    def _record(self, name: str) -> None:
        self.calls.append(name)
        self.threads.add(threading.get_ident())

    # Library

    def init(self, use_graphics: bool = False) -> bool:
        self._record("init")
        self.init_calls += 1
        return True

    def deinit(self) -> bool:
        self._record("deinit")
        return True

    def version(self) -> str:
        return "0.12.5-fake"

    def extended_qt(self) -> bool:
        return True

    # Settings

    def create_global_settings(self):
        self._record("create_global_settings")
        handle = next(self._ids)
        self.global_settings[handle] = {}
        return handle

    def set_global_setting(self, settings, name, value) -> bool:
        if name in self.rejected_settings:
            return False
        self.global_settings[settings][name] = value
        return True

    def get_global_setting(self, settings, name):
        return self.global_settings[settings].get(name)

    def destroy_global_settings(self, settings) -> None:
        self._record("destroy_global_settings")
        self.global_settings.pop(settings, None)

    # Converter

    def _new_converter(self, global_settings, html=None):
        if self.raise_on_create_converter is not None:
            raise self.raise_on_create_converter
        handle = next(self._ids)
        self.converters[handle] = {
            "settings": self.global_settings[global_settings],
            "html": html,
            "objects": [],
            "callbacks": {},
            "phase": 0,
            "output": b"",
        }
        return handle

    def set_warning_callback(self, converter, callback) -> None:
        self.converters[converter]["callbacks"]["warning"] = callback

    def set_error_callback(self, converter, callback) -> None:
        self.converters[converter]["callbacks"]["error"] = callback

    def set_phase_changed_callback(self, converter, callback) -> None:
        self.converters[converter]["callbacks"]["phase_changed"] = callback

    def set_progress_changed_callback(self, converter, callback) -> None:
        self.converters[converter]["callbacks"]["progress"] = callback

    def set_finished_callback(self, converter, callback) -> None:
        self.converters[converter]["callbacks"]["finished"] = callback

    def current_phase(self, converter) -> int:
        return self.converters[converter]["phase"]

    def phase_count(self, converter) -> int:
        return len(PHASES)

    def phase_description(self, converter, phase) -> str:
        return PHASES[phase]

    def progress_string(self, converter) -> str:
        return "100%"

    def http_error_code(self, converter) -> int:
        return self.http_error

    def convert(self, converter) -> bool:
        self._record("convert")
        state = self.converters[converter]
        callbacks = state["callbacks"]
        if self.raise_on_convert is not None:
            raise self.raise_on_convert

        for message in self.warnings:
            callbacks["warning"](converter, message)

        sources = self._sources(state)
        missing = [s for s in sources if s is None or s.startswith(MISSING_URL_PREFIX)]
        if self.fail or missing:
            for source in missing or ["<forced failure>"]:
                callbacks["error"](converter, f"Failed loading page {source}")
            callbacks["finished"](converter, 0)
            return False

        for phase in range(len(PHASES)):
            state["phase"] = phase
            for percent in (0, 50, 100):
                callbacks["progress"](converter, percent)

        output = self._render(sources)
        out = state["settings"].get("out")
        if out:
            Path(out).write_bytes(output)
        else:
            state["output"] = output
        callbacks["finished"](converter, 1)
        return True

    def get_output(self, converter) -> bytes:
        self._record("get_output")
        return self.converters[converter]["output"]

    def destroy_converter(self, converter) -> None:
        self._record("destroy_converter")
        self.destroyed.append(converter)

    def _sources(self, state) -> List[Optional[str]]:
        raise NotImplementedError

    def _render(self, sources) -> bytes:
        raise NotImplementedError


class FakePdfRenderer(_FakeRenderer, PdfRendererPort):
    """Output lists one ``page:`` line per object, in attachment order."""

    def __init__(self):
        super().__init__()
        self.object_settings: Dict[int, Dict[str, str]] = {}

    def create_converter(self, global_settings):
        self._record("create_converter")
        return self._new_converter(global_settings)

    def create_object_settings(self):
        self._record("create_object_settings")
        handle = next(self._ids)
        self.object_settings[handle] = {}
        return handle

    def set_object_setting(self, settings, name, value) -> bool:
        self.object_settings[settings][name] = value
        return True

    def get_object_setting(self, settings, name):
        return self.object_settings[settings].get(name)

    def destroy_object_settings(self, settings) -> None:
        self.object_settings.pop(settings, None)

    def add_object(self, converter, object_settings, html) -> None:
        self._record("add_object")
        if self.raise_on_add_object is not None:
            raise self.raise_on_add_object
        self.converters[converter]["objects"].append((self.object_settings[object_settings], html))

    def _sources(self, state):
        return [html or settings.get("page") for settings, html in state["objects"]]

    def _render(self, sources) -> bytes:
        pages = "\n".join(f"page:{source}" for source in sources)
        return f"%PDF-FAKE\n{pages}\n%%EOF".encode("utf-8")


class FakeImageRenderer(_FakeRenderer, ImageRendererPort):
    """Output is a PNG signature followed by the rendered source."""

    def create_converter(self, global_settings, html):
        self._record("create_converter")
        return self._new_converter(global_settings, html)

    def _sources(self, state):
        return [state["html"] or state["settings"].get("in")]

    def _render(self, sources) -> bytes:
        return b"\x89PNG\r\n\x1a\n" + sources[0].encode("utf-8")


@pytest.fixture
def fake_pdf():
    return FakePdfRenderer()


@pytest.fixture
def fake_image():
    return FakeImageRenderer()


@pytest.fixture
def bindings(fake_pdf, fake_image):
    return NativeBindings(pdf=fake_pdf, image=fake_image)


@pytest.fixture
def executor(bindings):
    executor = TaskExecutor(bindings_factory=lambda: bindings)
    yield executor
    executor.shutdown()
