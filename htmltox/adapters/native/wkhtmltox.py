"""
ctypes adapters for the wkhtmltopdf and wkhtmltoimage entry points.

Both families share the same shape and differ only in their symbol prefix,
converter creation and, for PDF, object settings. Strings cross the boundary
as UTF-8. Callback trampolines are kept alive per converter until the
converter is destroyed; the native library calls them synchronously on the
thread running ``convert``.
"""
import ctypes
import logging
from ctypes import (
    CFUNCTYPE,
    POINTER,
    byref,
    c_char_p,
    c_int,
    c_long,
    c_ubyte,
    c_void_p,
)
from typing import Any, Callable, Dict, Optional

from htmltox.core.lifecycle import NativeBindings
from htmltox.core.ports.native import (
    Handle,
    ImageRendererPort,
    IntCallback,
    PdfRendererPort,
    StrCallback,
    VoidCallback,
)

logger = logging.getLogger(__name__)

STR_CALLBACK = CFUNCTYPE(None, c_void_p, c_char_p)
INT_CALLBACK = CFUNCTYPE(None, c_void_p, c_int)
VOID_CALLBACK = CFUNCTYPE(None, c_void_p)

SETTING_BUFFER_SIZE = 4096

# Signatures shared by both families: name -> (restype, argtypes)
_COMMON_SIGNATURES = {
    "init": (c_int, [c_int]),
    "deinit": (c_int, []),
    "extended_qt": (c_int, []),
    "version": (c_char_p, []),
    "create_global_settings": (c_void_p, []),
    "set_global_setting": (c_int, [c_void_p, c_char_p, c_char_p]),
    "get_global_setting": (c_int, [c_void_p, c_char_p, c_char_p, c_int]),
    "destroy_global_settings": (None, [c_void_p]),
    "set_warning_callback": (None, [c_void_p, STR_CALLBACK]),
    "set_error_callback": (None, [c_void_p, STR_CALLBACK]),
    "set_phase_changed_callback": (None, [c_void_p, VOID_CALLBACK]),
    "set_progress_changed_callback": (None, [c_void_p, INT_CALLBACK]),
    "set_finished_callback": (None, [c_void_p, INT_CALLBACK]),
    "current_phase": (c_int, [c_void_p]),
    "phase_count": (c_int, [c_void_p]),
    "phase_description": (c_char_p, [c_void_p, c_int]),
    "progress_string": (c_char_p, [c_void_p]),
    "http_error_code": (c_int, [c_void_p]),
    "convert": (c_int, [c_void_p]),
    "get_output": (c_long, [c_void_p, POINTER(POINTER(c_ubyte))]),
    "destroy_converter": (None, [c_void_p]),
}

_PDF_SIGNATURES = {
    "create_converter": (c_void_p, [c_void_p]),
    "create_object_settings": (c_void_p, []),
    "set_object_setting": (c_int, [c_void_p, c_char_p, c_char_p]),
    "get_object_setting": (c_int, [c_void_p, c_char_p, c_char_p, c_int]),
    "destroy_object_settings": (None, [c_void_p]),
    "add_object": (None, [c_void_p, c_void_p, c_char_p]),
}

_IMAGE_SIGNATURES = {
    "create_converter": (c_void_p, [c_void_p, c_char_p]),
}


def _encode(value: Optional[str]) -> Optional[bytes]:
    return None if value is None else value.encode("utf-8")


def _decode(value: Optional[bytes]) -> str:
    return "" if value is None else value.decode("utf-8", errors="replace")


class _CtypesRenderer:
    """Entry points shared by both families, bound to ``<prefix>_<name>`` symbols."""

    prefix = ""
    signatures: Dict[str, Any] = {}

    def __init__(self, library: ctypes.CDLL):
        self._library = library
        self._functions: Dict[str, Any] = {}
        # converter -> callback name -> CFUNCTYPE instance
        self._callbacks: Dict[int, Dict[str, Any]] = {}
        for name, (restype, argtypes) in {**_COMMON_SIGNATURES, **self.signatures}.items():
            function = getattr(library, f"{self.prefix}_{name}")
            function.restype = restype
            function.argtypes = argtypes
            self._functions[name] = function

    def _call(self, name: str, *args):
        return self._functions[name](*args)

    def init(self, use_graphics: bool = False) -> bool:
        return self._call("init", 1 if use_graphics else 0) == 1

    def deinit(self) -> bool:
        return self._call("deinit") == 1

    def version(self) -> str:
        return _decode(self._call("version"))

    def extended_qt(self) -> bool:
        return self._call("extended_qt") == 1

    def create_global_settings(self) -> Handle:
        return self._call("create_global_settings")

    def set_global_setting(self, settings: Handle, name: str, value: str) -> bool:
        return self._call("set_global_setting", settings, _encode(name), _encode(value)) == 1

    def get_global_setting(self, settings: Handle, name: str) -> Optional[str]:
        return self._read_setting("get_global_setting", settings, name)

    def destroy_global_settings(self, settings: Handle) -> None:
        self._call("destroy_global_settings", settings)

    def set_warning_callback(self, converter: Handle, callback: StrCallback) -> None:
        trampoline = STR_CALLBACK(self._guard("warning", lambda c, s: callback(c, _decode(s))))
        self._register(converter, "warning", trampoline)
        self._call("set_warning_callback", converter, trampoline)

    def set_error_callback(self, converter: Handle, callback: StrCallback) -> None:
        trampoline = STR_CALLBACK(self._guard("error", lambda c, s: callback(c, _decode(s))))
        self._register(converter, "error", trampoline)
        self._call("set_error_callback", converter, trampoline)

    def set_phase_changed_callback(self, converter: Handle, callback: VoidCallback) -> None:
        trampoline = VOID_CALLBACK(self._guard("phase_changed", callback))
        self._register(converter, "phase_changed", trampoline)
        self._call("set_phase_changed_callback", converter, trampoline)

    def set_progress_changed_callback(self, converter: Handle, callback: IntCallback) -> None:
        trampoline = INT_CALLBACK(self._guard("progress_changed", callback))
        self._register(converter, "progress_changed", trampoline)
        self._call("set_progress_changed_callback", converter, trampoline)

    def set_finished_callback(self, converter: Handle, callback: IntCallback) -> None:
        trampoline = INT_CALLBACK(self._guard("finished", callback))
        self._register(converter, "finished", trampoline)
        self._call("set_finished_callback", converter, trampoline)

    def current_phase(self, converter: Handle) -> int:
        return self._call("current_phase", converter)

    def phase_count(self, converter: Handle) -> int:
        return self._call("phase_count", converter)

    def phase_description(self, converter: Handle, phase: int) -> str:
        return _decode(self._call("phase_description", converter, phase))

    def progress_string(self, converter: Handle) -> str:
        return _decode(self._call("progress_string", converter))

    def http_error_code(self, converter: Handle) -> int:
        return self._call("http_error_code", converter)

    def convert(self, converter: Handle) -> bool:
        return self._call("convert", converter) == 1

    def get_output(self, converter: Handle) -> bytes:
        data = POINTER(c_ubyte)()
        size = self._call("get_output", converter, byref(data))
        if size <= 0 or not data:
            return b""
        return ctypes.string_at(data, size)

    def destroy_converter(self, converter: Handle) -> None:
        try:
            self._call("destroy_converter", converter)
        finally:
            self._callbacks.pop(converter, None)

    def _read_setting(self, function: str, settings: Handle, name: str) -> Optional[str]:
        buffer = ctypes.create_string_buffer(SETTING_BUFFER_SIZE)
        if self._call(function, settings, _encode(name), buffer, SETTING_BUFFER_SIZE) != 1:
            return None
        return _decode(buffer.value)

    def _register(self, converter: Handle, name: str, trampoline: Any) -> None:
        self._callbacks.setdefault(converter, {})[name] = trampoline

    def _guard(self, name: str, callback: Callable) -> Callable:
        # Exceptions must not unwind through the native frames.
        def trampoline(*args):
            try:
                callback(*args)
            except Exception:
                logger.exception(f"{self.prefix} {name} callback raised")
        return trampoline


class WkHtmlToPdfAdapter(_CtypesRenderer, PdfRendererPort):
    """wkhtmltopdf entry points over ctypes."""

    prefix = "wkhtmltopdf"
    signatures = _PDF_SIGNATURES

    def create_converter(self, global_settings: Handle) -> Handle:
        return self._call("create_converter", global_settings)

    def create_object_settings(self) -> Handle:
        return self._call("create_object_settings")

    def set_object_setting(self, settings: Handle, name: str, value: str) -> bool:
        return self._call("set_object_setting", settings, _encode(name), _encode(value)) == 1

    def get_object_setting(self, settings: Handle, name: str) -> Optional[str]:
        return self._read_setting("get_object_setting", settings, name)

    def destroy_object_settings(self, settings: Handle) -> None:
        self._call("destroy_object_settings", settings)

    def add_object(self, converter: Handle, object_settings: Handle, html: Optional[str]) -> None:
        self._call("add_object", converter, object_settings, _encode(html))


class WkHtmlToImageAdapter(_CtypesRenderer, ImageRendererPort):
    """wkhtmltoimage entry points over ctypes."""

    prefix = "wkhtmltoimage"
    signatures = _IMAGE_SIGNATURES

    def create_converter(self, global_settings: Handle, html: Optional[str]) -> Handle:
        return self._call("create_converter", global_settings, _encode(html))


def create_bindings(library: ctypes.CDLL, use_graphics: bool = False) -> NativeBindings:
    """Declare both entry-point families on ``library``."""
    return NativeBindings(
        pdf=WkHtmlToPdfAdapter(library),
        image=WkHtmlToImageAdapter(library),
        use_graphics=use_graphics,
    )
