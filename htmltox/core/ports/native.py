"""Native renderer port interfaces.

Defines the contract for the wkhtmltox entry points. Core code depends only on
these abstractions, not on ctypes or a particular library build.

Handles are opaque values returned by the implementation. Callbacks are plain
callables taking ``(converter, value)``; implementations own any foreign
trampolines and keep them alive until the converter is destroyed.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

Handle = Any
StrCallback = Callable[[Handle, str], None]
IntCallback = Callable[[Handle, int], None]
VoidCallback = Callable[[Handle], None]


class RendererPort(ABC):
    """Entry points shared by the wkhtmltopdf and wkhtmltoimage families.

    Implementations: WkHtmlToPdfAdapter, WkHtmlToImageAdapter
    """

    kind: str = ""

    @abstractmethod
    def init(self, use_graphics: bool = False) -> bool:
        """Set up the library. Must run before any other entry point.

        Args:
            use_graphics: Whether the library should use a graphics system

        Returns:
            True on success
        """
        pass

    @abstractmethod
    def deinit(self) -> bool:
        """Release library resources. No entry point may be used afterwards."""
        pass

    @abstractmethod
    def version(self) -> str:
        """Return the library version string, e.g. ``0.12.5``."""
        pass

    @abstractmethod
    def extended_qt(self) -> bool:
        """Return True if the library was built against patched Qt."""
        pass

    @abstractmethod
    def create_global_settings(self) -> Handle:
        """Create a global settings object."""
        pass

    @abstractmethod
    def set_global_setting(self, settings: Handle, name: str, value: str) -> bool:
        """Alter a global setting.

        Returns:
            True if the library accepted the setting
        """
        pass

    @abstractmethod
    def get_global_setting(self, settings: Handle, name: str) -> Optional[str]:
        """Read a global setting back, or None if it does not exist."""
        pass

    @abstractmethod
    def destroy_global_settings(self, settings: Handle) -> None:
        """Destroy a global settings object not handed to a converter."""
        pass

    @abstractmethod
    def set_warning_callback(self, converter: Handle, callback: StrCallback) -> None:
        pass

    @abstractmethod
    def set_error_callback(self, converter: Handle, callback: StrCallback) -> None:
        pass

    @abstractmethod
    def set_phase_changed_callback(self, converter: Handle, callback: VoidCallback) -> None:
        pass

    @abstractmethod
    def set_progress_changed_callback(self, converter: Handle, callback: IntCallback) -> None:
        """Register a callback receiving the percent done within the current phase."""
        pass

    @abstractmethod
    def set_finished_callback(self, converter: Handle, callback: IntCallback) -> None:
        """Register a callback receiving 1 on success and 0 otherwise."""
        pass

    @abstractmethod
    def current_phase(self, converter: Handle) -> int:
        pass

    @abstractmethod
    def phase_count(self, converter: Handle) -> int:
        pass

    @abstractmethod
    def phase_description(self, converter: Handle, phase: int) -> str:
        pass

    @abstractmethod
    def progress_string(self, converter: Handle) -> str:
        pass

    @abstractmethod
    def http_error_code(self, converter: Handle) -> int:
        """Largest HTTP status >= 300 seen while loading, or 0."""
        pass

    @abstractmethod
    def convert(self, converter: Handle) -> bool:
        """Run the conversion. Blocks until rendering completes or fails.

        Returns:
            True on success
        """
        pass

    @abstractmethod
    def get_output(self, converter: Handle) -> bytes:
        """Copy the in-memory output of a conversion run without ``out``."""
        pass

    @abstractmethod
    def destroy_converter(self, converter: Handle) -> None:
        """Destroy a converter. It may not be used afterwards."""
        pass


class PdfRendererPort(RendererPort):
    """wkhtmltopdf entry points."""

    kind = "pdf"

    @abstractmethod
    def create_converter(self, global_settings: Handle) -> Handle:
        """Create a converter. Ownership of the settings transfers to it."""
        pass

    @abstractmethod
    def create_object_settings(self) -> Handle:
        pass

    @abstractmethod
    def set_object_setting(self, settings: Handle, name: str, value: str) -> bool:
        pass

    @abstractmethod
    def get_object_setting(self, settings: Handle, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def destroy_object_settings(self, settings: Handle) -> None:
        pass

    @abstractmethod
    def add_object(
        self, converter: Handle, object_settings: Handle, html: Optional[str]
    ) -> None:
        """Append an object to the converter.

        Objects appear in the output in the order they were added. When
        ``html`` is given it is rendered instead of the ``page`` setting.
        Ownership of the settings transfers to the converter.
        """
        pass


class ImageRendererPort(RendererPort):
    """wkhtmltoimage entry points."""

    kind = "image"

    @abstractmethod
    def create_converter(self, global_settings: Handle, html: Optional[str]) -> Handle:
        """Create a converter for ``html`` (or the ``in`` setting when None)."""
        pass
