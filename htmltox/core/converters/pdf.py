"""
HTML to PDF converter.

Usage:
    pdf = (
        HtmlToPdfConverter.create()
        .page_size(PdfPageSize.A4)
        .margin_top("15mm")
        .object(PdfObject.for_html("<h1>Report</h1>"))
        .object(PdfObject.for_url("https://example.com/appendix"))
        .on_progress(lambda p: print(p))
        .render_to_stream()
    )
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from htmltox.config.presets import load_preset
from htmltox.core.converters.base import BaseConverter
from htmltox.core.exceptions import ConversionError
from htmltox.core.executor import TaskExecutor
from htmltox.core.lifecycle import NativeBindings
from htmltox.core.models.options import PdfColorMode, PdfOrientation, PdfPageSize
from htmltox.core.models.pdf_object import PdfObject
from htmltox.core.ports.native import Handle, PdfRendererPort

logger = logging.getLogger(__name__)


class HtmlToPdfConverter(BaseConverter):
    """Builder for one or more PDF conversions of an ordered list of objects."""

    kind = "pdf"

    def __init__(
        self,
        settings: Optional[Dict[str, Any]] = None,
        executor: Optional[TaskExecutor] = None,
    ):
        super().__init__(settings, executor)
        self._objects: List[PdfObject] = []

    @classmethod
    def create(
        cls,
        settings: Optional[Dict[str, Any]] = None,
        executor: Optional[TaskExecutor] = None,
    ) -> "HtmlToPdfConverter":
        """Create a converter with optional initial global settings."""
        return cls(settings, executor)

    @classmethod
    def from_preset(
        cls, path: Union[str, Path], executor: Optional[TaskExecutor] = None
    ) -> "HtmlToPdfConverter":
        """Create a converter with global settings loaded from a YAML preset."""
        return cls(load_preset(path), executor)

    @property
    def objects(self) -> List[PdfObject]:
        return list(self._objects)

    def object(self, pdf_object: PdfObject) -> "HtmlToPdfConverter":
        """Append an object. Objects are rendered in the order they are added."""
        self._objects.append(pdf_object)
        return self

    # Global settings

    def disable_smart_shrinking(self, disable: bool) -> "HtmlToPdfConverter":
        """Disable WebKit's shrinking strategy that makes the pixel/dpi ratio non-constant."""
        return self.setting("disable-smart-shrinking", disable)

    def page_size(self, page_size: PdfPageSize) -> "HtmlToPdfConverter":
        return self.setting("size.pageSize", page_size)

    def orientation(self, orientation: PdfOrientation) -> "HtmlToPdfConverter":
        return self.setting("orientation", orientation)

    def color_mode(self, color_mode: PdfColorMode) -> "HtmlToPdfConverter":
        return self.setting("colorMode", color_mode)

    def dpi(self, dpi: int) -> "HtmlToPdfConverter":
        return self.setting("dpi", dpi)

    def collate(self, collate: bool) -> "HtmlToPdfConverter":
        return self.setting("collate", collate)

    def outline(self, outline: bool) -> "HtmlToPdfConverter":
        """Generate the sidebar outline."""
        return self.setting("outline", outline)

    def outline_depth(self, depth: int) -> "HtmlToPdfConverter":
        return self.setting("outlineDepth", depth)

    def document_title(self, title: str) -> "HtmlToPdfConverter":
        return self.setting("documentTitle", title)

    def compression(self, compression: bool) -> "HtmlToPdfConverter":
        """Use lossless compression."""
        return self.setting("useCompression", compression)

    def margin_top(self, margin: str) -> "HtmlToPdfConverter":
        """Top margin as a CSS size, e.g. "5in" or "15px"."""
        return self.setting("margin.top", margin)

    def margin_bottom(self, margin: str) -> "HtmlToPdfConverter":
        return self.setting("margin.bottom", margin)

    def margin_left(self, margin: str) -> "HtmlToPdfConverter":
        return self.setting("margin.left", margin)

    def margin_right(self, margin: str) -> "HtmlToPdfConverter":
        return self.setting("margin.right", margin)

    def image_dpi(self, dpi: int) -> "HtmlToPdfConverter":
        """Maximum DPI for embedded images."""
        return self.setting("imageDPI", dpi)

    def image_quality(self, quality: int) -> "HtmlToPdfConverter":
        """JPEG compression factor (1-100)."""
        return self.setting("imageQuality", quality)

    def cookie_jar(self, path: str) -> "HtmlToPdfConverter":
        return self.setting("load.cookieJar", path)

    # Terminal operations

    def render_to_path(self, path: str) -> bool:
        """Write the PDF to ``path``.

        Returns False without touching the native library when no objects
        have been added.
        """
        if not self._objects:
            logger.warning(f"No objects to convert; not writing {path}")
            return False
        return super().render_to_path(path)

    def render_to_stream(self) -> bytes:
        if not self._objects:
            raise ConversionError("No objects to convert.")
        return super().render_to_stream()

    # Native flow

    def _snapshot_source(self) -> List[Tuple[Optional[str], Dict[str, str]]]:
        return [(pdf_object.html, pdf_object.settings) for pdf_object in self._objects]

    def _port(self, bindings: NativeBindings) -> PdfRendererPort:
        return bindings.pdf

    def _create_converter(
        self,
        port: PdfRendererPort,
        global_settings: Handle,
        source: List[Tuple[Optional[str], Dict[str, str]]],
    ) -> Handle:
        return port.create_converter(global_settings)

    def _add_objects(
        self,
        port: PdfRendererPort,
        converter: Handle,
        source: List[Tuple[Optional[str], Dict[str, str]]],
    ) -> None:
        for html, settings in source:
            object_settings = port.create_object_settings()
            for name, value in settings.items():
                if not port.set_object_setting(object_settings, name, value):
                    logger.debug(f"wkhtmltopdf rejected object setting {name}={value!r}")
            port.add_object(converter, object_settings, html)
