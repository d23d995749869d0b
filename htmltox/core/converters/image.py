"""
HTML to image converter.

Usage:
    png = (
        HtmlToImageConverter.from_html("<p>Hello</p>")
        .fmt(ImageFormat.PNG)
        .transparent(True)
        .render_to_stream()
    )
"""
from pathlib import Path
from typing import Any, Dict, Optional, Union

from htmltox.config.presets import load_preset
from htmltox.core.converters.base import BaseConverter
from htmltox.core.executor import TaskExecutor
from htmltox.core.lifecycle import NativeBindings
from htmltox.core.models.options import INPUT_KEY, ImageFormat
from htmltox.core.ports.native import Handle, ImageRendererPort


class HtmlToImageConverter(BaseConverter):
    """Builder for image conversions of a single HTML source."""

    kind = "image"

    def __init__(
        self,
        html: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
        executor: Optional[TaskExecutor] = None,
    ):
        super().__init__(settings, executor)
        self._html = html

    @classmethod
    def from_html(
        cls,
        html: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
        executor: Optional[TaskExecutor] = None,
    ) -> "HtmlToImageConverter":
        """Create a converter for literal HTML.

        Pass ``html=None`` and set ``input_url`` to render a URL instead.
        """
        return cls(html, settings, executor)

    @classmethod
    def from_preset(
        cls,
        path: Union[str, Path],
        html: Optional[str] = None,
        executor: Optional[TaskExecutor] = None,
    ) -> "HtmlToImageConverter":
        return cls(html, load_preset(path), executor)

    @property
    def html(self) -> Optional[str]:
        return self._html

    def crop_left(self, left: int) -> "HtmlToImageConverter":
        """Left/x coordinate of the captured window in pixels."""
        return self.setting("crop.left", left)

    def crop_top(self, top: int) -> "HtmlToImageConverter":
        """Top/y coordinate of the captured window in pixels."""
        return self.setting("crop.top", top)

    def crop_width(self, width: int) -> "HtmlToImageConverter":
        return self.setting("crop.width", width)

    def crop_height(self, height: int) -> "HtmlToImageConverter":
        return self.setting("crop.height", height)

    def cookie_jar(self, path: str) -> "HtmlToImageConverter":
        return self.setting("load.cookieJar", path)

    def transparent(self, transparent: bool) -> "HtmlToImageConverter":
        """Make the white background transparent (PNG and SVG only)."""
        return self.setting("transparent", transparent)

    def input_url(self, url: str) -> "HtmlToImageConverter":
        """URL or path of the page to render when no HTML was given."""
        return self.setting(INPUT_KEY, url)

    def fmt(self, fmt: Union[ImageFormat, str]) -> "HtmlToImageConverter":
        return self.setting("fmt", fmt)

    def screen_width(self, width: int) -> "HtmlToImageConverter":
        return self.setting("screenWidth", width)

    def smart_width(self, smart_width: bool) -> "HtmlToImageConverter":
        """Expand ``screenWidth`` when the content does not fit."""
        return self.setting("smartWidth", smart_width)

    def quality(self, quality: int) -> "HtmlToImageConverter":
        """JPEG compression factor, e.g. 94."""
        return self.setting("quality", quality)

    def _snapshot_source(self) -> Optional[str]:
        return self._html

    def _port(self, bindings: NativeBindings) -> ImageRendererPort:
        return bindings.image

    def _create_converter(
        self, port: ImageRendererPort, global_settings: Handle, source: Optional[str]
    ) -> Handle:
        return port.create_converter(global_settings, source)
