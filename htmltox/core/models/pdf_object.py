"""
PDF content objects.

A PdfObject is one source (literal HTML or a URL) queued for inclusion in a
multi-page PDF, with its own object settings. Objects are rendered in the
order they were added to the converter.
"""

from typing import Any, Dict, Optional

from htmltox.core.exceptions import InvalidObjectError
from htmltox.core.models.options import PAGE_KEY, ObjectErrorHandling, setting_value


class PdfObject:
    """Builder for a single wkhtmltopdf object."""

    def __init__(self, html: Optional[str], settings: Dict[str, str]):
        self._html = html
        self._settings = settings

    @classmethod
    def for_html(cls, html: str, settings: Optional[Dict[str, Any]] = None) -> "PdfObject":
        """Create an object rendering literal HTML.

        Args:
            html: HTML markup to convert
            settings: Optional initial object settings

        Raises:
            InvalidObjectError: If html is empty or starts with a NUL byte
        """
        if not html or html.startswith("\0"):
            raise InvalidObjectError("No content specified for object.")
        return cls(html, _stringify(settings))

    @classmethod
    def for_url(cls, url: str, settings: Optional[Dict[str, Any]] = None) -> "PdfObject":
        """Create an object whose content is fetched from ``url`` during conversion."""
        values = _stringify(settings)
        values[PAGE_KEY] = url
        return cls(None, values)

    @property
    def html(self) -> Optional[str]:
        return self._html

    @property
    def settings(self) -> Dict[str, str]:
        """Copy of the object settings."""
        return dict(self._settings)

    def setting(self, name: str, value: Any) -> "PdfObject":
        """Set an arbitrary object setting."""
        self._settings[name] = setting_value(value)
        return self

    # Web

    def show_background(self, background: bool) -> "PdfObject":
        return self.setting("web.background", background)

    def load_images(self, load: bool) -> "PdfObject":
        return self.setting("web.loadImages", load)

    def enable_javascript(self, enable: bool) -> "PdfObject":
        return self.setting("web.enableJavascript", enable)

    def enable_intelligent_shrinking(self, enable: bool) -> "PdfObject":
        """Fit more content into pages by shrinking it."""
        return self.setting("web.enableIntelligentShrinking", enable)

    def minimum_font_size(self, size: int) -> "PdfObject":
        return self.setting("web.minimumFontSize", size)

    def use_print_media_type(self, use: bool) -> "PdfObject":
        """Use the "print" CSS media type instead of "screen"."""
        return self.setting("web.printMediaType", use)

    def default_encoding(self, encoding: str) -> "PdfObject":
        """Encoding used when the page does not declare one, e.g. "utf-8"."""
        return self.setting("web.defaultEncoding", encoding)

    def user_stylesheet(self, url_or_path: str) -> "PdfObject":
        return self.setting("web.userStyleSheet", url_or_path)

    # Load

    def auth_username(self, username: str) -> "PdfObject":
        return self.setting("load.username", username)

    def auth_password(self, password: str) -> "PdfObject":
        return self.setting("load.password", password)

    def javascript_delay(self, delay_ms: int) -> "PdfObject":
        """Milliseconds to wait after load before printing, for late javascript."""
        return self.setting("load.jsdelay", delay_ms)

    def zoom_factor(self, factor: float) -> "PdfObject":
        return self.setting("load.zoomFactor", factor)

    def block_local_file_access(self, block: bool) -> "PdfObject":
        return self.setting("load.blockLocalFileAccess", block)

    def stop_slow_script(self, stop: bool) -> "PdfObject":
        return self.setting("load.stopSlowScript", stop)

    def debug_javascript_warnings_and_errors(self, debug: bool) -> "PdfObject":
        """Forward javascript warnings and errors to the converter's warning consumers."""
        return self.setting("load.debugJavascript", debug)

    def handle_errors(self, error_handling: ObjectErrorHandling) -> "PdfObject":
        return self.setting("load.loadErrorHandling", error_handling)

    # Header and footer

    def header_font_size(self, size: int) -> "PdfObject":
        return self.setting("header.fontSize", size)

    def header_font_name(self, font_name: str) -> "PdfObject":
        return self.setting("header.fontName", font_name)

    def header_line(self, line: bool) -> "PdfObject":
        return self.setting("header.line", line)

    def header_spacing(self, spacing: int) -> "PdfObject":
        return self.setting("header.spacing", spacing)

    def header_html_url(self, url: str) -> "PdfObject":
        return self.setting("header.htmlUrl", url)

    def header_left(self, text: str) -> "PdfObject":
        return self.setting("header.left", text)

    def header_center(self, text: str) -> "PdfObject":
        return self.setting("header.center", text)

    def header_right(self, text: str) -> "PdfObject":
        return self.setting("header.right", text)

    def footer_font_size(self, size: int) -> "PdfObject":
        return self.setting("footer.fontSize", size)

    def footer_font_name(self, font_name: str) -> "PdfObject":
        return self.setting("footer.fontName", font_name)

    def footer_line(self, line: bool) -> "PdfObject":
        return self.setting("footer.line", line)

    def footer_spacing(self, spacing: int) -> "PdfObject":
        return self.setting("footer.spacing", spacing)

    def footer_html_url(self, url: str) -> "PdfObject":
        return self.setting("footer.htmlUrl", url)

    def footer_left(self, text: str) -> "PdfObject":
        return self.setting("footer.left", text)

    def footer_center(self, text: str) -> "PdfObject":
        return self.setting("footer.center", text)

    def footer_right(self, text: str) -> "PdfObject":
        return self.setting("footer.right", text)

    # Table of contents

    def table_of_contents_dotted_lines(self, dotted_lines: bool) -> "PdfObject":
        return self.setting("toc.useDottedLines", dotted_lines)

    def table_of_contents_caption_text(self, caption_text: str) -> "PdfObject":
        return self.setting("toc.captionText", caption_text)

    def table_of_contents_forward_links(self, forward: bool) -> "PdfObject":
        """Link table of contents entries to the content."""
        return self.setting("toc.forwardLinks", forward)

    def table_of_contents_back_links(self, back_links: bool) -> "PdfObject":
        """Link content headings back to the table of contents."""
        return self.setting("toc.backLinks", back_links)

    def table_of_contents_indentation(self, indentation: str) -> "PdfObject":
        """Indentation per level as a CSS size, e.g. "2em"."""
        return self.setting("toc.indentation", indentation)

    def table_of_contents_font_scale_down(self, scale: float) -> "PdfObject":
        """Font scale per level; 0.8 shrinks the font by 20% per level."""
        return self.setting("toc.fontScale", scale)

    def table_of_contents_include_sections(self, include: bool) -> "PdfObject":
        return self.setting("includeInOutline", include)

    # Links and forms

    def use_external_links(self, use: bool) -> "PdfObject":
        return self.setting("useExternalLinks", use)

    def convert_internal_links_to_pdf_references(self, convert: bool) -> "PdfObject":
        return self.setting("useLocalLinks", convert)

    def produce_forms(self, produce: bool) -> "PdfObject":
        """Turn HTML forms into PDF forms."""
        return self.setting("produceForms", produce)

    def page_count(self, page_count: bool) -> "PdfObject":
        """Make the page count available to headers, footers and the table of contents."""
        return self.setting("pagesCount", page_count)

    def __repr__(self) -> str:
        source = self._settings.get(PAGE_KEY) or f"<html {len(self._html or '')} chars>"
        return f"PdfObject({source})"


def _stringify(settings: Optional[Dict[str, Any]]) -> Dict[str, str]:
    return {name: setting_value(value) for name, value in (settings or {}).items()}
