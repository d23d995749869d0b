"""Builder-style PDF and image converters."""
from htmltox.core.converters.base import BaseConverter
from htmltox.core.converters.image import HtmlToImageConverter
from htmltox.core.converters.pdf import HtmlToPdfConverter

__all__ = [
    "BaseConverter",
    "HtmlToImageConverter",
    "HtmlToPdfConverter",
]
