"""Domain models: content objects, progress snapshots and setting values."""

from htmltox.core.models.options import (
    INPUT_KEY,
    OUTPUT_KEY,
    PAGE_KEY,
    ImageFormat,
    ObjectErrorHandling,
    PdfColorMode,
    PdfOrientation,
    PdfPageSize,
    setting_value,
)
from htmltox.core.models.pdf_object import PdfObject
from htmltox.core.models.progress import Progress

__all__ = [
    "INPUT_KEY",
    "OUTPUT_KEY",
    "PAGE_KEY",
    "ImageFormat",
    "ObjectErrorHandling",
    "PdfColorMode",
    "PdfOrientation",
    "PdfPageSize",
    "PdfObject",
    "Progress",
    "setting_value",
]
