"""
Setting value types for the native converters.

Enum members carry the exact string the native library expects.
"""

from enum import Enum
from typing import Any

# Reserved setting names
OUTPUT_KEY = "out"
PAGE_KEY = "page"
INPUT_KEY = "in"


class PdfOrientation(Enum):
    """Page orientation of the output document."""
    PORTRAIT = "Portrait"
    LANDSCAPE = "Landscape"


class PdfColorMode(Enum):
    """Color mode of the output document."""
    COLOR = "Color"
    GRAYSCALE = "Grayscale"


class PdfPageSize(Enum):
    """Paper sizes understood by ``size.pageSize``."""
    A0 = "A0"
    A1 = "A1"
    A2 = "A2"
    A3 = "A3"
    A4 = "A4"
    A5 = "A5"
    A6 = "A6"
    A7 = "A7"
    A8 = "A8"
    A9 = "A9"
    B0 = "B0"
    B1 = "B1"
    B2 = "B2"
    B3 = "B3"
    B4 = "B4"
    B5 = "B5"
    B6 = "B6"
    B7 = "B7"
    B8 = "B8"
    B9 = "B9"
    B10 = "B10"
    C5E = "C5E"
    COMM10E = "Comm10E"
    DLE = "DLE"
    EXECUTIVE = "Executive"
    FOLIO = "Folio"
    LEDGER = "Ledger"
    LEGAL = "Legal"
    LETTER = "Letter"
    TABLOID = "Tabloid"


class ObjectErrorHandling(Enum):
    """How load errors of a single object are handled."""
    ABORT = "abort"
    SKIP = "skip"
    IGNORE = "ignore"


class ImageFormat(Enum):
    """Output formats of the image converter."""
    DEFAULT = ""
    JPG = "jpg"
    PNG = "png"
    BMP = "bmp"
    SVG = "svg"


def setting_value(value: Any) -> str:
    """Stringify a typed setting the way the native library expects it.

    Booleans become "true"/"false", enum members their native value, and
    everything else its ``str`` form.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
