"""wkhtmltox shared library adapters (ctypes)."""
from htmltox.adapters.native.loader import LibraryLoader, library_artifact_name, load_library
from htmltox.adapters.native.wkhtmltox import (
    WkHtmlToImageAdapter,
    WkHtmlToPdfAdapter,
    create_bindings,
)

__all__ = [
    "LibraryLoader",
    "library_artifact_name",
    "load_library",
    "WkHtmlToImageAdapter",
    "WkHtmlToPdfAdapter",
    "create_bindings",
]
