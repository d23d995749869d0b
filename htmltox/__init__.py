"""
htmltox: Python bindings for the wkhtmltox HTML to PDF/image library.

Every native call runs on one dedicated worker thread; converters can be
used from any number of application threads.
"""

from htmltox.core.converters import HtmlToImageConverter, HtmlToPdfConverter
from htmltox.core.exceptions import (
    ConfigurationError,
    ConversionError,
    CoreError,
    ExecutionStateError,
    InvalidObjectError,
    LibraryConfigurationError,
    LibraryLoadError,
    ValidationError,
)
from htmltox.core.executor import TaskExecutor, get_task_executor
from htmltox.core.models import (
    ImageFormat,
    ObjectErrorHandling,
    PdfColorMode,
    PdfObject,
    PdfOrientation,
    PdfPageSize,
    Progress,
)

__version__ = "1.0.0"

__all__ = [
    "HtmlToImageConverter",
    "HtmlToPdfConverter",
    "PdfObject",
    "Progress",
    "ImageFormat",
    "ObjectErrorHandling",
    "PdfColorMode",
    "PdfOrientation",
    "PdfPageSize",
    "TaskExecutor",
    "get_task_executor",
    "CoreError",
    "ConfigurationError",
    "LibraryConfigurationError",
    "LibraryLoadError",
    "ValidationError",
    "InvalidObjectError",
    "ConversionError",
    "ExecutionStateError",
]
