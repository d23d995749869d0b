"""
Runtime configuration.

Values are read from the environment once, at import time. Tests and
embedding applications override them by patching the module attributes.
"""
import os
import tempfile
from pathlib import Path


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


LIBRARY_VERSION = os.getenv("HTMLTOX_LIBRARY_VERSION", "0.12.5")
"""Version directory of the bundled native artifact"""

CACHE_DIR = Path(
    os.getenv("HTMLTOX_CACHE_DIR", os.path.join(tempfile.gettempdir(), "org.wkhtmltopdf"))
)
"""Writable directory the bundled artifact is staged into before loading"""

LIBRARY_PATH = os.getenv("HTMLTOX_LIBRARY_PATH") or None
"""Explicit native library to bind, bypassing staging and system lookup"""

USE_GRAPHICS = _env_flag("HTMLTOX_USE_GRAPHICS")
"""Whether the native init should use a graphics system"""

LOG_LEVEL = os.getenv("HTMLTOX_LOG_LEVEL", "INFO").upper()
"""Log level for the API process"""

API_HOST = os.getenv("HTMLTOX_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("HTMLTOX_API_PORT", "8080"))
