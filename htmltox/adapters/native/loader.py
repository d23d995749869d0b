"""
Native library loader.

Finds the wkhtmltox shared library for this platform and binds it with ctypes,
once per process. Resolution order:

1. ``HTMLTOX_LIBRARY_PATH``, bound as is
2. the artifact bundled under ``lib/<version>/``, staged into the cache dir
3. a system-wide ``wkhtmltox`` found by ``ctypes.util.find_library``

Load failures are not transient and are never retried.
"""
import ctypes
import ctypes.util
import logging
import os
import platform
import shutil
import sys
import threading
from pathlib import Path
from typing import Callable, Optional, Union

from htmltox.config import settings
from htmltox.core.exceptions import CoreError, LibraryConfigurationError, LibraryLoadError

logger = logging.getLogger(__name__)

BUNDLE_DIR = Path(__file__).parent / "lib"


def library_artifact_name(system: Optional[str] = None, is_64bit: Optional[bool] = None) -> str:
    """Platform-specific file name of the wkhtmltox shared library.

    Examples: ``libwkhtmltox.so``, ``libwkhtmltox.32.so``, ``wkhtmltox.dll``,
    ``libwkhtmltox.dylib``.
    """
    system = system or platform.system()
    if is_64bit is None:
        is_64bit = sys.maxsize > 2 ** 32
    name = "wkhtmltox" if system == "Windows" else "libwkhtmltox"
    if not is_64bit:
        name += ".32"
    if system == "Windows":
        return name + ".dll"
    if system == "Darwin":
        return name + ".dylib"
    return name + ".so"


class LibraryLoader:
    """Resolves, stages and binds the wkhtmltox shared library.

    Args:
        cache_dir: Writable directory bundled artifacts are copied into
        version: Bundled artifact version directory
        library_path: Explicit library file; skips staging and lookup
        bundle_dir: Directory holding ``<version>/<artifact>`` files
        dll_factory: Binds a library path (default: ctypes.CDLL)
    """

    def __init__(
        self,
        cache_dir: Optional[Union[str, Path]] = None,
        version: Optional[str] = None,
        library_path: Optional[Union[str, Path]] = None,
        bundle_dir: Optional[Path] = None,
        dll_factory: Callable[[str], ctypes.CDLL] = ctypes.CDLL,
    ):
        self.cache_dir = Path(cache_dir) if cache_dir else settings.CACHE_DIR
        self.version = version or settings.LIBRARY_VERSION
        self.library_path = library_path if library_path is not None else settings.LIBRARY_PATH
        self.bundle_dir = bundle_dir or BUNDLE_DIR
        self._dll_factory = dll_factory

    @property
    def bundled_artifact(self) -> Path:
        return self.bundle_dir / self.version / library_artifact_name()

    def resolve(self) -> str:
        """Return the path (or system name) of the library to bind.

        Raises:
            LibraryConfigurationError: If the cache directory is unusable
            LibraryLoadError: If no library can be found or staged
        """
        if self.library_path:
            return str(self.library_path)
        if self.bundled_artifact.exists():
            return str(self.stage(self.bundled_artifact))
        system_library = ctypes.util.find_library("wkhtmltox")
        if system_library:
            return system_library
        raise LibraryLoadError(
            f"No wkhtmltox library found: set HTMLTOX_LIBRARY_PATH, bundle "
            f"{self.bundled_artifact} or install wkhtmltox system-wide"
        )

    def stage(self, source: Path) -> Path:
        """Copy ``source`` into the cache directory unless already there."""
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LibraryConfigurationError(
                f"Unable to create wkhtmltox cache directory {self.cache_dir}"
            ) from e
        if not os.access(self.cache_dir, os.W_OK):
            raise LibraryConfigurationError(
                f"wkhtmltox cache directory {self.cache_dir} is not writable"
            )

        target = self.cache_dir / self.version / source.name
        if target.exists():
            return target
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as e:
            raise LibraryLoadError(f"Failed to stage native library {source}") from e
        logger.info(f"Staged native library {source.name} into {target.parent}")
        return target

    def load(self) -> ctypes.CDLL:
        path = self.resolve()
        try:
            library = self._dll_factory(path)
        except OSError as e:
            raise LibraryLoadError(f"Failed to load native library {path}: {e}") from e
        logger.info(f"Loaded native library {path}")
        return library


# Process-wide instance
_library: Optional[ctypes.CDLL] = None
_load_error: Optional[CoreError] = None
_library_lock = threading.Lock()


def load_library() -> ctypes.CDLL:
    """Load the wkhtmltox library once per process and return it.

    A failed load is remembered and raised again on every later call.
    """
    global _library, _load_error
    if _library is None:
        with _library_lock:
            if _load_error is not None:
                raise _load_error
            if _library is None:
                try:
                    _library = LibraryLoader().load()
                except CoreError as e:
                    _load_error = e
                    raise
    return _library
