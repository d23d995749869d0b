"""Core domain exceptions.

All exceptions raised by core logic inherit from CoreError.
Adapters catch ctypes/OS errors and re-raise as these.
"""
from typing import List, Optional


class CoreError(Exception):
    """Base for all core domain errors."""
    pass


class ConfigurationError(CoreError):
    """Runtime configuration is unusable."""
    pass


class LibraryConfigurationError(ConfigurationError):
    """Native library cache directory cannot be created or written."""
    pass


class LibraryLoadError(CoreError):
    """Native library could not be staged, bound or initialized."""
    pass


class ValidationError(CoreError):
    """Data validation failed."""
    pass


class InvalidObjectError(ValidationError, ValueError):
    """PDF object was built without usable content."""
    pass


class ConversionError(CoreError):
    """Native converter reported failure.

    Carries the warning/error lines observed during the conversion.
    """

    def __init__(
        self,
        message: str,
        log: Optional[List[str]] = None,
        http_error_code: int = 0,
    ):
        super().__init__(message)
        self.log = list(log or [])
        self.http_error_code = http_error_code


class ExecutionStateError(CoreError):
    """Worker task failed outside the core error hierarchy."""
    pass
