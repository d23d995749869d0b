"""Abstract interfaces for the native renderer."""
from htmltox.core.ports.native import (
    Handle,
    ImageRendererPort,
    PdfRendererPort,
    RendererPort,
)

__all__ = [
    "Handle",
    "RendererPort",
    "PdfRendererPort",
    "ImageRendererPort",
]
