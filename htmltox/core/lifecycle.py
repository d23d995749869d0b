"""
Native library lifecycle state.

Each renderer family must be initialized once per process before first use
and is never torn down. The executor's worker thread is the only caller, so
the flags need no locking of their own.
"""
import logging
from typing import Set

from htmltox.core.exceptions import LibraryLoadError
from htmltox.core.ports.native import ImageRendererPort, PdfRendererPort, RendererPort

logger = logging.getLogger(__name__)


class NativeBindings:
    """The loaded renderer ports plus their init-once state.

    Args:
        pdf: wkhtmltopdf entry points
        image: wkhtmltoimage entry points
        use_graphics: Passed to each family's ``init``
    """

    def __init__(
        self,
        pdf: PdfRendererPort,
        image: ImageRendererPort,
        use_graphics: bool = False,
    ):
        self.pdf = pdf
        self.image = image
        self.use_graphics = use_graphics
        self._initialized: Set[str] = set()

    def is_initialized(self, kind: str) -> bool:
        return kind in self._initialized

    def ensure_initialized(self, port: RendererPort) -> None:
        """Run the family's one-time ``init`` if it has not run yet.

        Raises:
            LibraryLoadError: If the library reports init failure
        """
        if port.kind in self._initialized:
            return
        if not port.init(self.use_graphics):
            raise LibraryLoadError(f"wkhtmlto{port.kind} init failed")
        self._initialized.add(port.kind)
        logger.info(f"Initialized wkhtmlto{port.kind} {port.version()}")
