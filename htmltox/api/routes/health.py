"""Health check and monitoring routes"""
import asyncio
import logging
import time
from datetime import datetime
from typing import Callable, Optional

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import generate_latest

from htmltox import __version__
from htmltox.api.schemas import HealthResponse
from htmltox.core.exceptions import CoreError
from htmltox.core.executor import TaskExecutor

logger = logging.getLogger(__name__)


def create_health_router(
    start_time: float,
    executor_getter: Callable[[], TaskExecutor],
) -> APIRouter:
    """Create health check router.

    Args:
        start_time: Server start time for uptime calculation
        executor_getter: Callable that returns the native task executor

    Returns:
        FastAPI router with health endpoints
    """
    router = APIRouter()

    def _library_version() -> Optional[str]:
        try:
            return executor_getter().run(lambda bindings: bindings.pdf.version())
        except CoreError as e:
            logger.warning(f"Native library unavailable: {e}")
            return None

    @router.get("/api/v1/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint"""
        loop = asyncio.get_event_loop()
        library_version = await loop.run_in_executor(None, _library_version)

        return HealthResponse(
            status="healthy" if library_version else "degraded",
            timestamp=datetime.now(),
            version=__version__,
            uptime=time.time() - start_time,
            library_version=library_version,
            queue_depth=executor_getter().queue_depth(),
        )

    @router.get("/metrics")
    async def get_metrics():
        """Prometheus metrics endpoint"""
        return Response(generate_latest(), media_type="text/plain")

    return router
