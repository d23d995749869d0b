#!/usr/bin/env python3
"""
REST API for HTML to PDF/image rendering.

Requests are handled concurrently by FastAPI; every conversion then queues on
the process-wide native worker thread.
"""
import argparse
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram

from htmltox import __version__
from htmltox.api.routes.health import create_health_router
from htmltox.api.routes.render import create_render_router
from htmltox.api.schemas import ErrorResponse
from htmltox.config import settings
from htmltox.core.exceptions import CoreError, LibraryLoadError
from htmltox.core.executor import TaskExecutor, get_task_executor

logger = logging.getLogger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "htmltox_api_requests_total", "Total API requests", ["method", "endpoint", "status"]
)
REQUEST_DURATION = Histogram("htmltox_api_request_duration_seconds", "Request duration")


class RenderAPI:
    """Rendering API with an injectable native task executor"""

    def __init__(self, executor: Optional[TaskExecutor] = None):
        """Initialize API.

        Args:
            executor: Native task executor (default: process-wide singleton)
        """
        self._executor = executor
        self.start_time = time.time()

        self.app = FastAPI(
            title="htmltox rendering API",
            description="HTML to PDF and image rendering backed by wkhtmltox",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc",
            lifespan=self._lifespan,
        )

        self._setup_middleware()
        self._setup_routes()
        self._setup_error_handlers()

    @property
    def executor(self) -> TaskExecutor:
        if self._executor is None:
            self._executor = get_task_executor()
        return self._executor

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Stop the native worker when the server shuts down"""
        yield
        if self._executor is not None:
            logger.info("Shutting down native worker")
            self._executor.shutdown(wait=False)

    def _setup_middleware(self):
        """Setup API middleware"""
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

        @self.app.middleware("http")
        async def log_requests(request, call_next):
            start_time = time.time()
            response = await call_next(request)
            process_time = time.time() - start_time

            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code,
            ).inc()
            REQUEST_DURATION.observe(process_time)

            logger.info(
                f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s"
            )
            return response

    def _setup_routes(self):
        """Setup API routes"""
        @self.app.get("/")
        async def root():
            return {
                "service": "htmltox rendering API",
                "version": __version__,
                "docs": "/docs",
            }

        self.app.include_router(
            create_health_router(start_time=self.start_time, executor_getter=lambda: self.executor)
        )
        self.app.include_router(create_render_router(executor_getter=lambda: self.executor))

    def _setup_error_handlers(self):
        """Map core errors that escape the routes to JSON responses"""
        @self.app.exception_handler(LibraryLoadError)
        async def library_unavailable(request: Request, exc: LibraryLoadError):
            logger.error(f"Native library unavailable: {exc}")
            body = ErrorResponse(error="Native library unavailable", detail=str(exc))
            return JSONResponse(status_code=503, content=body.dict())

        @self.app.exception_handler(CoreError)
        async def core_error(request: Request, exc: CoreError):
            logger.error(f"Unhandled core error on {request.url.path}: {exc}")
            body = ErrorResponse(error=type(exc).__name__, detail=str(exc))
            return JSONResponse(status_code=500, content=body.dict())


def create_app(executor: Optional[TaskExecutor] = None) -> FastAPI:
    """Create FastAPI application"""
    return RenderAPI(executor).app


def main() -> None:
    parser = argparse.ArgumentParser(description="htmltox rendering API")
    parser.add_argument("--host", default=settings.API_HOST, help="Host to bind to")
    parser.add_argument("--port", type=int, default=settings.API_PORT, help="Port to bind to")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Log level")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
