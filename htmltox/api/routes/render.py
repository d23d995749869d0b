"""Rendering routes"""
import asyncio
import logging
from typing import Callable

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse, Response

from htmltox.api.schemas import ErrorResponse, ImageRenderRequest, PdfRenderRequest
from htmltox.core.converters import HtmlToImageConverter, HtmlToPdfConverter
from htmltox.core.exceptions import ConversionError, ValidationError
from htmltox.core.executor import TaskExecutor
from htmltox.core.models.options import ImageFormat
from htmltox.core.models.pdf_object import PdfObject

logger = logging.getLogger(__name__)

_IMAGE_MEDIA_TYPES = {
    ImageFormat.DEFAULT: "image/png",
    ImageFormat.PNG: "image/png",
    ImageFormat.JPG: "image/jpeg",
    ImageFormat.BMP: "image/bmp",
    ImageFormat.SVG: "image/svg+xml",
}


def _conversion_failed(error: ConversionError) -> JSONResponse:
    body = ErrorResponse(
        error="Conversion failed",
        detail=str(error),
        log=error.log,
        http_error_code=error.http_error_code,
    )
    return JSONResponse(status_code=422, content=body.dict())


def create_render_router(executor_getter: Callable[[], TaskExecutor]) -> APIRouter:
    """Create rendering router.

    Args:
        executor_getter: Callable that returns the native task executor

    Returns:
        FastAPI router with PDF and image endpoints
    """
    router = APIRouter()

    @router.post("/api/v1/render/pdf")
    async def render_pdf(request: PdfRenderRequest):
        """Render one or more HTML objects into a single PDF"""
        try:
            converter = HtmlToPdfConverter.create(request.settings, executor=executor_getter())
            for obj in request.objects:
                if obj.html:
                    converter.object(PdfObject.for_html(obj.html, obj.settings))
                else:
                    converter.object(PdfObject.for_url(obj.url, obj.settings))
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))

        loop = asyncio.get_event_loop()
        try:
            pdf = await loop.run_in_executor(None, converter.render_to_stream)
        except ConversionError as e:
            logger.warning(f"PDF render failed: {e.log}")
            return _conversion_failed(e)

        logger.info(f"Rendered PDF: {len(request.objects)} objects, {len(pdf)} bytes")
        return Response(content=pdf, media_type="application/pdf")

    @router.post("/api/v1/render/image")
    async def render_image(request: ImageRenderRequest):
        """Render HTML or a URL into an image"""
        converter = (
            HtmlToImageConverter.from_html(request.html, request.settings, executor=executor_getter())
            .fmt(request.format)
        )
        if request.url:
            converter.input_url(request.url)

        loop = asyncio.get_event_loop()
        try:
            image = await loop.run_in_executor(None, converter.render_to_stream)
        except ConversionError as e:
            logger.warning(f"Image render failed: {e.log}")
            return _conversion_failed(e)

        logger.info(f"Rendered {request.format.value or 'default'} image: {len(image)} bytes")
        return Response(content=image, media_type=_IMAGE_MEDIA_TYPES[request.format])

    return router
