"""
API Pydantic models for the rendering service.

Request/response models used by the render and health endpoints.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, validator

from htmltox.core.models.options import ImageFormat


class PdfObjectRequest(BaseModel):
    """One PDF object: literal HTML or a URL, with its object settings"""

    html: Optional[str] = None
    url: Optional[str] = None
    settings: Dict[str, Any] = Field(default_factory=dict)

    @validator("url", always=True)
    def validate_source(cls, v, values):
        if bool(v) == bool(values.get("html")):
            raise ValueError("Exactly one of html or url must be given")
        return v


class PdfRenderRequest(BaseModel):
    """Request model for PDF rendering"""

    settings: Dict[str, Any] = Field(
        default_factory=dict, description="Global settings, e.g. {'margin.top': '10mm'}"
    )
    objects: List[PdfObjectRequest] = Field(..., min_length=1)


class ImageRenderRequest(BaseModel):
    """Request model for image rendering"""

    html: Optional[str] = None
    url: Optional[str] = None
    format: ImageFormat = ImageFormat.PNG
    settings: Dict[str, Any] = Field(default_factory=dict)

    @validator("url", always=True)
    def validate_source(cls, v, values):
        if bool(v) == bool(values.get("html")):
            raise ValueError("Exactly one of html or url must be given")
        return v


class HealthResponse(BaseModel):
    """Response model for health checks"""

    status: str
    timestamp: datetime
    version: str
    uptime: float
    library_version: Optional[str] = None
    queue_depth: int = 0


class ErrorResponse(BaseModel):
    """Error response model"""

    error: str
    detail: Optional[str] = None
    log: List[str] = Field(default_factory=list)
    http_error_code: int = 0
