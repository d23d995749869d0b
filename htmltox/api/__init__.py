"""
htmltox rendering API

FastAPI-based REST API for HTML to PDF/image conversion.
"""

from .service import RenderAPI, create_app

__all__ = ["create_app", "RenderAPI"]
