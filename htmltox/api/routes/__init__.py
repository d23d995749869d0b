"""API routers."""
from htmltox.api.routes.health import create_health_router
from htmltox.api.routes.render import create_render_router

__all__ = ["create_health_router", "create_render_router"]
