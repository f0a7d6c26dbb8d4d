"""API routes module."""
from regain.api.routes.generation import router as generation_router
from regain.api.routes.health import router as health_router

__all__ = [
    "generation_router",
    "health_router",
]
