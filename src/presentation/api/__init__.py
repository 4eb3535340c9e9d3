"""HTTP and WebSocket routes."""

from .routes.router import router as api_router

__all__ = ["api_router"]
