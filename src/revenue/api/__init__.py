"""Revenue domain API package."""

from revenue.api.routes import revenue_router

__all__ = ["revenue_router"]
