"""Promotions domain API package."""

from promotions.api.routes import promotional_router

__all__ = ["promotional_router"]
