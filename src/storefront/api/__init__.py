"""Storefront API package."""

from storefront.api.routes import actions_router, pages_router

__all__ = ["actions_router", "pages_router"]
