"""Storefront API package."""

from storefront.api.errors import register_error_handlers
from storefront.api.routes import admin_router, storefront_router

__all__ = ["storefront_router", "admin_router", "register_error_handlers"]
