"""Storefront API package."""

from storefront.api.admin import admin_router
from storefront.api.routes import checkout_router, geography_router, variant_router

__all__ = ["variant_router", "geography_router", "checkout_router", "admin_router"]
