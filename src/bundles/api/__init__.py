"""Bundles domain API package."""

from bundles.api.routes import router as package_router

__all__ = ["package_router"]
