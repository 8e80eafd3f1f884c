"""Catalogue domain API package."""

from catalogue.api.routes import catalogue_router

__all__ = ["catalogue_router"]
