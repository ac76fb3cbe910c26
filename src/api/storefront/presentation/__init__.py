"""Storefront presentation layer."""

from storefront.presentation.routes import router

__all__ = ["router"]
