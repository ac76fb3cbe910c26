"""Hostname lookup endpoints."""

from tenancy.presentation.lookup.routes import router

__all__ = ["router"]
