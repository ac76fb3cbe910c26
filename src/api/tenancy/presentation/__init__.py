"""Tenancy presentation layer.

Organized by concern: hostname lookups and store provisioning each have
their own routes and models.
"""

from __future__ import annotations

from fastapi import APIRouter

from tenancy.presentation import lookup, tenants

router = APIRouter(
    prefix="/tenancy",
    tags=["tenancy"],
)

router.include_router(lookup.router)
router.include_router(tenants.router)

__all__ = ["router"]
