"""HTTP routes for hostname lookups.

Client code (the storefront UI, SDKs) resolves the hostname it is running
on through ``/tenancy/lookup`` and forwards the viewer's bearer token so
``is_owner_viewer`` is computed here, against the owner of record.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from shared_kernel.middleware.tenant_context import TenantContext
from tenancy.application.services import TenantResolver
from tenancy.application.value_objects import Viewer
from tenancy.dependencies.directory import get_tenant_resolver
from tenancy.dependencies.tenant_context import get_tenant_context
from tenancy.dependencies.viewer import get_viewer
from tenancy.presentation.lookup.models import TenantContextResponse

router = APIRouter(tags=["tenancy"])


@router.get("/lookup")
async def lookup_host(
    host: Annotated[str, Query(description="Hostname to resolve", max_length=300)],
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
    viewer: Annotated[Viewer | None, Depends(get_viewer)],
) -> TenantContextResponse:
    """Resolve an arbitrary hostname to a tenant context.

    A host that maps to no store is a normal answer (``tenant_id`` null),
    not an error.
    """
    viewer_user_id = viewer.user_id.value if viewer is not None else None
    context = await resolver.resolve(host, viewer_user_id)
    return TenantContextResponse.from_domain(context)


@router.get("/context")
async def current_context(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
) -> TenantContextResponse:
    """The tenant context this request itself was resolved to."""
    return TenantContextResponse.from_domain(context)
