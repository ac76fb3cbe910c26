"""Tenant context FastAPI dependency.

Resolves the tenant a request belongs to from its ``Host`` header and
attaches the result to ``request.state.tenant_context``. No other header
takes part; ``X-Forwarded-Host`` in particular is ignored.

A ``tenant_id`` query parameter can name a tenant explicitly, but the host
always wins:

- On a store host, a disagreeing ``tenant_id`` is ignored (and reported).
- On a host that resolves to no store, ``tenant_id`` is honored only for
  the signed-in owner of record of that tenant. Anyone else keeps the
  tenant-less context.

Usage in FastAPI routes:
    @router.get("/products")
    async def list_products(
        tenant: Annotated[TenantContext, Depends(require_tenant_context)],
    ):
        # tenant.tenant_id is the store this request is scoped to
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Query, Request, status

from shared_kernel.exceptions import UnresolvedTenantError
from shared_kernel.middleware.observability import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from shared_kernel.middleware.tenant_context import ContextSource, TenantContext
from shared_kernel.observability_context import ObservationContext
from tenancy.application.services import TenantResolver, context_for_tenant
from tenancy.application.value_objects import Viewer
from tenancy.dependencies.directory import get_lookup_directory, get_tenant_resolver
from tenancy.dependencies.viewer import get_viewer
from tenancy.domain.value_objects import TenantId
from tenancy.ports.exceptions import DirectoryUnavailableError
from tenancy.ports.repositories import ITenantDirectory

NOT_A_STORE_HOST = "not_a_store_host"
NOT_STORE_OWNER = "not_store_owner"


async def resolve_request_context(
    host: str | None,
    requested_tenant_id: str | None,
    viewer_user_id: str | None,
    resolver: TenantResolver,
    directory: ITenantDirectory,
    probe: TenantContextProbe,
) -> TenantContext:
    """Resolve the tenant context for one request.

    This is the core logic for the tenant context dependency.

    Args:
        host: The request's Host header.
        requested_tenant_id: The explicit ``tenant_id`` parameter, if any.
        viewer_user_id: The signed-in viewer, or None when anonymous.
        resolver: Hostname resolver.
        directory: Directory used to look up an explicit tenant.
        probe: Domain probe for observability.

    Returns:
        The request's TenantContext.
    """
    context = await resolver.resolve(host, viewer_user_id)

    if requested_tenant_id is not None:
        context = await _apply_explicit_tenant(
            context=context,
            requested_tenant_id=requested_tenant_id,
            viewer_user_id=viewer_user_id,
            directory=directory,
            probe=probe,
        )

    probe.context_attached(
        host_kind=context.host_kind.value,
        tenant_id=context.tenant_id,
        source=context.source.value,
        is_owner_viewer=context.is_owner_viewer,
    )
    return context


async def _apply_explicit_tenant(
    context: TenantContext,
    requested_tenant_id: str,
    viewer_user_id: str | None,
    directory: ITenantDirectory,
    probe: TenantContextProbe,
) -> TenantContext:
    try:
        requested = TenantId.from_string(requested_tenant_id)
    except ValueError:
        requested = None

    if context.tenant_id is not None:
        if requested is None or requested.value != context.tenant_id:
            probe.explicit_tenant_overridden_by_host(
                host_tenant_id=context.tenant_id,
                requested_tenant_id=requested_tenant_id,
            )
        return context

    def ignore(reason: str) -> TenantContext:
        probe.explicit_tenant_ignored(
            requested_tenant_id=requested_tenant_id,
            user_id=viewer_user_id,
            reason=reason,
        )
        return context

    if viewer_user_id is None:
        return ignore("anonymous_viewer")
    if requested is None:
        return ignore("invalid_tenant_id")

    try:
        tenant = await directory.get_by_id(requested)
    except DirectoryUnavailableError:
        return ignore("directory_unavailable")

    if tenant is None or tenant.is_orphaned:
        return ignore("unknown_tenant")
    if not tenant.is_owned_by(viewer_user_id):
        return ignore("not_owner")

    probe.explicit_tenant_honored(tenant_id=tenant.id.value, user_id=viewer_user_id)
    return context_for_tenant(
        tenant,
        context.host_kind,
        viewer_user_id,
        source=ContextSource.EXPLICIT_PARAMETER,
    )


def get_tenant_context_probe() -> TenantContextProbe:
    return DefaultTenantContextProbe()


async def get_tenant_context(
    request: Request,
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
    directory: Annotated[ITenantDirectory, Depends(get_lookup_directory)],
    viewer: Annotated[Viewer | None, Depends(get_viewer)],
    probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
    tenant_id: Annotated[
        str | None,
        Query(description="Explicit tenant; honored only for the store's owner"),
    ] = None,
) -> TenantContext:
    """FastAPI dependency attaching the tenant context to the request."""
    host = request.headers.get("host")
    viewer_user_id = viewer.user_id.value if viewer is not None else None
    probe = probe.with_context(
        ObservationContext(
            request_id=request.headers.get("x-request-id"),
            user_id=viewer_user_id,
            host=host,
        )
    )

    context = await resolve_request_context(
        host=host,
        requested_tenant_id=tenant_id,
        viewer_user_id=viewer_user_id,
        resolver=resolver,
        directory=directory,
        probe=probe,
    )
    request.state.tenant_context = context
    return context


def require_tenant_context(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
) -> TenantContext:
    """Require that the request resolved to a store.

    Raises:
        HTTPException 404: With code ``not_a_store_host`` otherwise
    """
    try:
        context.require_tenant_id()
    except UnresolvedTenantError as e:
        probe.tenant_required(host_kind=e.host_kind)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "code": NOT_A_STORE_HOST,
                "message": "This host does not belong to a store",
                "host_kind": e.host_kind,
            },
        ) from e
    return context


def require_owner_context(
    context: Annotated[TenantContext, Depends(require_tenant_context)],
    viewer: Annotated[Viewer | None, Depends(get_viewer)],
    probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
) -> TenantContext:
    """Require that the viewer administers the request's store.

    Raises:
        HTTPException 404: If the host does not belong to a store
        HTTPException 401: If the viewer is anonymous
        HTTPException 403: If the viewer is not the owner of record
    """
    if context.is_owner_viewer:
        return context

    assert context.tenant_id is not None
    user_id = viewer.user_id.value if viewer is not None else None
    probe.owner_required(tenant_id=context.tenant_id, user_id=user_id)
    if viewer is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sign in required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={
            "code": NOT_STORE_OWNER,
            "message": "Only the store owner can use this page",
        },
    )
