"""Pydantic models for tenant lookup responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from shared_kernel.middleware.tenant_context import TenantContext


class TenantContextResponse(BaseModel):
    """A resolved tenant context, as seen by clients."""

    tenant_id: str | None = Field(None, description="Tenant ID (ULID), if matched")
    host_kind: str = Field(..., description="How the host was classified")
    is_owner_viewer: bool = Field(
        False, description="Whether the caller is the store's owner of record"
    )
    display_name: str | None = Field(None, description="Store name")
    subdomain_label: str | None = Field(None, description="Store subdomain label")
    custom_domain: str | None = Field(None, description="Active custom domain")
    source: str = Field("host", description="'host' or 'explicit_parameter'")

    @classmethod
    def from_domain(cls, context: TenantContext) -> TenantContextResponse:
        return cls(
            tenant_id=context.tenant_id,
            host_kind=context.host_kind.value,
            is_owner_viewer=context.is_owner_viewer,
            display_name=context.display_name,
            subdomain_label=context.subdomain_label,
            custom_domain=context.custom_domain,
            source=context.source.value,
        )
