"""Pydantic models for tenant provisioning requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tenancy.domain.aggregates import Tenant
from tenancy.domain.value_objects import CustomDomainBinding


class ProvisionTenantRequest(BaseModel):
    """Request model for creating a store."""

    name: str = Field(
        ...,
        description="Store name; also seeds the generated subdomain label",
        min_length=1,
        max_length=255,
    )
    subdomain_label: str | None = Field(
        None,
        description="Claim this label instead of generating one",
        min_length=1,
        max_length=63,
    )


class UpdateTenantRequest(BaseModel):
    """Request model for renaming a store or moving its subdomain."""

    display_name: str | None = Field(None, min_length=1, max_length=255)
    subdomain_label: str | None = Field(None, min_length=1, max_length=63)


class BindCustomDomainRequest(BaseModel):
    """Request model for binding a custom domain."""

    domain: str = Field(..., min_length=3, max_length=253)


class DnsRecordResponse(BaseModel):
    type: str
    name: str
    value: str


class CustomDomainResponse(BaseModel):
    """A custom domain binding and the DNS records it needs."""

    domain: str = Field(..., description="Bound hostname")
    status: str = Field(..., description="pending, active or inactive")
    dns_records: list[DnsRecordResponse] = Field(
        default_factory=list, description="Records to publish before activation"
    )

    @classmethod
    def from_domain(
        cls, binding: CustomDomainBinding, root_domain: str
    ) -> CustomDomainResponse:
        return cls(
            domain=binding.domain,
            status=binding.status.value,
            dns_records=[
                DnsRecordResponse(type=r.type, name=r.name, value=r.value)
                for r in binding.dns_records(root_domain)
            ],
        )


class TenantResponse(BaseModel):
    """Response model for a store."""

    id: str = Field(..., description="Tenant ID (ULID format)")
    display_name: str = Field(..., description="Store name")
    subdomain_label: str | None = Field(None, description="Subdomain label")
    store_url: str | None = Field(None, description="https://{label}.{root}")
    custom_domain: CustomDomainResponse | None = None

    @classmethod
    def from_domain(cls, tenant: Tenant, root_domain: str) -> TenantResponse:
        """Convert domain Tenant aggregate to API response."""
        return cls(
            id=tenant.id.value,
            display_name=tenant.display_name,
            subdomain_label=tenant.subdomain_label,
            store_url=(
                f"https://{tenant.subdomain_label}.{root_domain}"
                if tenant.subdomain_label
                else None
            ),
            custom_domain=(
                CustomDomainResponse.from_domain(tenant.custom_domain, root_domain)
                if tenant.custom_domain is not None
                else None
            ),
        )
