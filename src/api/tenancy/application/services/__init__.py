"""Application services for the tenancy context."""

from tenancy.application.services.provisioning_service import (
    TenantProvisioningService,
)
from tenancy.application.services.tenant_resolver import (
    TenantResolver,
    context_for_tenant,
)

__all__ = [
    "TenantProvisioningService",
    "TenantResolver",
    "context_for_tenant",
]
