"""Domain-Oriented Observability for the tenancy application layer."""

from tenancy.application.observability.provisioning_probe import (
    DefaultTenantProvisioningProbe,
    TenantProvisioningProbe,
)
from tenancy.application.observability.resolution_probe import (
    DefaultTenantResolutionProbe,
    TenantResolutionProbe,
)

__all__ = [
    "DefaultTenantProvisioningProbe",
    "DefaultTenantResolutionProbe",
    "TenantProvisioningProbe",
    "TenantResolutionProbe",
]
