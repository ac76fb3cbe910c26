"""Ports for the tenancy context."""

from tenancy.ports.exceptions import (
    ConflictError,
    ConflictField,
    DirectoryUnavailableError,
    ProvisioningError,
    TenantNotFoundError,
    UnauthorizedError,
)
from tenancy.ports.repositories import ITenantDirectory

__all__ = [
    "ConflictError",
    "ConflictField",
    "DirectoryUnavailableError",
    "ITenantDirectory",
    "ProvisioningError",
    "TenantNotFoundError",
    "UnauthorizedError",
]
