"""Port-level exceptions for the tenancy context.

These exceptions represent failures of directory and provisioning
operations. They are caught and translated by the dependency and
presentation layers.
"""

from enum import StrEnum


class ConflictField(StrEnum):
    """The uniquely-constrained tenant attribute a write collided on."""

    SUBDOMAIN_LABEL = "subdomain_label"
    CUSTOM_DOMAIN = "custom_domain"
    OWNER = "owner_user_id"


class ConflictError(Exception):
    """Raised when a label, domain or owner is already bound to another tenant.

    Raised from the storage uniqueness constraint, so it is reliable under
    concurrent provisioning. ``field`` says which binding collided.
    """

    def __init__(self, field: ConflictField, value: str | None = None):
        self.field = field
        self.value = value
        detail = f" '{value}'" if value is not None else ""
        super().__init__(f"{field.value}{detail} is already taken")


class DirectoryUnavailableError(Exception):
    """Raised when the tenant directory cannot be reached.

    The resolver recovers from this by resolving to no tenant.
    """

    pass


class ProvisioningError(Exception):
    """Raised when no free subdomain label could be found for a new store."""

    pass


class TenantNotFoundError(Exception):
    """Raised when an operation targets a tenant that does not exist."""

    pass


class UnauthorizedError(Exception):
    """Raised when a user who is not the owner of record edits a tenant.

    The presentation layer returns HTTP 403 without exposing details.
    """

    pass
