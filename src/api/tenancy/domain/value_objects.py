"""Value objects for the tenancy domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID

VERIFICATION_RECORD_PREFIX = "_storefront-verify"


@dataclass(frozen=True)
class TenantId:
    """Identifier for a Tenant aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TenantId:
        """Generate a new TenantId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TenantId:
        """Create TenantId from string value.

        Accepts any letter case and returns the canonical uppercase form.

        Args:
            value: ULID string

        Returns:
            TenantId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            parsed = ULID.from_str(value.strip().upper())
        except (ValueError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid TenantId: {value}") from e

        return cls(value=str(parsed))


@dataclass(frozen=True)
class UserId:
    """Identifier of a user account.

    User ids are issued by the accounts service and are opaque here.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("UserId must not be empty")

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


class CustomDomainStatus(StrEnum):
    """Lifecycle of a custom domain binding.

    Only ACTIVE bindings resolve by hostname. The domain itself stays
    reserved to the tenant in every status.
    """

    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class DnsRecord:
    """A DNS record the store owner must publish for their custom domain."""

    type: str
    name: str
    value: str


@dataclass(frozen=True)
class CustomDomainBinding:
    """A fully-qualified hostname bound to a tenant."""

    domain: str
    status: CustomDomainStatus
    verification_token: str

    @classmethod
    def pending(cls, domain: str) -> CustomDomainBinding:
        """Create a fresh binding awaiting DNS verification."""
        return cls(
            domain=domain,
            status=CustomDomainStatus.PENDING,
            verification_token=secrets.token_hex(16),
        )

    @property
    def is_active(self) -> bool:
        return self.status == CustomDomainStatus.ACTIVE

    def with_status(self, status: CustomDomainStatus) -> CustomDomainBinding:
        """Return a copy of this binding in another status."""
        return CustomDomainBinding(
            domain=self.domain,
            status=status,
            verification_token=self.verification_token,
        )

    def dns_records(self, root_domain: str) -> list[DnsRecord]:
        """Records proving ownership and routing the domain to the platform.

        Checking that they exist is done outside this service.
        """
        return [
            DnsRecord(
                type="TXT",
                name=f"{VERIFICATION_RECORD_PREFIX}.{self.domain}",
                value=self.verification_token,
            ),
            DnsRecord(type="CNAME", name=self.domain, value=root_domain),
        ]
