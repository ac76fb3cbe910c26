"""Observation context for domain-oriented observability.

Observation contexts carry request-scoped metadata that every probe event
emitted while serving that request should include.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        user_id: Identifier of the viewer performing the operation, if known.
        tenant_id: Tenant the request was resolved to, if any.
        host: Raw Host header the request arrived on.
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", host="shop1.codeopx.com")
        probe = DefaultTenantResolutionProbe().with_context(context)
    """

    request_id: str | None = None
    user_id: str | None = None
    tenant_id: str | None = None
    host: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.user_id is not None:
            result["user_id"] = self.user_id
        if self.tenant_id is not None:
            result["tenant_id"] = self.tenant_id
        if self.host is not None:
            result["host"] = self.host
        result.update(self.extra)
        return result

    def with_tenant(self, tenant_id: str | None) -> ObservationContext:
        """Create a new context with the resolved tenant set."""
        return replace(self, tenant_id=tenant_id)

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return replace(self, extra={**self.extra, **kwargs})
