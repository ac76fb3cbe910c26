"""Shared request-scope primitives.

Holds the tenant context value object every bounded context reads, and the
probe used by the dependency that attaches it to each request.
"""

from shared_kernel.middleware.tenant_context import (
    ContextSource,
    HostKind,
    TenantContext,
)

__all__ = [
    "ContextSource",
    "HostKind",
    "TenantContext",
]
