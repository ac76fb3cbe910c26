"""Exceptions shared by every context that reads or writes store-owned data."""


class UnresolvedTenantError(Exception):
    """Raised when code that needs a tenant runs under a context without one.

    This is the soft failure of tenant resolution: the request arrived on a
    host that maps to no store. Request handlers translate it into an
    explicit "not a store host" response.
    """

    def __init__(self, host_kind: str, message: str | None = None):
        self.host_kind = host_kind
        super().__init__(message or f"No tenant resolved for host kind '{host_kind}'")


class UnscopedWriteError(Exception):
    """Raised when a store-owned entity is created without a resolved tenant.

    The write does not happen. This is a programming-contract violation and
    is never retried.
    """

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"Refusing to write {entity} without a resolved tenant")
