"""Tenant qualification of same-origin API paths."""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from shared_kernel.middleware.tenant_context import TenantContext

TENANT_PARAM = "tenant_id"


def qualify_api_path(path: str, context: TenantContext | None) -> str:
    """Add ``tenant_id=<id>`` to a relative API path.

    Absolute URLs, paths under a tenant-less (or pending) context, and
    paths that already carry ``tenant_id`` are returned unchanged, so
    qualifying twice is the same as qualifying once.

    Example: ``/storefront/products?page=2`` becomes
    ``/storefront/products?page=2&tenant_id=<id>``.
    """
    if context is None or context.tenant_id is None:
        return path

    parts = urlsplit(path)
    if parts.scheme or parts.netloc:
        return path

    existing = parse_qsl(parts.query, keep_blank_values=True)
    if any(key == TENANT_PARAM for key, _ in existing):
        return path

    # the existing query is kept byte for byte
    param = urlencode({TENANT_PARAM: context.tenant_id})
    query = f"{parts.query}&{param}" if parts.query else param
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
