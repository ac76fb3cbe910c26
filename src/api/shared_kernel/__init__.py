"""Shared Kernel module.

Components every bounded context agrees on: the per-request ``TenantContext``
and its host kinds, the errors raised around it, the observation context
carried by domain probes, and viewer token verification. Tenancy produces a
TenantContext; Storefront only consumes it.
"""
