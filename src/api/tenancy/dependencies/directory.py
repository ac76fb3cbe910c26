"""Dependency providers for the tenancy context.

Composes infrastructure resources (sessions, settings) with tenancy
components (directory, resolver, provisioning service).
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_read_session, get_write_session
from infrastructure.settings import TenancySettings, get_tenancy_settings
from tenancy.application.observability import (
    DefaultTenantProvisioningProbe,
    DefaultTenantResolutionProbe,
    TenantProvisioningProbe,
    TenantResolutionProbe,
)
from tenancy.application.services import TenantProvisioningService, TenantResolver
from tenancy.domain.hostname import HostnameRules
from tenancy.infrastructure.tenant_directory import TenantDirectory


def get_hostname_rules(
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
) -> HostnameRules:
    return HostnameRules.from_settings(settings)


def forbidden_labels(settings: TenancySettings) -> frozenset[str]:
    """Labels no store may hold: reserved labels plus bare platform labels."""
    return frozenset(settings.reserved_labels) | frozenset(settings.bare_labels)


def _build_directory(session: AsyncSession, settings: TenancySettings) -> TenantDirectory:
    return TenantDirectory(
        session=session,
        forbidden_labels=forbidden_labels(settings),
        subdomain_max_attempts=settings.subdomain_max_attempts,
        subdomain_random_attempts=settings.subdomain_random_attempts,
    )


def get_lookup_directory(
    session: Annotated[AsyncSession, Depends(get_read_session)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
) -> TenantDirectory:
    """Directory on the read session, used by per-request resolution."""
    return _build_directory(session, settings)


def get_tenant_directory(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
) -> TenantDirectory:
    """Directory on the write session, used by provisioning."""
    return _build_directory(session, settings)


def get_resolution_probe() -> TenantResolutionProbe:
    return DefaultTenantResolutionProbe()


def get_provisioning_probe() -> TenantProvisioningProbe:
    return DefaultTenantProvisioningProbe()


def get_tenant_resolver(
    directory: Annotated[TenantDirectory, Depends(get_lookup_directory)],
    rules: Annotated[HostnameRules, Depends(get_hostname_rules)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
    probe: Annotated[TenantResolutionProbe, Depends(get_resolution_probe)],
) -> TenantResolver:
    """Get a TenantResolver bound to this request's read session."""
    return TenantResolver(
        directory=directory,
        rules=rules,
        bare_labels=settings.bare_labels,
        probe=probe,
    )


def get_provisioning_service(
    directory: Annotated[TenantDirectory, Depends(get_tenant_directory)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    rules: Annotated[HostnameRules, Depends(get_hostname_rules)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
    probe: Annotated[TenantProvisioningProbe, Depends(get_provisioning_probe)],
) -> TenantProvisioningService:
    """Get TenantProvisioningService sharing the directory's write session."""
    return TenantProvisioningService(
        directory=directory,
        session=session,
        rules=rules,
        forbidden_labels=forbidden_labels(settings),
        max_retries=settings.provisioning_max_retries,
        probe=probe,
    )
