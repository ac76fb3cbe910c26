"""HTTP routes for store provisioning and hostname bindings."""

from __future__ import annotations

from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Response, status

from infrastructure.settings import TenancySettings, get_tenancy_settings
from tenancy.application.services import TenantProvisioningService
from tenancy.application.value_objects import Viewer
from tenancy.dependencies.directory import get_provisioning_service
from tenancy.dependencies.viewer import require_viewer
from tenancy.domain.exceptions import CustomDomainStateError
from tenancy.domain.value_objects import TenantId
from tenancy.ports.exceptions import (
    ConflictError,
    DirectoryUnavailableError,
    ProvisioningError,
    TenantNotFoundError,
    UnauthorizedError,
)
from tenancy.presentation.tenants.models import (
    BindCustomDomainRequest,
    CustomDomainResponse,
    ProvisionTenantRequest,
    TenantResponse,
    UpdateTenantRequest,
)

router = APIRouter(
    prefix="/tenants",
    tags=["tenants"],
)


def _raise_http(error: Exception) -> NoReturn:
    """Translate a tenancy error into its HTTP response."""
    if isinstance(error, ConflictError):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "conflict", "field": error.field.value, "message": str(error)},
        ) from error
    if isinstance(error, (ProvisioningError, DirectoryUnavailableError)):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Store provisioning is temporarily unavailable",
        ) from error
    if isinstance(error, TenantNotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(error)
        ) from error
    if isinstance(error, UnauthorizedError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the store owner can change this store",
        ) from error
    if isinstance(error, CustomDomainStateError):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(error)
        ) from error
    if isinstance(error, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(error)
        ) from error
    raise error


def _parse_tenant_id(tenant_id: str) -> TenantId:
    try:
        return TenantId.from_string(tenant_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid tenant ID format: {e}",
        ) from e


_HANDLED = (
    ConflictError,
    ProvisioningError,
    DirectoryUnavailableError,
    TenantNotFoundError,
    UnauthorizedError,
    CustomDomainStateError,
    ValueError,
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def provision_tenant(
    request: ProvisionTenantRequest,
    viewer: Annotated[Viewer, Depends(require_viewer)],
    service: Annotated[TenantProvisioningService, Depends(get_provisioning_service)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
) -> TenantResponse:
    """Create a store owned by the signed-in user.

    Raises:
        HTTPException: 400 if the requested label is malformed
        HTTPException: 409 if the user already has a store or the label is taken
        HTTPException: 503 if no free label could be secured
    """
    try:
        tenant = await service.provision_tenant(
            seed_name=request.name,
            owner_user_id=viewer.user_id,
            display_name=request.name,
            subdomain_label=request.subdomain_label,
        )
    except _HANDLED as e:
        _raise_http(e)
    return TenantResponse.from_domain(tenant, settings.root_domain)


@router.get("/mine")
async def get_my_tenant(
    viewer: Annotated[Viewer, Depends(require_viewer)],
    service: Annotated[TenantProvisioningService, Depends(get_provisioning_service)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
) -> TenantResponse:
    """The signed-in user's store."""
    tenant = await service.get_owned_tenant(viewer.user_id)
    if tenant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="You do not have a store yet",
        )
    return TenantResponse.from_domain(tenant, settings.root_domain)


@router.patch("/{tenant_id}")
async def update_tenant(
    tenant_id: str,
    request: UpdateTenantRequest,
    viewer: Annotated[Viewer, Depends(require_viewer)],
    service: Annotated[TenantProvisioningService, Depends(get_provisioning_service)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
) -> TenantResponse:
    """Rename a store or move it to another subdomain label."""
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        tenant = await service.update_store(
            tenant_id=tenant_id_obj,
            user_id=viewer.user_id,
            display_name=request.display_name,
            subdomain_label=request.subdomain_label,
        )
    except _HANDLED as e:
        _raise_http(e)
    return TenantResponse.from_domain(tenant, settings.root_domain)


@router.put("/{tenant_id}/custom-domain")
async def bind_custom_domain(
    tenant_id: str,
    request: BindCustomDomainRequest,
    viewer: Annotated[Viewer, Depends(require_viewer)],
    service: Annotated[TenantProvisioningService, Depends(get_provisioning_service)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
) -> CustomDomainResponse:
    """Bind a custom domain; it resolves once activated."""
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        binding = await service.bind_custom_domain(
            tenant_id=tenant_id_obj,
            user_id=viewer.user_id,
            domain=request.domain,
        )
    except _HANDLED as e:
        _raise_http(e)
    return CustomDomainResponse.from_domain(binding, settings.root_domain)


@router.post("/{tenant_id}/custom-domain/activate")
async def activate_custom_domain(
    tenant_id: str,
    viewer: Annotated[Viewer, Depends(require_viewer)],
    service: Annotated[TenantProvisioningService, Depends(get_provisioning_service)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
) -> CustomDomainResponse:
    """Start resolving the bound custom domain after DNS verification."""
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        binding = await service.activate_custom_domain(
            tenant_id=tenant_id_obj, user_id=viewer.user_id
        )
    except _HANDLED as e:
        _raise_http(e)
    return CustomDomainResponse.from_domain(binding, settings.root_domain)


@router.post("/{tenant_id}/custom-domain/deactivate")
async def deactivate_custom_domain(
    tenant_id: str,
    viewer: Annotated[Viewer, Depends(require_viewer)],
    service: Annotated[TenantProvisioningService, Depends(get_provisioning_service)],
    settings: Annotated[TenancySettings, Depends(get_tenancy_settings)],
) -> CustomDomainResponse:
    """Stop resolving the custom domain; it stays reserved to this store."""
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        binding = await service.deactivate_custom_domain(
            tenant_id=tenant_id_obj, user_id=viewer.user_id
        )
    except _HANDLED as e:
        _raise_http(e)
    return CustomDomainResponse.from_domain(binding, settings.root_domain)


@router.delete(
    "/{tenant_id}/custom-domain", status_code=status.HTTP_204_NO_CONTENT
)
async def unbind_custom_domain(
    tenant_id: str,
    viewer: Annotated[Viewer, Depends(require_viewer)],
    service: Annotated[TenantProvisioningService, Depends(get_provisioning_service)],
) -> Response:
    """Release the store's custom domain."""
    tenant_id_obj = _parse_tenant_id(tenant_id)
    try:
        await service.unbind_custom_domain(
            tenant_id=tenant_id_obj, user_id=viewer.user_id
        )
    except _HANDLED as e:
        _raise_http(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
