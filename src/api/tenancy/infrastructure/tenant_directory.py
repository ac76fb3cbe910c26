"""SQLAlchemy implementation of ITenantDirectory.

Uniqueness of subdomain labels, custom domains and owners is left to the
unique indexes on the tenants table: a lost race surfaces as an
IntegrityError at flush time and is translated into ConflictError naming
the colliding binding.
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.aggregates import Tenant
from tenancy.domain.subdomain_labels import candidate_labels
from tenancy.domain.value_objects import (
    CustomDomainBinding,
    CustomDomainStatus,
    TenantId,
    UserId,
)
from tenancy.infrastructure.models import TenantModel
from tenancy.infrastructure.models.tenant import (
    CUSTOM_DOMAIN_INDEX,
    OWNER_INDEX,
    SUBDOMAIN_LABEL_INDEX,
)
from tenancy.infrastructure.observability import (
    DefaultTenantDirectoryProbe,
    TenantDirectoryProbe,
)
from tenancy.ports.exceptions import (
    ConflictError,
    ConflictField,
    DirectoryUnavailableError,
    ProvisioningError,
    TenantNotFoundError,
)
from tenancy.ports.repositories import ITenantDirectory

# PostgreSQL reports the violated index name, SQLite the table.column.
_CONFLICT_MARKERS: tuple[tuple[ConflictField, tuple[str, ...]], ...] = (
    (ConflictField.SUBDOMAIN_LABEL, (SUBDOMAIN_LABEL_INDEX, "tenants.subdomain_label")),
    (ConflictField.CUSTOM_DOMAIN, (CUSTOM_DOMAIN_INDEX, "tenants.custom_domain")),
    (ConflictField.OWNER, (OWNER_INDEX, "tenants.owner_user_id")),
)


def _conflict_field(error: IntegrityError) -> ConflictField | None:
    message = str(error.orig)
    for field, markers in _CONFLICT_MARKERS:
        if any(marker in message for marker in markers):
            return field
    return None


def _conflict_value(tenant: Tenant, field: ConflictField) -> str | None:
    if field == ConflictField.SUBDOMAIN_LABEL:
        return tenant.subdomain_label
    if field == ConflictField.CUSTOM_DOMAIN:
        return tenant.custom_domain.domain if tenant.custom_domain else None
    return tenant.owner_user_id.value


class TenantDirectory(ITenantDirectory):
    """Tenant directory backed by the tenants table."""

    def __init__(
        self,
        session: AsyncSession,
        probe: TenantDirectoryProbe | None = None,
        forbidden_labels: Iterable[str] = (),
        subdomain_max_attempts: int = 20,
        subdomain_random_attempts: int = 5,
    ) -> None:
        """Initialize the directory.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
            forbidden_labels: Labels generate_unique_subdomain never returns
                (reserved and bare platform labels)
            subdomain_max_attempts: Sequential label candidates to try
            subdomain_random_attempts: Random-suffix candidates to try after
        """
        self._session = session
        self._probe = probe or DefaultTenantDirectoryProbe()
        self._forbidden_labels = frozenset(forbidden_labels)
        self._max_attempts = subdomain_max_attempts
        self._random_attempts = subdomain_random_attempts

    async def find_by_subdomain(self, label: str) -> Tenant | None:
        stmt = select(TenantModel).where(TenantModel.subdomain_label == label)
        return await self._find_one(stmt, lookup="subdomain", key=label)

    async def find_by_custom_domain(self, domain: str) -> Tenant | None:
        stmt = select(TenantModel).where(
            TenantModel.custom_domain == domain,
            TenantModel.custom_domain_status == CustomDomainStatus.ACTIVE.value,
        )
        return await self._find_one(stmt, lookup="custom_domain", key=domain)

    async def find_by_owner(self, user_id: UserId) -> Tenant | None:
        stmt = select(TenantModel).where(TenantModel.owner_user_id == user_id.value)
        return await self._find_one(stmt, lookup="owner", key=user_id.value)

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        stmt = select(TenantModel).where(TenantModel.id == tenant_id.value)
        return await self._find_one(stmt, lookup="id", key=tenant_id.value)

    async def create(self, tenant: Tenant) -> None:
        """Insert a new tenant row.

        Args:
            tenant: The Tenant aggregate to persist

        Raises:
            ConflictError: If the label, custom domain or owner is taken
        """
        model = TenantModel(id=tenant.id.value)
        self._apply(model, tenant)
        self._session.add(model)
        await self._flush(tenant)
        self._probe.tenant_created(tenant.id.value, tenant.subdomain_label)

    async def save(self, tenant: Tenant) -> None:
        """Persist edits to an existing tenant row.

        Args:
            tenant: The edited Tenant aggregate

        Raises:
            ConflictError: If the new label or custom domain is taken
            TenantNotFoundError: If no row exists for the tenant
        """
        model = await self._session.get(TenantModel, tenant.id.value)
        if model is None:
            raise TenantNotFoundError(f"Tenant {tenant.id.value} does not exist")
        self._apply(model, tenant)
        await self._flush(tenant)
        self._probe.tenant_saved(tenant.id.value)

    async def generate_unique_subdomain(self, seed: str) -> str:
        """Derive a free label from ``seed``.

        All candidates are checked in one query; the first free one in
        candidate order wins.

        Raises:
            ProvisioningError: If every candidate is taken
            DirectoryUnavailableError: If the lookup fails
        """
        candidates = list(
            candidate_labels(
                seed,
                forbidden=self._forbidden_labels,
                max_attempts=self._max_attempts,
                random_attempts=self._random_attempts,
            )
        )
        stmt = select(TenantModel.subdomain_label).where(
            TenantModel.subdomain_label.in_(candidates)
        )
        try:
            taken = set((await self._session.scalars(stmt)).all())
        except (SQLAlchemyError, OSError) as e:
            self._probe.directory_unavailable("generate_unique_subdomain", e)
            raise DirectoryUnavailableError(str(e)) from e

        for label in candidates:
            if label not in taken:
                self._probe.subdomain_generated(seed=seed, label=label)
                return label

        self._probe.subdomain_space_exhausted(seed=seed, attempts=len(candidates))
        raise ProvisioningError(f"No free subdomain label for '{seed}'")

    async def _find_one(self, stmt, lookup: str, key: str) -> Tenant | None:
        try:
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            self._probe.directory_unavailable(f"find_by_{lookup}", e)
            raise DirectoryUnavailableError(str(e)) from e

        if model is None:
            self._probe.tenant_not_found(lookup=lookup, key=key)
            return None

        self._probe.tenant_found(model.id, lookup=lookup)
        return self._to_domain(model)

    async def _flush(self, tenant: Tenant) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            field = _conflict_field(e)
            if field is None:
                raise
            value = _conflict_value(tenant, field)
            self._probe.binding_conflict(field.value, value)
            raise ConflictError(field, value) from e

    @staticmethod
    def _apply(model: TenantModel, tenant: Tenant) -> None:
        model.owner_user_id = tenant.owner_user_id.value
        model.display_name = tenant.display_name
        model.subdomain_label = tenant.subdomain_label
        binding = tenant.custom_domain
        model.custom_domain = binding.domain if binding else None
        model.custom_domain_status = binding.status.value if binding else None
        model.custom_domain_verification_token = (
            binding.verification_token if binding else None
        )

    @staticmethod
    def _to_domain(model: TenantModel) -> Tenant:
        binding = None
        if model.custom_domain is not None:
            binding = CustomDomainBinding(
                domain=model.custom_domain,
                status=CustomDomainStatus(
                    model.custom_domain_status or CustomDomainStatus.PENDING.value
                ),
                verification_token=model.custom_domain_verification_token or "",
            )
        return Tenant(
            id=TenantId(value=model.id),
            owner_user_id=UserId(value=model.owner_user_id),
            display_name=model.display_name,
            subdomain_label=model.subdomain_label,
            custom_domain=binding,
        )
