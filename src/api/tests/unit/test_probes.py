"""Unit tests for domain probes.

Tests that domain probes correctly capture domain events
following the Domain Oriented Observability pattern.
"""

from unittest.mock import MagicMock

import structlog

from infrastructure.observability import (
    DefaultConnectionProbe,
    DefaultStartupProbe,
    ObservationContext,
)
from shared_kernel.middleware.observability import DefaultTenantContextProbe
from storefront.infrastructure.observability import DefaultStorefrontRepositoryProbe
from tenancy.application.observability import (
    DefaultTenantProvisioningProbe,
    DefaultTenantResolutionProbe,
)
from tenancy.infrastructure.observability import DefaultTenantDirectoryProbe


def _logger() -> MagicMock:
    return MagicMock(spec=structlog.stdlib.BoundLogger)


class TestObservationContext:
    def test_as_dict_skips_none(self):
        context = ObservationContext(request_id="req-1", host="shop1.codeopx.com")

        assert context.as_dict() == {"request_id": "req-1", "host": "shop1.codeopx.com"}

    def test_with_tenant_and_extra(self):
        context = ObservationContext(request_id="req-1").with_tenant("t1").with_extra(
            path="/storefront/products"
        )

        assert context.as_dict() == {
            "request_id": "req-1",
            "tenant_id": "t1",
            "path": "/storefront/products",
        }


class TestConnectionProbe:
    def test_default_probe_creates_with_default_logger(self):
        probe = DefaultConnectionProbe()
        assert probe._logger is not None

    def test_engine_created_logs_info(self):
        logger = _logger()
        probe = DefaultConnectionProbe(logger=logger)

        probe.engine_created(role="write", host="localhost", database="storefront")

        logger.info.assert_called_once_with(
            "database_engine_created",
            role="write",
            host="localhost",
            database="storefront",
        )

    def test_context_is_included(self):
        logger = _logger()
        probe = DefaultConnectionProbe(logger=logger).with_context(
            ObservationContext(request_id="req-1")
        )

        probe.pool_closed(role="read")

        logger.info.assert_called_once_with(
            "connection_pool_closed", role="read", request_id="req-1"
        )


class TestStartupProbe:
    def test_application_started(self):
        logger = _logger()
        probe = DefaultStartupProbe(logger=logger)

        probe.application_started(
            version="1.0.0", root_domain="codeopx.com", dev_root_domains=["localhost"]
        )

        logger.info.assert_called_once_with(
            "application_started",
            version="1.0.0",
            root_domain="codeopx.com",
            dev_root_domains=["localhost"],
        )


class TestTenantResolutionProbe:
    def test_directory_unavailable_logs_error_type(self):
        logger = _logger()
        probe = DefaultTenantResolutionProbe(logger=logger)

        probe.directory_unavailable(host="shop1.codeopx.com", error=TimeoutError("slow"))

        logger.error.assert_called_once_with(
            "tenant_resolution_directory_unavailable",
            host="shop1.codeopx.com",
            error="slow",
            error_type="TimeoutError",
        )

    def test_orphaned_tenant_is_a_warning(self):
        logger = _logger()
        probe = DefaultTenantResolutionProbe(logger=logger)

        probe.orphaned_tenant(tenant_id="t1", host="shop1.codeopx.com")

        logger.warning.assert_called_once_with(
            "tenant_resolution_orphaned_tenant",
            tenant_id="t1",
            host="shop1.codeopx.com",
        )

    def test_event_fields_win_over_context(self):
        logger = _logger()
        probe = DefaultTenantResolutionProbe(logger=logger).with_context(
            ObservationContext(host="raw.host:8080", request_id="req-1")
        )

        probe.host_unmatched(host="raw.host")

        logger.info.assert_called_once_with(
            "tenant_resolution_unmatched", host="raw.host", request_id="req-1"
        )


class TestTenantProvisioningProbe:
    def test_tenant_provisioned(self):
        logger = _logger()
        probe = DefaultTenantProvisioningProbe(logger=logger)

        probe.tenant_provisioned(
            tenant_id="t1", owner_user_id="owner-1", subdomain_label="anjums"
        )

        logger.info.assert_called_once_with(
            "tenant_provisioned",
            tenant_id="t1",
            owner_user_id="owner-1",
            subdomain_label="anjums",
        )

    def test_provisioning_exhausted_logs_error(self):
        logger = _logger()
        probe = DefaultTenantProvisioningProbe(logger=logger)

        probe.provisioning_exhausted(seed="anjums", attempts=4)

        logger.error.assert_called_once_with(
            "tenant_provisioning_exhausted", seed="anjums", attempts=4
        )


class TestTenantDirectoryProbe:
    def test_binding_conflict(self):
        logger = _logger()
        probe = DefaultTenantDirectoryProbe(logger=logger)

        probe.binding_conflict("subdomain_label", "anjums")

        logger.warning.assert_called_once_with(
            "tenant_directory_binding_conflict",
            field="subdomain_label",
            value="anjums",
        )


class TestTenantContextProbe:
    def test_explicit_tenant_ignored(self):
        logger = _logger()
        probe = DefaultTenantContextProbe(logger=logger)

        probe.explicit_tenant_ignored(
            requested_tenant_id="t1", user_id=None, reason="anonymous_viewer"
        )

        logger.warning.assert_called_once_with(
            "tenant_context_explicit_tenant_ignored",
            requested_tenant_id="t1",
            reason="anonymous_viewer",
            user_id=None,
        )

    def test_not_a_store_host(self):
        logger = _logger()
        probe = DefaultTenantContextProbe(logger=logger)

        probe.tenant_required(host_kind="base_domain")

        logger.info.assert_called_once_with(
            "tenant_context_not_a_store_host", host_kind="base_domain"
        )


class TestStorefrontRepositoryProbe:
    def test_unscoped_write_refused_logs_error(self):
        logger = _logger()
        probe = DefaultStorefrontRepositoryProbe(logger=logger)

        probe.unscoped_write_refused("product", "base_domain")

        logger.error.assert_called_once_with(
            "unscoped_write_refused", entity="product", host_kind="base_domain"
        )

    def test_reference_not_in_scope_carries_context(self):
        logger = _logger()
        probe = DefaultStorefrontRepositoryProbe(logger=logger).with_context(
            ObservationContext(request_id="req-1")
        )

        probe.reference_not_in_scope("category", "c9", "t1")

        logger.warning.assert_called_once_with(
            "reference_not_in_scope",
            request_id="req-1",
            entity="category",
            entity_id="c9",
            tenant_id="t1",
        )
