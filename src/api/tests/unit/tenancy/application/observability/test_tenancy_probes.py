"""Unit tests for tenancy application probes."""

from unittest.mock import MagicMock

import structlog

from shared_kernel.observability_context import ObservationContext
from tenancy.application.observability import (
    DefaultConnectionRegistryProbe,
    DefaultCredentialCipherProbe,
    DefaultTenantResolutionProbe,
)

TENANT_ID = "0b8f3c1e-6a52-4f7e-9d0a-4b1f2c3d4e5f"


def _logger() -> MagicMock:
    return MagicMock(spec=structlog.stdlib.BoundLogger)


class TestConnectionRegistryProbe:
    """Tests for DefaultConnectionRegistryProbe."""

    def test_default_probe_creates_with_default_logger(self):
        assert DefaultConnectionRegistryProbe()._logger is not None

    def test_connection_reused_logs_debug(self):
        logger = _logger()
        probe = DefaultConnectionRegistryProbe(logger=logger)

        probe.connection_reused(tenant_id=TENANT_ID)

        logger.debug.assert_called_once_with(
            "tenant_connection_reused", tenant_id=TENANT_ID
        )

    def test_connection_opened_logs_info(self):
        logger = _logger()
        probe = DefaultConnectionRegistryProbe(logger=logger)

        probe.connection_opened(tenant_id=TENANT_ID, database="cropco_tenant_acme")

        logger.info.assert_called_once_with(
            "tenant_connection_opened",
            tenant_id=TENANT_ID,
            database="cropco_tenant_acme",
        )

    def test_connection_failed_logs_error(self):
        logger = _logger()
        probe = DefaultConnectionRegistryProbe(logger=logger)

        probe.connection_failed(tenant_id=TENANT_ID, error=OSError("refused"))

        logger.error.assert_called_once_with(
            "tenant_connection_failed", tenant_id=TENANT_ID, error="refused"
        )

    def test_tenant_rejected_logs_warning(self):
        logger = _logger()
        probe = DefaultConnectionRegistryProbe(logger=logger)

        probe.tenant_rejected(tenant_id=TENANT_ID, reason="disabled")

        logger.warning.assert_called_once_with(
            "tenant_connection_rejected", tenant_id=TENANT_ID, reason="disabled"
        )

    def test_eviction_events(self):
        logger = _logger()
        probe = DefaultConnectionRegistryProbe(logger=logger)

        probe.connection_evicted(tenant_id=TENANT_ID)
        probe.eviction_failed(tenant_id=TENANT_ID, error=RuntimeError("boom"))
        probe.all_connections_evicted(count=2)

        assert logger.info.call_args_list[0].args == ("tenant_connection_evicted",)
        logger.error.assert_called_once_with(
            "tenant_connection_eviction_failed", tenant_id=TENANT_ID, error="boom"
        )
        logger.info.assert_called_with("tenant_connections_evicted", count=2)

    def test_with_context_includes_request_id(self):
        logger = _logger()
        probe = DefaultConnectionRegistryProbe(logger=logger).with_context(
            ObservationContext(request_id="req-1")
        )

        probe.connection_evicted(tenant_id=TENANT_ID)

        logger.info.assert_called_once_with(
            "tenant_connection_evicted", tenant_id=TENANT_ID, request_id="req-1"
        )


class TestCredentialCipherProbe:
    """Tests for DefaultCredentialCipherProbe."""

    def test_secret_missing_logs_critical(self):
        logger = _logger()
        DefaultCredentialCipherProbe(logger=logger).secret_missing()

        logger.critical.assert_called_once_with("credential_cipher_secret_missing")

    def test_integrity_check_failed_logs_error(self):
        logger = _logger()
        DefaultCredentialCipherProbe(logger=logger).integrity_check_failed(
            reason="tag_mismatch"
        )

        logger.error.assert_called_once_with(
            "credential_integrity_failed", reason="tag_mismatch"
        )


class TestTenantResolutionProbe:
    """Tests for DefaultTenantResolutionProbe."""

    def test_tenant_header_absent_logs_debug(self):
        logger = _logger()
        DefaultTenantResolutionProbe(logger=logger).tenant_header_absent()

        logger.debug.assert_called_once_with("tenant_header_absent")

    def test_tenant_resolved_logs_debug(self):
        logger = _logger()
        DefaultTenantResolutionProbe(logger=logger).tenant_resolved(TENANT_ID)

        logger.debug.assert_called_once_with("tenant_resolved", tenant_id=TENANT_ID)

    def test_invalid_tenant_id_format_truncates_raw_value(self):
        """Attacker-controlled header values are cut before logging."""
        logger = _logger()
        DefaultTenantResolutionProbe(logger=logger).invalid_tenant_id_format("x" * 500)

        logger.warning.assert_called_once_with(
            "invalid_tenant_id_format", raw_value="x" * 64
        )

    def test_tenant_resolution_deferred_logs_warning(self):
        logger = _logger()
        DefaultTenantResolutionProbe(logger=logger).tenant_resolution_deferred(
            tenant_id=TENANT_ID, reason="not_found", error=LookupError("gone")
        )

        logger.warning.assert_called_once_with(
            "tenant_resolution_deferred",
            tenant_id=TENANT_ID,
            reason="not_found",
            error="gone",
        )

    def test_tenant_resolution_misconfigured_logs_error_type(self):
        logger = _logger()
        DefaultTenantResolutionProbe(logger=logger).tenant_resolution_misconfigured(
            tenant_id=TENANT_ID, error=ValueError("bad key")
        )

        logger.error.assert_called_once_with(
            "tenant_resolution_misconfigured",
            tenant_id=TENANT_ID,
            error_type="ValueError",
            error="bad key",
        )
