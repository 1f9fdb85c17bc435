"""Unit tests for the RequestContext value object."""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from unittest.mock import MagicMock

import pytest

from shared_kernel.middleware import RequestContext, TenantContextMissingError


class TestRequestContext:
    """Tests for RequestContext."""

    def test_context_is_immutable(self) -> None:
        context = RequestContext(tenant_id="t-1")

        with pytest.raises(FrozenInstanceError):
            context.tenant_id = "t-2"  # type: ignore[misc]

    def test_require_connection_returns_engine(self) -> None:
        engine = MagicMock()
        context = RequestContext(tenant_id="t-1", tenant_connection=engine)

        assert context.has_tenant_connection
        assert context.require_tenant_connection() is engine

    def test_require_connection_without_header(self) -> None:
        with pytest.raises(TenantContextMissingError) as exc_info:
            RequestContext().require_tenant_connection()

        assert "x-tenant-id" in str(exc_info.value)

    def test_require_connection_reraises_resolution_failure(self) -> None:
        failure = LookupError("tenant gone")
        context = RequestContext(tenant_id="t-1", tenant_failure=failure)

        with pytest.raises(LookupError) as exc_info:
            context.require_tenant_connection()

        assert exc_info.value is failure

    def test_with_principal_returns_new_context(self) -> None:
        engine = MagicMock()
        principal = MagicMock()
        context = RequestContext(tenant_id="t-1", tenant_connection=engine)

        extended = context.with_principal(principal)

        assert extended.principal is principal
        assert extended.tenant_connection is engine
        assert context.principal is None
