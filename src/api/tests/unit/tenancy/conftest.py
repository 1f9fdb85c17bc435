"""Fixtures shared by tenancy unit tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from tenancy.application.connection_registry import TenantConnectionRegistry
from tests.unit.tenancy.fakes import (
    TENANT_A,
    TENANT_B,
    FakeConnector,
    FakeDirectory,
    directory_opener,
    make_database,
)


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory(
        {TENANT_A: make_database(TENANT_A), TENANT_B: make_database(TENANT_B)}
    )


@pytest.fixture
def cipher() -> MagicMock:
    cipher = MagicMock()
    cipher.decrypt.side_effect = lambda token: token.replace("encrypted-", "plain-")
    return cipher


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def registry_probe() -> MagicMock:
    return MagicMock()


@pytest.fixture
def registry(
    directory: FakeDirectory,
    cipher: MagicMock,
    connector: FakeConnector,
    registry_probe: MagicMock,
) -> TenantConnectionRegistry:
    return TenantConnectionRegistry(
        open_directory=directory_opener(directory),
        cipher=cipher,
        connector=connector,
        probe=registry_probe,
    )
