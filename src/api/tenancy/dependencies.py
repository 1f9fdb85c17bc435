"""Dependency injection for the tenancy bounded context.

Composes infrastructure resources (platform sessions, tenant engines) with
tenancy components (cipher, connection registry, tenant service).
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import (
    get_platform_session,
    get_platform_sessionmaker,
)
from infrastructure.settings import get_cipher_settings, get_tenant_database_settings
from tenancy.application.connection_registry import TenantConnectionRegistry
from tenancy.application.credential_cipher import CredentialCipher
from tenancy.application.tenant_service import TenantService
from tenancy.infrastructure import (
    TenantDirectory,
    tenant_connector,
    tenant_directory_opener,
)


@lru_cache
def get_credential_cipher() -> CredentialCipher:
    """Get the application-scoped credential cipher.

    An unset encryption key does not fail here; every encrypt or decrypt
    then raises ConfigurationError.
    """
    return CredentialCipher(
        secret=get_cipher_settings().encryption_key.get_secret_value()
    )


def build_connection_registry() -> TenantConnectionRegistry:
    """Build the process-wide registry. Called once by the app lifespan."""
    return TenantConnectionRegistry(
        open_directory=tenant_directory_opener(get_platform_sessionmaker),
        cipher=get_credential_cipher(),
        connector=tenant_connector(get_tenant_database_settings()),
    )


def get_connection_registry(request: Request) -> TenantConnectionRegistry:
    """Get the registry owned by the running application."""
    return request.app.state.connection_registry


def get_tenant_service(
    session: Annotated[AsyncSession, Depends(get_platform_session)],
    registry: Annotated[TenantConnectionRegistry, Depends(get_connection_registry)],
    cipher: Annotated[CredentialCipher, Depends(get_credential_cipher)],
) -> TenantService:
    """Get TenantService bound to a request-scoped platform session."""
    return TenantService(
        directory=TenantDirectory(session),
        session=session,
        registry=registry,
        cipher=cipher,
        database_prefix=get_tenant_database_settings().database_prefix,
    )
