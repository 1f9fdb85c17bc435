"""Application-level domain probes for the tenancy bounded context."""

from tenancy.application.observability.connection_registry_probe import (
    ConnectionRegistryProbe,
    DefaultConnectionRegistryProbe,
)
from tenancy.application.observability.credential_cipher_probe import (
    CredentialCipherProbe,
    DefaultCredentialCipherProbe,
)
from tenancy.application.observability.tenant_resolution_probe import (
    DefaultTenantResolutionProbe,
    TenantResolutionProbe,
)
from tenancy.application.observability.tenant_service_probe import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)

__all__ = [
    "ConnectionRegistryProbe",
    "CredentialCipherProbe",
    "DefaultConnectionRegistryProbe",
    "DefaultCredentialCipherProbe",
    "DefaultTenantResolutionProbe",
    "DefaultTenantServiceProbe",
    "TenantResolutionProbe",
    "TenantServiceProbe",
]
