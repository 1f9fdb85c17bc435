"""Domain-Oriented Observability for IAM application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from iam.application.observability.administrator_service_probe import (
    AdministratorServiceProbe,
    DefaultAdministratorServiceProbe,
)
from iam.application.observability.authorization_probe import (
    AuthorizationProbe,
    DefaultAuthorizationProbe,
)
from iam.application.observability.login_probe import (
    DefaultLoginProbe,
    LoginProbe,
)
from iam.application.observability.principal_resolution_probe import (
    DefaultPrincipalResolutionProbe,
    PrincipalResolutionProbe,
)

__all__ = [
    "AdministratorServiceProbe",
    "AuthorizationProbe",
    "DefaultAdministratorServiceProbe",
    "DefaultAuthorizationProbe",
    "DefaultLoginProbe",
    "DefaultPrincipalResolutionProbe",
    "LoginProbe",
    "PrincipalResolutionProbe",
]
