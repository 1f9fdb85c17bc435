"""SQLAlchemy ORM models for IAM bounded context.

Administrator models map to the platform database; tenant user models map
to the schema of every tenant database.
"""

from iam.infrastructure.models.administrator import (
    AdministratorModel,
    TenantAdministratorModel,
)
from iam.infrastructure.models.tenant_user import (
    ModuleActionModel,
    ModuleModel,
    UserActionModel,
    UserModel,
)

__all__ = [
    "AdministratorModel",
    "ModuleActionModel",
    "ModuleModel",
    "TenantAdministratorModel",
    "UserActionModel",
    "UserModel",
]
