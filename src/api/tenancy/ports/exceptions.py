"""Domain exceptions for the tenancy bounded context.

These exceptions represent domain-level errors raised while resolving or
administering tenants. The presentation layer maps them to HTTP statuses.
"""


class TenantNotFoundError(Exception):
    """Raised when a tenant id or subdomain does not name a live tenant."""

    def __init__(self, tenant_ref: str):
        super().__init__(f"Tenant {tenant_ref} not found")
        self.tenant_ref = tenant_ref


class TenantDatabaseNotFoundError(TenantNotFoundError):
    """Raised when a tenant has no database record."""

    def __init__(self, tenant_id: str):
        Exception.__init__(self, f"Database for tenant {tenant_id} not found")
        self.tenant_ref = tenant_id


class TenantDatabaseNotConfiguredError(TenantDatabaseNotFoundError):
    """Raised when a tenant database record carries no credentials yet."""

    def __init__(self, tenant_id: str):
        Exception.__init__(
            self, f"No credentials configured for the database of tenant {tenant_id}"
        )
        self.tenant_ref = tenant_id


class TenantDisabledError(Exception):
    """Raised when the owning tenant has been deactivated.

    An inactive tenant never gets a connection, so nothing is cached.
    """

    def __init__(self, tenant_id: str):
        super().__init__(f"Tenant {tenant_id} is disabled")
        self.tenant_id = tenant_id


class DuplicateTenantError(Exception):
    """Raised when a subdomain or database name is already taken."""

    pass


class InvalidTenantDatabaseConfigError(ValueError):
    """Raised when database reconfiguration input is malformed."""

    pass


class CredentialIntegrityError(Exception):
    """Raised when an encrypted credential fails verification.

    The token was tampered with, corrupted, or encrypted under another key
    (for instance after the deployment secret was rotated without
    re-encrypting stored values). Fatal for that record.
    """

    pass
