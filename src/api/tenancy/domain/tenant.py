"""Tenant aggregate and its database configuration."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class TenantId:
    """Identifier for a Tenant aggregate (UUID, canonical lower-case form)."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TenantId:
        """Generate a new random TenantId."""
        return cls(value=str(uuid.uuid4()))

    @classmethod
    def from_string(cls, value: str) -> TenantId:
        """Create TenantId from string value.

        Raises:
            ValueError: If value is not a valid UUID
        """
        try:
            parsed = uuid.UUID(value.strip())
        except (ValueError, AttributeError) as e:
            raise ValueError(f"Invalid TenantId: {value!r}") from e
        return cls(value=str(parsed))


_SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


def normalize_subdomain(subdomain: str) -> str:
    """Lower-case and validate a subdomain label.

    Raises:
        ValueError: If the label is not a valid DNS label.
    """
    normalized = subdomain.strip().lower()
    if not _SUBDOMAIN_PATTERN.match(normalized):
        raise ValueError(f"Invalid subdomain: {subdomain!r}")
    return normalized


@dataclass(frozen=True)
class ConnectionConfig:
    """Where a tenant database lives and how to log into it.

    `password` is always the encrypted token produced by the credential
    cipher, never plaintext.
    """

    host: str
    port: int
    username: str | None = None
    password: str | None = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and bool(self.password)

    def as_dict(self) -> dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "username": self.username,
            "password": self.password,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ConnectionConfig | None:
        """Build from the stored JSON document, None when nothing is stored."""
        if not data or not data.get("host"):
            return None
        return cls(
            host=str(data["host"]),
            port=int(data.get("port") or 5432),
            username=data.get("username") or None,
            password=data.get("password") or None,
        )


@dataclass(frozen=True)
class TenantDatabase:
    """A tenant's database record, joined with its owner's status."""

    id: str
    tenant_id: str
    database_name: str
    connection_config: ConnectionConfig | None
    is_migrated: bool = False
    tenant_is_active: bool = True

    @property
    def is_configured(self) -> bool:
        return (
            self.connection_config is not None
            and self.connection_config.has_credentials
        )

    def reconfigured(
        self, database_name: str, connection_config: ConnectionConfig
    ) -> TenantDatabase:
        """Return a copy pointing at new coordinates and credentials."""
        return replace(
            self,
            database_name=database_name,
            connection_config=connection_config,
        )


@dataclass
class Tenant:
    """Tenant aggregate: one customer whose data lives in its own database.

    Business rules:
    - Subdomains are globally unique and lower-case
    - An inactive tenant cannot have connections opened to its database
    - Tenants are tombstoned, never hard-deleted
    """

    id: TenantId
    company_name: str
    email: str
    subdomain: str
    cell_phone_number: str | None = None
    is_created_db: bool = False
    is_active: bool = True

    @classmethod
    def create(
        cls,
        company_name: str,
        email: str,
        subdomain: str,
        cell_phone_number: str | None = None,
    ) -> Tenant:
        """Factory method for creating a new, active tenant."""
        return cls(
            id=TenantId.generate(),
            company_name=company_name.strip(),
            email=email.strip().lower(),
            subdomain=normalize_subdomain(subdomain),
            cell_phone_number=cell_phone_number,
        )

    def database_name(self, prefix: str) -> str:
        """Name of the database provisioned for this tenant."""
        return f"{prefix}{self.subdomain.replace('-', '_')}"

    def toggle_status(self) -> bool:
        """Flip the active flag and return the new value."""
        self.is_active = not self.is_active
        return self.is_active
