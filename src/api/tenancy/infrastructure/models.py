"""SQLAlchemy ORM models for the tenant directory (platform database)."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from infrastructure.database.models import Base, SoftDeleteMixin, TimestampMixin


class TenantModel(Base, TimestampMixin, SoftDeleteMixin):
    """ORM model for tenants table.

    Note: Subdomains are globally unique across the entire system, including
    tombstoned tenants, so a removed tenant's subdomain is never reassigned.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    subdomain: Mapped[str] = mapped_column(
        String(63), nullable=False, unique=True, index=True
    )
    cell_phone_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    is_created_db: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    database = relationship(
        "TenantDatabaseModel", back_populates="tenant", uselist=False
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TenantModel(id={self.id}, subdomain={self.subdomain})>"


class TenantDatabaseModel(Base, TimestampMixin, SoftDeleteMixin):
    """ORM model for tenant_databases table.

    connection_config holds {host, port, username, password}; the password
    is the credential cipher token, never plaintext.
    """

    __tablename__ = "tenant_databases"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    database_name: Mapped[str] = mapped_column(String(63), nullable=False, unique=True)
    connection_config: Mapped[dict[str, Any] | None] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True,
    )
    is_migrated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    tenant = relationship("TenantModel", back_populates="database")

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<TenantDatabaseModel(tenant_id={self.tenant_id}, "
            f"database_name={self.database_name})>"
        )
