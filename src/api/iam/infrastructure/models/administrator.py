"""SQLAlchemy ORM models for administrator accounts.

Both administrator kinds live in the platform database and share one
column layout; they are kept in separate tables so a token issued on one
channel can never name an account of the other.
"""

from sqlalchemy import Boolean, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from iam.domain.principals import AdministratorRole
from infrastructure.database.models import Base, SoftDeleteMixin, TimestampMixin


class _AdministratorColumns(TimestampMixin, SoftDeleteMixin):
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    cell_phone_number: Mapped[str | None] = mapped_column(String(10), nullable=True)
    password: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[AdministratorRole] = mapped_column(
        Enum(
            AdministratorRole,
            name="administrator_role",
            values_callable=lambda roles: [role.value for role in roles],
        ),
        nullable=False,
        default=AdministratorRole.USER,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<{type(self).__name__}(id={self.id}, email={self.email})>"


class AdministratorModel(_AdministratorColumns, Base):
    """ORM model for platform administrators."""

    __tablename__ = "administrators"


class TenantAdministratorModel(_AdministratorColumns, Base):
    """ORM model for tenant-management administrators."""

    __tablename__ = "tenant_administrators"
