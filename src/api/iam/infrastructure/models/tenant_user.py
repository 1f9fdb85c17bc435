"""SQLAlchemy ORM models for users and grants inside a tenant database.

Every tenant database carries the same schema. Column names follow the
schema tenant databases already have (camelCase foreign keys and
`deletedDate`), so these models read existing tenants unchanged.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from infrastructure.database.models import TenantBase


class UserModel(TenantBase):
    """ORM model for the users table of a tenant database."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    cell_phone_number: Mapped[str | None] = mapped_column(String(10), nullable=True)
    password: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    deleted_at: Mapped[datetime | None] = mapped_column(
        "deletedDate", DateTime(timezone=True), nullable=True
    )

    actions: Mapped[list["UserActionModel"]] = relationship(back_populates="user")

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<UserModel(id={self.id}, email={self.email})>"


class ModuleModel(TenantBase):
    """ORM model for the modules table (functional areas)."""

    __tablename__ = "modules"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    actions: Mapped[list["ModuleActionModel"]] = relationship(back_populates="module")


class ModuleActionModel(TenantBase):
    """ORM model for module_actions: one grantable endpoint each."""

    __tablename__ = "module_actions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    description: Mapped[str] = mapped_column(String, nullable=False, default="")
    path_endpoint: Mapped[str] = mapped_column(String, nullable=False)
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    module_id: Mapped[str] = mapped_column(
        "moduleId", ForeignKey("modules.id", ondelete="CASCADE"), nullable=False
    )

    module: Mapped[ModuleModel] = relationship(back_populates="actions")


class UserActionModel(TenantBase):
    """ORM model for user_actions: the grants linking users to actions."""

    __tablename__ = "user_actions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        "userId", ForeignKey("users.id"), nullable=False
    )
    action_id: Mapped[str] = mapped_column(
        "actionId", ForeignKey("module_actions.id", ondelete="CASCADE"), nullable=False
    )

    user: Mapped[UserModel] = relationship(back_populates="actions")
    action: Mapped[ModuleActionModel] = relationship()
