"""create tenant directory and administrator tables

Revision ID: 3f1c9a7e2b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7e2b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ADMINISTRATOR_ROLE = postgresql.ENUM(
    "admin", "manager", "user", name="administrator_role", create_type=False
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _administrator_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=100), nullable=False),
        sa.Column("cell_phone_number", sa.String(length=10), nullable=True),
        sa.Column("password", sa.String(length=100), nullable=False),
        sa.Column("role", ADMINISTRATOR_ROLE, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(f"ix_{name}_email", name, ["email"], unique=True)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(length=36), nullable=False),  # UUID
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("subdomain", sa.String(length=63), nullable=False),
        sa.Column("cell_phone_number", sa.String(length=32), nullable=True),
        sa.Column("is_created_db", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tenants_subdomain", "tenants", ["subdomain"], unique=True)

    op.create_table(
        "tenant_databases",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("tenant_id", sa.String(length=36), nullable=False),
        sa.Column("database_name", sa.String(length=63), nullable=False),
        sa.Column(
            "connection_config",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
        ),
        sa.Column("is_migrated", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["tenant_id"],
            ["tenants.id"],
            name="fk_tenant_databases_tenant_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_tenant_databases_tenant_id", "tenant_databases", ["tenant_id"], unique=True
    )
    op.create_index(
        "ix_tenant_databases_database_name",
        "tenant_databases",
        ["database_name"],
        unique=True,
    )

    ADMINISTRATOR_ROLE.create(op.get_bind(), checkfirst=True)
    _administrator_table("administrators")
    _administrator_table("tenant_administrators")


def downgrade() -> None:
    """Downgrade schema."""
    for name in ("tenant_administrators", "administrators"):
        op.drop_index(f"ix_{name}_email", table_name=name)
        op.drop_table(name)
    ADMINISTRATOR_ROLE.drop(op.get_bind(), checkfirst=True)

    op.drop_index("ix_tenant_databases_database_name", table_name="tenant_databases")
    op.drop_index("ix_tenant_databases_tenant_id", table_name="tenant_databases")
    op.drop_table("tenant_databases")

    op.drop_index("ix_tenants_subdomain", table_name="tenants")
    op.drop_table("tenants")
