"""create roles and user_accounts tables

Revision ID: 3f1c9a7e52d0
Revises:
Create Date: 2026-10-12 09:14:03.218750

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7e52d0'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "company_id",
            sa.String(length=64),
            nullable=False,
            comment="Tenant (company) identifier",
        ),
        sa.Column(
            "name",
            sa.String(length=100),
            nullable=False,
            comment="Role name, unique per company",
        ),
        sa.Column(
            "description",
            sa.String(length=255),
            nullable=False,
            comment="Description of the role's purpose",
        ),
        sa.Column(
            "permissions",
            sa.JSON(),
            nullable=False,
            comment="Permission tags granted by the role",
        ),
        sa.Column(
            "is_system",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
            comment="Protected seed role",
        ),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id", "name", name="uq_roles_company_name"),
    )
    op.create_index("ix_roles_company_id", "roles", ["company_id"])

    op.create_table(
        "user_accounts",
        sa.Column("id", sa.String(length=36), nullable=False, comment="Account ID (UUID)"),
        sa.Column(
            "company_id",
            sa.String(length=64),
            nullable=False,
            comment="Tenant (company) identifier",
        ),
        sa.Column("username", sa.String(length=150), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column(
            "role_id",
            sa.Integer(),
            nullable=False,
            comment="Foreign key to roles table",
        ),
        sa.Column("department", sa.String(length=50), nullable=False),
        sa.Column(
            "status",
            sa.String(length=16),
            nullable=False,
            server_default="Active",
        ),
        sa.Column(
            "two_factor_enabled",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column(
            "password_hash",
            sa.String(length=255),
            nullable=False,
            comment="Argon2id password hash",
        ),
        sa.Column("password_changed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("password_expiry", sa.DateTime(timezone=True), nullable=False),
        sa.Column("login_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "company_id", "username", name="uq_user_accounts_company_username"
        ),
        sa.UniqueConstraint("company_id", "email", name="uq_user_accounts_company_email"),
    )
    op.create_index("ix_user_accounts_company_id", "user_accounts", ["company_id"])
    op.create_index("ix_user_accounts_role_id", "user_accounts", ["role_id"])
    op.create_index("ix_user_accounts_password_expiry", "user_accounts", ["password_expiry"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_user_accounts_password_expiry", table_name="user_accounts")
    op.drop_index("ix_user_accounts_role_id", table_name="user_accounts")
    op.drop_index("ix_user_accounts_company_id", table_name="user_accounts")
    op.drop_table("user_accounts")
    op.drop_index("ix_roles_company_id", table_name="roles")
    op.drop_table("roles")
