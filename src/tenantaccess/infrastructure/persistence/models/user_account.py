"""SQLAlchemy model for the user_accounts table.

Accounts are scoped to a company and unique by (company_id, username) and
(company_id, email). The role is referenced by id with ON DELETE RESTRICT,
so the database refuses to drop a role that accounts still hold.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenantaccess.infrastructure.persistence.database import Base
from tenantaccess.infrastructure.persistence.models._columns import utcnow


class UserAccountModel(Base):
    """SQLAlchemy model for the user_accounts table.

    Attributes:
        id: Primary key (UUID string).
        company_id: Tenant that owns the account.
        username: Login name.
        full_name: Display name.
        email: Email address, stored lowercased.
        role_id: Foreign key to roles table.
        department: Department name.
        status: 'Active' or 'Inactive'.
        two_factor_enabled: Whether two-factor authentication is on.
        password_hash: Argon2 hash of the current password.
        password_changed_at: When the current password was set.
        password_expiry: When the current password expires.
        login_count: Number of recorded logins.
        last_login: Timestamp of the last recorded login.
        version: Optimistic concurrency counter, bumped on every write.
    """

    __tablename__ = "user_accounts"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Account ID (UUID)",
    )
    company_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        comment="Tenant (company) identifier",
    )
    username: Mapped[str] = mapped_column(String(150), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    role_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        comment="Foreign key to roles table",
    )
    department: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="Active",
    )
    two_factor_enabled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Argon2id password hash",
    )
    password_changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    password_expiry: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    login_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_login: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    role: Mapped["RoleModel"] = relationship("RoleModel")  # noqa: F821

    __table_args__ = (
        UniqueConstraint("company_id", "username", name="uq_user_accounts_company_username"),
        UniqueConstraint("company_id", "email", name="uq_user_accounts_company_email"),
    )
    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return (
            f"<UserAccount(id={self.id}, username={self.username}, "
            f"company_id={self.company_id})>"
        )
