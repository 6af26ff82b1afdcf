"""SQLAlchemy model for the roles table.

Roles are scoped to a company and carry their permission tags as a JSON list.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tenantaccess.infrastructure.persistence.database import Base
from tenantaccess.infrastructure.persistence.models._columns import utcnow


class RoleModel(Base):
    """SQLAlchemy model for the roles table.

    Attributes:
        id: Auto-incrementing primary key, the role's stable identifier.
        company_id: Tenant that owns the role.
        name: Role name, unique within the company.
        description: Description of the role's purpose.
        permissions: JSON list of permission tags.
        is_system: Seeded role protected from edits and deletion.
        version: Optimistic concurrency counter, bumped on every write.
        created_at: Timestamp when the role was created.
        updated_at: Timestamp when the role was last updated.
    """

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    company_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        comment="Tenant (company) identifier",
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Role name, unique per company",
    )
    description: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Description of the role's purpose",
    )
    permissions: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Permission tags granted by the role",
    )
    is_system: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Protected seed role",
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

    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_roles_company_name"),
    )
    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, company_id={self.company_id}, name={self.name})>"
