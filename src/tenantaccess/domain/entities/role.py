"""Role entity for role-based access control.

Roles are scoped to a company. Permissions are granted to roles, never to
accounts directly; an account inherits the permission set of its role.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Role:
    """Role entity within a company's Role Registry.

    Attributes:
        id: Identifier assigned by the registry.
        company_id: The tenant that owns the role.
        name: Role name, unique within the company.
        description: Description of the role's purpose.
        permissions: Permission tags granted by the role, catalog members only.
        is_system: Seeded role that cannot be edited or deleted.
        user_count: Number of accounts referencing the role. Derived on read.
        created_at: Timestamp when the role was created.
        updated_at: Timestamp when the role was last updated.
    """

    id: int
    company_id: str
    name: str
    description: str
    permissions: list[str] = field(default_factory=list)
    is_system: bool = False
    user_count: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        """Validate role data after initialization."""
        if not self.company_id:
            raise ValueError("Company ID is required")
        if not self.name:
            raise ValueError("Role name is required")

    @property
    def is_in_use(self) -> bool:
        """Whether any account references this role."""
        return self.user_count > 0
