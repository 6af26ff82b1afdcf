"""Account entity for company user accounts.

Accounts belong to a company and reference their role by its stable id.
The role's display name is resolved when the account is read, so renaming
a role never orphans the accounts that hold it.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum


class AccountStatus(str, Enum):
    """Account status. Inactive accounts hold no effective permissions."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"

    def toggled(self) -> "AccountStatus":
        """Return the opposite status."""
        if self is AccountStatus.ACTIVE:
            return AccountStatus.INACTIVE
        return AccountStatus.ACTIVE


@dataclass
class Account:
    """User account entity within a company's Account Directory.

    Attributes:
        id: Unique identifier (UUID string).
        company_id: The tenant that owns the account.
        username: Login name, unique within the company.
        full_name: Display name of the person.
        email: Email address, unique within the company.
        role_id: Stable reference to the account's role.
        role_name: Display name of the role, resolved at read time.
        department: Department from the configured enumeration.
        status: Active or Inactive.
        two_factor_enabled: Whether two-factor authentication is required.
        password_expiry: When the current password expires.
        login_count: Number of recorded logins. Only the directory writes it.
        last_login: Timestamp of the last recorded login.
        created_at: Timestamp when the account was created.
        updated_at: Timestamp when the account was last updated.
    """

    id: str
    company_id: str
    username: str
    full_name: str
    email: str
    role_id: int
    role_name: str
    department: str
    password_expiry: datetime
    status: AccountStatus = AccountStatus.ACTIVE
    two_factor_enabled: bool = False
    login_count: int = 0
    last_login: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        """Validate account data after initialization."""
        if not self.id:
            raise ValueError("Account ID is required")
        if not self.company_id:
            raise ValueError("Company ID is required")
        if not self.username:
            raise ValueError("Username is required")
        if not self.email:
            raise ValueError("Email is required")
        if self.login_count < 0:
            raise ValueError("Login count cannot be negative")

    @property
    def is_active(self) -> bool:
        """Whether the account is Active."""
        return self.status is AccountStatus.ACTIVE

    def time_until_password_expiry(self, now: datetime) -> timedelta:
        """Time left before the password expires. Negative once expired."""
        return self.password_expiry - now
