"""Pydantic schemas for account directory endpoints.

Password strength and confirmation are checked by the AccountDirectory, not
here, so the rejection carries the directory's error kind and field details.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, SecretStr

from tenantaccess.domain.entities import Account, AccountStatus
from tenantaccess.domain.services import AccountChanges, AccountInvitation, DirectorySummary


class AccountInviteRequest(BaseModel):
    """Request schema for inviting a new account."""

    username: str = Field(..., min_length=1, max_length=150, description="Login name")
    full_name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Email address")
    role: str = Field(..., min_length=1, description="Name of an existing role")
    department: str = Field(..., min_length=1, description="Department name")
    password: SecretStr = Field(..., description="Initial password")
    confirm_password: SecretStr = Field(..., description="Must equal password")

    def to_invitation(self) -> AccountInvitation:
        return AccountInvitation(
            username=self.username,
            full_name=self.full_name,
            email=str(self.email),
            role=self.role,
            department=self.department,
            password=self.password.get_secret_value(),
            confirm_password=self.confirm_password.get_secret_value(),
        )


class AccountUpdateRequest(BaseModel):
    """Request schema for updating an account.

    All fields are optional. Only provided fields will be updated.
    Status, two-factor and password have their own endpoints.
    """

    username: str | None = Field(None, min_length=1, max_length=150)
    full_name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    role: str | None = Field(None, min_length=1, description="Name of an existing role")
    department: str | None = Field(None, min_length=1)

    def to_changes(self) -> AccountChanges:
        return AccountChanges(
            username=self.username,
            full_name=self.full_name,
            email=None if self.email is None else str(self.email),
            role=self.role,
            department=self.department,
        )


class PasswordResetRequest(BaseModel):
    """Request schema for resetting an account's password."""

    new_password: SecretStr = Field(..., description="New password")
    confirm_password: SecretStr | None = Field(
        None, description="Optional confirmation, must equal new_password when given"
    )


class AccountResponse(BaseModel):
    """Response schema for a single account."""

    id: str = Field(..., description="Account ID (UUID)")
    company_id: str
    username: str
    full_name: str
    email: str
    role_id: int = Field(..., description="Stable role reference")
    role: str = Field(..., description="Role display name")
    department: str
    status: AccountStatus
    two_factor_enabled: bool
    password_expiry: datetime
    login_count: int
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            company_id=account.company_id,
            username=account.username,
            full_name=account.full_name,
            email=account.email,
            role_id=account.role_id,
            role=account.role_name,
            department=account.department,
            status=account.status,
            two_factor_enabled=account.two_factor_enabled,
            password_expiry=account.password_expiry,
            login_count=account.login_count,
            last_login=account.last_login,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class AccountListResponse(BaseModel):
    """Response schema for listing accounts."""

    items: list[AccountResponse]
    total: int


class DirectorySummaryResponse(BaseModel):
    """Headline counts for a company's directory."""

    total_accounts: int
    active_accounts: int
    two_factor_enabled: int
    total_roles: int
    password_reset_due: int

    @classmethod
    def from_summary(cls, summary: DirectorySummary) -> "DirectorySummaryResponse":
        return cls(
            total_accounts=summary.total_accounts,
            active_accounts=summary.active_accounts,
            two_factor_enabled=summary.two_factor_enabled,
            total_roles=summary.total_roles,
            password_reset_due=summary.password_reset_due,
        )
