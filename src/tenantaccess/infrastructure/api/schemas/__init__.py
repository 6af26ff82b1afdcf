"""API Schemas for request/response validation."""

from tenantaccess.infrastructure.api.schemas.account_schemas import (
    AccountInviteRequest,
    AccountListResponse,
    AccountResponse,
    AccountUpdateRequest,
    DirectorySummaryResponse,
    PasswordResetRequest,
)
from tenantaccess.infrastructure.api.schemas.role_schemas import (
    CatalogResponse,
    CreateRoleRequest,
    RoleListResponse,
    RoleResponse,
    UpdateRoleRequest,
)

__all__ = [
    "AccountInviteRequest",
    "AccountListResponse",
    "AccountResponse",
    "AccountUpdateRequest",
    "CatalogResponse",
    "CreateRoleRequest",
    "DirectorySummaryResponse",
    "PasswordResetRequest",
    "RoleListResponse",
    "RoleResponse",
    "UpdateRoleRequest",
]
