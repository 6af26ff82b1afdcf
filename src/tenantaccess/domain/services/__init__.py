"""Domain services for TenantAccess.

Services hold the directory rules that don't fit within a single entity:
role and account lifecycles, the permission catalog, the password policy,
per-identifier serialization and the computed directory views.
"""

from tenantaccess.domain.services.account_directory import (
    AccountChanges,
    AccountDirectory,
    AccountInvitation,
)
from tenantaccess.domain.services.directory_views import (
    DirectorySummary,
    accounts_needing_password_reset,
    summarize_accounts,
)
from tenantaccess.domain.services.entity_locks import EntityLockRegistry, entity_locks
from tenantaccess.domain.services.password_validator import PasswordValidator
from tenantaccess.domain.services.permission_catalog import (
    PermissionCatalog,
    get_permission_catalog,
)
from tenantaccess.domain.services.role_registry import RoleRegistry

__all__ = [
    "AccountChanges",
    "AccountDirectory",
    "AccountInvitation",
    "DirectorySummary",
    "EntityLockRegistry",
    "PasswordValidator",
    "PermissionCatalog",
    "RoleRegistry",
    "accounts_needing_password_reset",
    "entity_locks",
    "get_permission_catalog",
    "summarize_accounts",
]
