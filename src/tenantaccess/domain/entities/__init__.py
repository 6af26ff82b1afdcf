"""Domain entities for TenantAccess.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from tenantaccess.domain.entities.account import Account, AccountStatus
from tenantaccess.domain.entities.hook_context import HookContext, HookResult
from tenantaccess.domain.entities.role import Role

__all__ = [
    "Account",
    "AccountStatus",
    "HookContext",
    "HookResult",
    "Role",
]
