"""SQLAlchemy models for the TenantAccess directory tables.

All models inherit from the Base class defined in database.py and are
created on application startup in development mode.
"""

from tenantaccess.infrastructure.persistence.models.role import RoleModel
from tenantaccess.infrastructure.persistence.models.user_account import UserAccountModel

__all__ = [
    "RoleModel",
    "UserAccountModel",
]
