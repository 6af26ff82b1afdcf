"""Persistence repositories for database operations."""

from tenantaccess.infrastructure.persistence.repositories.account_repository import (
    AccountRepository,
)
from tenantaccess.infrastructure.persistence.repositories.role_repository import (
    RoleRepository,
)

__all__ = [
    "AccountRepository",
    "RoleRepository",
]
