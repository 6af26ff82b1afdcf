"""FastAPI dependencies for the directory endpoints.

Each request gets services bound to its own database session. The hook
registry and the lock registry are process-wide.
"""

from typing import Annotated

from fastapi import Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tenantaccess.core.hooks import HookRegistry
from tenantaccess.domain.services import AccountDirectory, RoleRegistry
from tenantaccess.infrastructure.persistence.database import get_db_session


def get_hook_registry(request: Request) -> HookRegistry | None:
    """Hook registry stored on the application state, if any."""
    return getattr(request.app.state, "hook_registry", None)


async def get_role_registry(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    hooks: Annotated[HookRegistry | None, Depends(get_hook_registry)],
) -> RoleRegistry:
    return RoleRegistry(session, hooks=hooks)


async def get_account_directory(
    roles: Annotated[RoleRegistry, Depends(get_role_registry)],
    hooks: Annotated[HookRegistry | None, Depends(get_hook_registry)],
) -> AccountDirectory:
    # Shares the role registry's session so role checks and account writes
    # land in the same transaction.
    return AccountDirectory(roles.session, roles=roles, hooks=hooks)


CompanyId = Annotated[
    str,
    Path(min_length=1, max_length=64, description="Tenant (company) identifier"),
]
Roles = Annotated[RoleRegistry, Depends(get_role_registry)]
Directory = Annotated[AccountDirectory, Depends(get_account_directory)]
