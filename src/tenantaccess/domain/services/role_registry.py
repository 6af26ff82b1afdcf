"""Role Registry service.

Owns the roles of each company: their names, descriptions and permission
sets. The number of accounts holding a role is derived from the accounts
table on every read and is never accepted as input.

Mutations of one role are serialized through the per-identifier lock
registry. Account operations take the same lock on the role they reference,
so a role deletion and an account assignment to that role cannot both
succeed.
"""

from collections.abc import Callable, Iterable
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from tenantaccess.core.config import Settings, get_settings
from tenantaccess.core.hooks import HookEvent, HookRegistry
from tenantaccess.core.logging import get_logger
from tenantaccess.domain.entities import HookContext, Role
from tenantaccess.domain.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from tenantaccess.domain.services.entity_locks import EntityLockRegistry, entity_locks
from tenantaccess.domain.services.permission_catalog import (
    PermissionCatalog,
    get_permission_catalog,
)
from tenantaccess.infrastructure.persistence.mappers import to_role
from tenantaccess.infrastructure.persistence.models import RoleModel
from tenantaccess.infrastructure.persistence.repositories import RoleRepository
from tenantaccess.infrastructure.persistence.transaction import atomic

logger = get_logger(__name__)

ROLE_LOCK = "role"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RoleRegistry:
    """Service for role management within a company."""

    def __init__(
        self,
        session: AsyncSession,
        catalog: PermissionCatalog | None = None,
        settings: Settings | None = None,
        hooks: HookRegistry | None = None,
        locks: EntityLockRegistry | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the role registry.

        Args:
            session: SQLAlchemy async session.
            catalog: Permission catalog used to validate permission sets.
            settings: Settings naming the system role. Defaults to the process settings.
            hooks: Registry notified after each committed change.
            locks: Per-identifier lock registry. Defaults to the process-wide one.
            clock: Returns the current time. Defaults to UTC now.
        """
        self.session = session
        self.role_repo = RoleRepository(session)
        self.settings = settings or get_settings()
        self.catalog = catalog or get_permission_catalog()
        self.hooks = hooks
        self.locks = locks or entity_locks
        self.clock = clock or _utcnow

    # Queries

    async def list_roles(self, company_id: str) -> list[Role]:
        """List the company's roles with their current assigned-user counts."""
        async with atomic(self.session, "list roles"):
            models = await self.role_repo.list_for_company(company_id)
            counts = await self.role_repo.assigned_user_counts(company_id)
        return [to_role(model, counts.get(model.id, 0)) for model in models]

    async def get_role(self, company_id: str, role_id: int) -> Role:
        """Get one role.

        Raises:
            NotFoundError: If the role does not exist in the company.
        """
        async with atomic(self.session, "get role"):
            model = await self._require(company_id, role_id)
            count = await self.role_repo.count_assigned_users(company_id, role_id)
        return to_role(model, count)

    async def count_roles(self, company_id: str) -> int:
        async with atomic(self.session, "count roles"):
            return await self.role_repo.count_for_company(company_id)

    # Mutations

    async def create_role(
        self,
        company_id: str,
        name: str,
        description: str,
        permissions: Iterable[str] = (),
    ) -> Role:
        """Create a new, non-system role.

        Raises:
            ValidationError: Empty name or description, or an unknown permission.
            ConflictError: The name is already used in the company or is the
                reserved system role name.
        """
        name = self._clean_text(name, "name")
        description = self._clean_text(description, "description")
        self._ensure_not_reserved(company_id, name)
        permission_list = self._validate_permissions(permissions)

        async with atomic(self.session, "create role"):
            if await self.role_repo.name_exists(company_id, name):
                logger.info(
                    "Role creation rejected: duplicate name",
                    company_id=company_id,
                    role_name=name,
                )
                raise ConflictError(f"Role '{name}' already exists", code="duplicate_role_name")

            now = self.clock()
            model = await self.role_repo.create(
                RoleModel(
                    company_id=company_id,
                    name=name,
                    description=description,
                    permissions=permission_list,
                    is_system=False,
                    created_at=now,
                    updated_at=now,
                )
            )
            role = to_role(model, 0)

        logger.info("Role created", company_id=company_id, role_id=role.id, role_name=role.name)
        await self._notify(
            HookEvent.ON_ROLE_AFTER_CREATE, company_id, role_id=role.id, name=role.name
        )
        return role

    async def update_role(
        self,
        company_id: str,
        role_id: int,
        name: str | None = None,
        description: str | None = None,
        permissions: Iterable[str] | None = None,
    ) -> Role:
        """Update a role's name, description or permission set.

        Fields left as None are unchanged. Accounts reference roles by id,
        so renaming a role in use keeps every assignment intact.

        Raises:
            ValidationError: Empty name or description, or an unknown permission.
            NotFoundError: The role does not exist in the company.
            ForbiddenError: The role is a system role.
            ConflictError: The new name is taken or reserved, or the role
                changed concurrently.
        """
        if name is not None:
            name = self._clean_text(name, "name")
        if description is not None:
            description = self._clean_text(description, "description")
        permission_list = None if permissions is None else self._validate_permissions(permissions)

        async with self.hold(company_id, role_id):
            async with atomic(self.session, "update role"):
                model = await self._require(company_id, role_id, for_update=True)
                if model.is_system:
                    logger.info(
                        "Role update rejected: system role",
                        company_id=company_id,
                        role_id=role_id,
                    )
                    raise ForbiddenError(
                        f"Role '{model.name}' is a system role and cannot be edited",
                        code="system_role",
                    )

                if name is not None and name != model.name:
                    self._ensure_not_reserved(company_id, name)
                    if await self.role_repo.name_exists(company_id, name, exclude_id=role_id):
                        raise ConflictError(
                            f"Role '{name}' already exists", code="duplicate_role_name"
                        )
                    model.name = name
                if description is not None:
                    model.description = description
                if permission_list is not None:
                    model.permissions = permission_list
                model.updated_at = self.clock()

                await self.role_repo.update(model)
                count = await self.role_repo.count_assigned_users(company_id, role_id)
                role = to_role(model, count)

        logger.info("Role updated", company_id=company_id, role_id=role_id)
        await self._notify(
            HookEvent.ON_ROLE_AFTER_UPDATE, company_id, role_id=role_id, name=role.name
        )
        return role

    async def delete_role(self, company_id: str, role_id: int) -> None:
        """Delete a role permanently.

        Raises:
            NotFoundError: The role does not exist in the company.
            ForbiddenError: The role is a system role.
            ConflictError: Accounts still reference the role.
        """
        async with self.hold(company_id, role_id):
            async with atomic(self.session, "delete role"):
                model = await self._require(company_id, role_id, for_update=True)
                if model.is_system:
                    logger.info(
                        "Role deletion rejected: system role",
                        company_id=company_id,
                        role_id=role_id,
                    )
                    raise ForbiddenError(
                        f"Role '{model.name}' is a system role and cannot be deleted",
                        code="system_role",
                    )

                assigned = await self.role_repo.count_assigned_users(company_id, role_id)
                if assigned:
                    logger.info(
                        "Role deletion rejected: role in use",
                        company_id=company_id,
                        role_id=role_id,
                        user_count=assigned,
                    )
                    raise ConflictError(
                        f"Role '{model.name}' is assigned to {assigned} account(s)",
                        code="role_in_use",
                    )

                role_name = model.name
                await self.role_repo.delete(model)

        logger.info("Role deleted", company_id=company_id, role_id=role_id)
        await self._notify(
            HookEvent.ON_ROLE_AFTER_DELETE, company_id, role_id=role_id, name=role_name
        )

    async def seed_system_roles(self, company_id: str) -> list[Role]:
        """Create the company's system role if it is missing.

        The system role grants every catalog permission. Calling this again
        is a no-op. Returns the company's system roles.

        Raises:
            ConflictError: An ordinary role already uses the system role name.
        """
        role_name = self.settings.system_role_name
        async with atomic(self.session, "seed system roles"):
            existing = await self.role_repo.get_by_name(company_id, role_name)
            if existing is not None and not existing.is_system:
                logger.warning(
                    "System role name held by an ordinary role",
                    company_id=company_id,
                    role_id=existing.id,
                )
                raise ConflictError(
                    f"Role '{role_name}' exists but is not a system role",
                    code="system_role_name_taken",
                )
            if existing is None:
                now = self.clock()
                await self.role_repo.create(
                    RoleModel(
                        company_id=company_id,
                        name=role_name,
                        description="Full access to every area of the company",
                        permissions=self.catalog.all(),
                        is_system=True,
                        created_at=now,
                        updated_at=now,
                    )
                )
                logger.info("System role seeded", company_id=company_id, role_name=role_name)

        return [role for role in await self.list_roles(company_id) if role.is_system]

    # Collaboration with the Account Directory

    def hold(self, company_id: str, role_id: int) -> AbstractAsyncContextManager[None]:
        """Serialize against every other mutation touching this role."""
        return self.locks.hold(ROLE_LOCK, company_id, role_id)

    async def find_by_name(self, company_id: str, name: str) -> RoleModel:
        """Resolve a role reference by name within the current transaction.

        Raises:
            ValidationError: No role with that name exists in the company.
        """
        model = await self.role_repo.get_by_name(company_id, name)
        if model is None:
            raise ValidationError(f"Unknown role '{name}'", code="unknown_role")
        return model

    async def recheck(self, company_id: str, role_id: int, name: str) -> RoleModel:
        """Re-read a resolved role under its lock before committing against it.

        Raises:
            ValidationError: The role was deleted or renamed since it was resolved.
        """
        model = await self.role_repo.get_by_id(company_id, role_id, for_update=True)
        if model is None or model.name != name:
            logger.info("Role reference went stale", company_id=company_id, role_id=role_id)
            raise ValidationError(f"Unknown role '{name}'", code="unknown_role")
        return model

    # Helpers

    async def _require(self, company_id: str, role_id: int, for_update: bool = False) -> RoleModel:
        model = await self.role_repo.get_by_id(company_id, role_id, for_update=for_update)
        if model is None:
            raise NotFoundError(f"Role {role_id} not found", code="role_not_found")
        return model

    def _validate_permissions(self, permissions: Iterable[str]) -> list[str]:
        if isinstance(permissions, str):
            raise ValidationError("Permissions must be a list of tags", code="invalid_permissions")
        permission_list = list(dict.fromkeys(permissions))
        unknown = self.catalog.unknown(permission_list)
        if unknown:
            logger.info("Unknown permission tags rejected", unknown=unknown)
            raise ValidationError(
                f"Unknown permission(s): {', '.join(unknown)}",
                code="unknown_permission",
            )
        return permission_list

    def _ensure_not_reserved(self, company_id: str, name: str) -> None:
        if name == self.settings.system_role_name:
            logger.info("Role rejected: reserved name", company_id=company_id, role_name=name)
            raise ConflictError(
                f"Role name '{name}' is reserved for the system role",
                code="reserved_role_name",
            )

    @staticmethod
    def _clean_text(value: str | None, field: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValidationError(f"Role {field} is required", code=f"{field}_required")
        return cleaned

    async def _notify(self, event: str, company_id: str, **data: object) -> None:
        if self.hooks is None:
            return
        await self.hooks.trigger(
            event=event,
            data={"company_id": company_id, **data},
            context=HookContext(company_id=company_id),
            filters={"company_id": company_id},
        )
