"""Role repository for database operations."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenantaccess.infrastructure.persistence.models import RoleModel, UserAccountModel


class RoleRepository:
    """Repository for role database operations.

    Every query is scoped to a company; a role id from another company
    never resolves.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, role: RoleModel) -> RoleModel:
        """Add a new role and flush it so its id is assigned."""
        self.session.add(role)
        await self.session.flush()
        return role

    async def get_by_id(
        self, company_id: str, role_id: int, for_update: bool = False
    ) -> RoleModel | None:
        """Get a role by ID within a company.

        Args:
            company_id: Company the role must belong to.
            role_id: Role ID.
            for_update: Lock the row for the rest of the transaction where
                the backend supports it, and refresh any copy already
                loaded in the session.

        Returns:
            Role model if found, None otherwise.
        """
        query = select(RoleModel).where(
            RoleModel.company_id == company_id,
            RoleModel.id == role_id,
        )
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_name(self, company_id: str, name: str) -> RoleModel | None:
        """Get a role by its exact name within a company."""
        result = await self.session.execute(
            select(RoleModel).where(
                RoleModel.company_id == company_id,
                RoleModel.name == name,
            )
        )
        return result.scalar_one_or_none()

    async def name_exists(
        self, company_id: str, name: str, exclude_id: int | None = None
    ) -> bool:
        """Check whether another role in the company already uses a name."""
        query = select(RoleModel.id).where(
            RoleModel.company_id == company_id,
            RoleModel.name == name,
        )
        if exclude_id is not None:
            query = query.where(RoleModel.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def list_for_company(self, company_id: str) -> list[RoleModel]:
        """List all roles of a company, oldest first."""
        result = await self.session.execute(
            select(RoleModel)
            .where(RoleModel.company_id == company_id)
            .order_by(RoleModel.id)
        )
        return list(result.scalars().all())

    async def count_for_company(self, company_id: str) -> int:
        """Count the roles of a company."""
        result = await self.session.execute(
            select(func.count(RoleModel.id)).where(RoleModel.company_id == company_id)
        )
        return result.scalar_one() or 0

    async def count_assigned_users(self, company_id: str, role_id: int) -> int:
        """Count the accounts that reference a role."""
        result = await self.session.execute(
            select(func.count(UserAccountModel.id)).where(
                UserAccountModel.company_id == company_id,
                UserAccountModel.role_id == role_id,
            )
        )
        return result.scalar_one() or 0

    async def assigned_user_counts(self, company_id: str) -> dict[int, int]:
        """Map role id to the number of accounts referencing it.

        Roles nobody references are absent from the mapping.
        """
        result = await self.session.execute(
            select(UserAccountModel.role_id, func.count(UserAccountModel.id))
            .where(UserAccountModel.company_id == company_id)
            .group_by(UserAccountModel.role_id)
        )
        return {role_id: count for role_id, count in result.all()}

    async def update(self, role: RoleModel) -> RoleModel:
        """Flush pending changes to a role."""
        self.session.add(role)
        await self.session.flush()
        return role

    async def delete(self, role: RoleModel) -> None:
        """Delete a role."""
        await self.session.delete(role)
        await self.session.flush()
