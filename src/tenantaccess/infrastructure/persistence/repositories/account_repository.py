"""User account repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tenantaccess.infrastructure.persistence.models import UserAccountModel


class AccountRepository:
    """Repository for user account database operations.

    Accounts are always returned with their role loaded, so the role name
    can be resolved without further queries.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, account: UserAccountModel) -> UserAccountModel:
        """Add a new account and flush it."""
        self.session.add(account)
        await self.session.flush()
        return account

    async def get_by_id(
        self, company_id: str, account_id: str, for_update: bool = False
    ) -> UserAccountModel | None:
        """Get an account by ID within a company.

        Args:
            company_id: Company the account must belong to.
            account_id: Account ID (UUID string).
            for_update: Lock the row for the rest of the transaction where
                the backend supports it, and refresh any copy already
                loaded in the session.

        Returns:
            Account model with its role loaded, or None.
        """
        query = (
            select(UserAccountModel)
            .where(
                UserAccountModel.company_id == company_id,
                UserAccountModel.id == account_id,
            )
            .options(selectinload(UserAccountModel.role))
        )
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_for_company(self, company_id: str) -> list[UserAccountModel]:
        """List all accounts of a company ordered by username."""
        result = await self.session.execute(
            select(UserAccountModel)
            .where(UserAccountModel.company_id == company_id)
            .options(selectinload(UserAccountModel.role))
            .order_by(UserAccountModel.username)
        )
        return list(result.scalars().all())

    async def username_exists(
        self, company_id: str, username: str, exclude_id: str | None = None
    ) -> bool:
        """Check whether another account in the company uses a username."""
        query = select(UserAccountModel.id).where(
            UserAccountModel.company_id == company_id,
            UserAccountModel.username == username,
        )
        if exclude_id is not None:
            query = query.where(UserAccountModel.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def email_exists(
        self, company_id: str, email: str, exclude_id: str | None = None
    ) -> bool:
        """Check whether another account in the company uses an email."""
        query = select(UserAccountModel.id).where(
            UserAccountModel.company_id == company_id,
            UserAccountModel.email == email,
        )
        if exclude_id is not None:
            query = query.where(UserAccountModel.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def update(self, account: UserAccountModel) -> UserAccountModel:
        """Flush pending changes to an account."""
        self.session.add(account)
        await self.session.flush()
        return account

    async def delete(self, account: UserAccountModel) -> None:
        """Delete an account."""
        await self.session.delete(account)
        await self.session.flush()
