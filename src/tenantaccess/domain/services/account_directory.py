"""Account Directory service.

Owns the user accounts of each company. Accounts reference their role by id;
callers name the role and the directory resolves it against the Role Registry
on every create and update.

Every mutation of an account runs under that account's lock and, when it
assigns a role, under the role's lock as well (account first, then role).
The read-modify-write happens inside one transaction, so a failed or
cancelled call leaves no partial state behind.
"""

import uuid
from collections.abc import Callable
from contextlib import AsyncExitStack
from dataclasses import dataclass, fields
from datetime import datetime, timedelta, timezone

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.ext.asyncio import AsyncSession

from tenantaccess.core.config import Settings, get_settings
from tenantaccess.core.hooks import HookEvent, HookRegistry
from tenantaccess.core.logging import get_logger
from tenantaccess.domain.entities import Account, AccountStatus, HookContext
from tenantaccess.domain.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from tenantaccess.domain.services.directory_views import (
    DirectorySummary,
    accounts_needing_password_reset,
    summarize_accounts,
)
from tenantaccess.domain.services.entity_locks import EntityLockRegistry, entity_locks
from tenantaccess.domain.services.password_validator import PasswordValidator
from tenantaccess.domain.services.role_registry import RoleRegistry
from tenantaccess.infrastructure.auth import hash_password
from tenantaccess.infrastructure.persistence.mappers import to_account
from tenantaccess.infrastructure.persistence.models import UserAccountModel
from tenantaccess.infrastructure.persistence.repositories import AccountRepository
from tenantaccess.infrastructure.persistence.transaction import atomic

logger = get_logger(__name__)

ACCOUNT_LOCK = "account"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AccountInvitation:
    """Input for inviting a new account.

    ``role`` is the role's display name as the caller selected it.
    """

    username: str
    full_name: str
    email: str
    role: str
    department: str
    password: str
    confirm_password: str


@dataclass
class AccountChanges:
    """Fields to change on an existing account. None means unchanged."""

    username: str | None = None
    full_name: str | None = None
    email: str | None = None
    role: str | None = None
    department: str | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


class AccountDirectory:
    """Service for account management within a company."""

    def __init__(
        self,
        session: AsyncSession,
        roles: RoleRegistry | None = None,
        settings: Settings | None = None,
        hooks: HookRegistry | None = None,
        locks: EntityLockRegistry | None = None,
        clock: Callable[[], datetime] | None = None,
        password_validator: PasswordValidator | None = None,
    ) -> None:
        """Initialize the account directory.

        Args:
            session: SQLAlchemy async session.
            roles: Role registry sharing the same session.
            settings: Policy settings. Defaults to the process settings.
            hooks: Registry notified after each committed change.
            locks: Per-identifier lock registry. Defaults to the process-wide one.
            clock: Returns the current time. Defaults to UTC now.
            password_validator: Strength policy for new passwords.
        """
        self.session = session
        self.settings = settings or get_settings()
        self.locks = locks or entity_locks
        self.hooks = hooks
        self.clock = clock or _utcnow
        self.roles = roles or RoleRegistry(
            session, settings=self.settings, hooks=hooks, locks=self.locks, clock=self.clock
        )
        self.account_repo = AccountRepository(session)
        self.password_validator = password_validator or PasswordValidator.from_settings(
            self.settings
        )

    # Queries

    async def list_accounts(self, company_id: str) -> list[Account]:
        """List the company's accounts ordered by username."""
        async with atomic(self.session, "list accounts"):
            models = await self.account_repo.list_for_company(company_id)
            return [to_account(model) for model in models]

    async def get_account(self, company_id: str, account_id: str) -> Account:
        """Get one account.

        Raises:
            NotFoundError: If the account does not exist in the company.
        """
        async with atomic(self.session, "get account"):
            return to_account(await self._require(company_id, account_id))

    async def accounts_needing_password_reset(
        self,
        company_id: str,
        now: datetime | None = None,
        threshold_days: int | None = None,
    ) -> list[Account]:
        """Accounts whose password expires within ``threshold_days`` of ``now``.

        Recomputed from storage on every call. A naive ``now`` is taken to be UTC.
        """
        threshold = self._threshold(threshold_days)
        accounts = await self.list_accounts(company_id)
        return accounts_needing_password_reset(accounts, now or self.clock(), threshold)

    async def summarize(
        self,
        company_id: str,
        now: datetime | None = None,
        threshold_days: int | None = None,
    ) -> DirectorySummary:
        """Headline counts for the company's directory."""
        threshold = self._threshold(threshold_days)
        accounts = await self.list_accounts(company_id)
        total_roles = await self.roles.count_roles(company_id)
        return summarize_accounts(accounts, total_roles, now or self.clock(), threshold)

    async def effective_permissions(self, company_id: str, account_id: str) -> frozenset[str]:
        """Permissions an authorization layer should grant the account.

        Inactive accounts hold no permissions regardless of their role.
        """
        async with atomic(self.session, "resolve permissions"):
            model = await self._require(company_id, account_id)
            if model.status != AccountStatus.ACTIVE.value:
                return frozenset()
            return frozenset(model.role.permissions or [])

    # Mutations

    async def invite_account(self, company_id: str, invitation: AccountInvitation) -> Account:
        """Create an Active account from an invitation.

        Every input check that needs no storage runs first, so a password
        mismatch or a missing field never reaches the database.

        Raises:
            ValidationError: Missing or malformed field, password mismatch,
                weak password, or unknown role.
            ConflictError: Username or email already used in the company.
            TransportError: Storage failed. Nothing was created.
        """
        username = self._clean(invitation.username, "username")
        full_name = self._clean(invitation.full_name, "full_name")
        email = self._normalize_email(invitation.email)
        role_name = self._clean(invitation.role, "role")
        department = self._validate_department(invitation.department)
        if invitation.password != invitation.confirm_password:
            logger.info("Invitation rejected: password mismatch", company_id=company_id)
            raise ValidationError("Passwords do not match", code="password_mismatch")
        self._check_password_strength(invitation.password)

        role_id = await self._resolve_role_id(company_id, role_name)
        password_hash = hash_password(invitation.password)

        async with self.roles.hold(company_id, role_id):
            async with atomic(self.session, "invite account"):
                role = await self.roles.recheck(company_id, role_id, role_name)
                await self._ensure_unique(company_id, username, email)

                now = self.clock()
                model = await self.account_repo.create(
                    UserAccountModel(
                        id=str(uuid.uuid4()),
                        company_id=company_id,
                        username=username,
                        full_name=full_name,
                        email=email,
                        role=role,
                        department=department,
                        status=AccountStatus.ACTIVE.value,
                        two_factor_enabled=False,
                        password_hash=password_hash,
                        password_changed_at=now,
                        password_expiry=self._expiry_from(now),
                        login_count=0,
                        last_login=None,
                        created_at=now,
                        updated_at=now,
                    )
                )
                account = to_account(model)

        logger.info(
            "Account invited",
            company_id=company_id,
            account_id=account.id,
            role_id=account.role_id,
        )
        await self._notify(
            HookEvent.ON_ACCOUNT_AFTER_CREATE,
            company_id,
            account_id=account.id,
            username=account.username,
            role_id=account.role_id,
        )
        return account

    async def update_account(
        self, company_id: str, account_id: str, changes: AccountChanges
    ) -> Account:
        """Apply changes to an account and return the fresh record.

        A role named in ``changes`` is resolved again under its lock before
        the write commits, so a role deleted or renamed in between is caught.

        Raises:
            ValidationError: Malformed field or unknown role.
            NotFoundError: The account does not exist in the company.
            ConflictError: Username or email already used, or a lost race.
        """
        username = None if changes.username is None else self._clean(changes.username, "username")
        full_name = (
            None if changes.full_name is None else self._clean(changes.full_name, "full_name")
        )
        email = None if changes.email is None else self._normalize_email(changes.email)
        role_name = None if changes.role is None else self._clean(changes.role, "role")
        department = (
            None if changes.department is None else self._validate_department(changes.department)
        )

        async with AsyncExitStack() as stack:
            await stack.enter_async_context(self._hold(company_id, account_id))
            role_id = None
            if role_name is not None:
                role_id = await self._resolve_role_id(company_id, role_name)
                await stack.enter_async_context(self.roles.hold(company_id, role_id))

            async with atomic(self.session, "update account"):
                model = await self._require(company_id, account_id, for_update=True)
                if changes.is_empty():
                    return to_account(model)

                if role_id is not None:
                    model.role = await self.roles.recheck(company_id, role_id, role_name)
                if username is not None and username != model.username:
                    if await self.account_repo.username_exists(
                        company_id, username, exclude_id=account_id
                    ):
                        raise self._duplicate("username", username)
                    model.username = username
                if email is not None and email != model.email:
                    if await self.account_repo.email_exists(
                        company_id, email, exclude_id=account_id
                    ):
                        raise self._duplicate("email", email)
                    model.email = email
                if full_name is not None:
                    model.full_name = full_name
                if department is not None:
                    model.department = department
                model.updated_at = self.clock()

                await self.account_repo.update(model)
                account = to_account(model)

        logger.info("Account updated", company_id=company_id, account_id=account_id)
        await self._notify(
            HookEvent.ON_ACCOUNT_AFTER_UPDATE,
            company_id,
            account_id=account_id,
            username=account.username,
            role_id=account.role_id,
        )
        return account

    async def remove_account(self, company_id: str, account_id: str) -> None:
        """Delete an account permanently.

        Raises:
            NotFoundError: The account does not exist, including when it was
                already removed.
        """
        async with self._hold(company_id, account_id):
            async with atomic(self.session, "remove account"):
                model = await self._require(company_id, account_id, for_update=True)
                username = model.username
                await self.account_repo.delete(model)

        logger.info("Account removed", company_id=company_id, account_id=account_id)
        await self._notify(
            HookEvent.ON_ACCOUNT_AFTER_DELETE,
            company_id,
            account_id=account_id,
            username=username,
        )

    async def toggle_account_status(self, company_id: str, account_id: str) -> Account:
        """Flip the account between Active and Inactive.

        The current status is read in the same transaction as the write.
        """
        async with self._hold(company_id, account_id):
            async with atomic(self.session, "toggle account status"):
                model = await self._require(company_id, account_id, for_update=True)
                model.status = AccountStatus(model.status).toggled().value
                model.updated_at = self.clock()
                await self.account_repo.update(model)
                account = to_account(model)

        logger.info(
            "Account status changed",
            company_id=company_id,
            account_id=account_id,
            status=account.status.value,
        )
        await self._notify(
            HookEvent.ON_ACCOUNT_STATUS_CHANGED,
            company_id,
            account_id=account_id,
            status=account.status.value,
        )
        return account

    async def reset_credential(
        self,
        company_id: str,
        account_id: str,
        new_password: str,
        confirm_password: str | None = None,
    ) -> Account:
        """Replace the account's password and restart its expiry window.

        Attached session layers receive ``on_account_credentials_reset`` to
        invalidate the account's existing sessions.

        Raises:
            ValidationError: Mismatched confirmation or a weak password.
            NotFoundError: The account does not exist in the company.
        """
        if confirm_password is not None and new_password != confirm_password:
            logger.info("Credential reset rejected: password mismatch", company_id=company_id)
            raise ValidationError("Passwords do not match", code="password_mismatch")
        self._check_password_strength(new_password)
        password_hash = hash_password(new_password)

        async with self._hold(company_id, account_id):
            async with atomic(self.session, "reset credential"):
                model = await self._require(company_id, account_id, for_update=True)
                now = self.clock()
                model.password_hash = password_hash
                model.password_changed_at = now
                model.password_expiry = self._expiry_from(now)
                model.updated_at = now
                await self.account_repo.update(model)
                account = to_account(model)

        logger.info("Account credentials reset", company_id=company_id, account_id=account_id)
        await self._notify(
            HookEvent.ON_ACCOUNT_CREDENTIALS_RESET,
            company_id,
            account_id=account_id,
        )
        return account

    async def toggle_two_factor(self, company_id: str, account_id: str) -> Account:
        """Flip the account's two-factor flag. Nothing else changes."""
        async with self._hold(company_id, account_id):
            async with atomic(self.session, "toggle two-factor"):
                model = await self._require(company_id, account_id, for_update=True)
                model.two_factor_enabled = not model.two_factor_enabled
                model.updated_at = self.clock()
                await self.account_repo.update(model)
                account = to_account(model)

        logger.info(
            "Account two-factor changed",
            company_id=company_id,
            account_id=account_id,
            enabled=account.two_factor_enabled,
        )
        await self._notify(
            HookEvent.ON_ACCOUNT_TWO_FACTOR_CHANGED,
            company_id,
            account_id=account_id,
            enabled=account.two_factor_enabled,
        )
        return account

    async def record_login(
        self, company_id: str, account_id: str, at: datetime | None = None
    ) -> Account:
        """Count one successful login.

        Raises:
            NotFoundError: The account does not exist in the company.
            ForbiddenError: The account is Inactive.
        """
        async with self._hold(company_id, account_id):
            async with atomic(self.session, "record login"):
                model = await self._require(company_id, account_id, for_update=True)
                if model.status != AccountStatus.ACTIVE.value:
                    logger.info(
                        "Login rejected: account inactive",
                        company_id=company_id,
                        account_id=account_id,
                    )
                    raise ForbiddenError("Account is inactive", code="account_inactive")
                model.login_count += 1
                model.last_login = at or self.clock()
                await self.account_repo.update(model)
                account = to_account(model)

        logger.debug("Login recorded", company_id=company_id, account_id=account_id)
        await self._notify(
            HookEvent.ON_ACCOUNT_LOGIN_RECORDED,
            company_id,
            account_id=account_id,
            login_count=account.login_count,
        )
        return account

    # Helpers

    def _hold(self, company_id: str, account_id: str):
        return self.locks.hold(ACCOUNT_LOCK, company_id, account_id)

    async def _require(
        self, company_id: str, account_id: str, for_update: bool = False
    ) -> UserAccountModel:
        model = await self.account_repo.get_by_id(company_id, account_id, for_update=for_update)
        if model is None:
            raise NotFoundError(f"Account {account_id} not found", code="account_not_found")
        return model

    async def _resolve_role_id(self, company_id: str, role_name: str) -> int:
        async with atomic(self.session, "resolve role"):
            role = await self.roles.find_by_name(company_id, role_name)
            return role.id

    async def _ensure_unique(self, company_id: str, username: str, email: str) -> None:
        if await self.account_repo.username_exists(company_id, username):
            raise self._duplicate("username", username)
        if await self.account_repo.email_exists(company_id, email):
            raise self._duplicate("email", email)

    @staticmethod
    def _duplicate(field: str, value: str) -> ConflictError:
        logger.info("Account rejected: duplicate field", field=field)
        return ConflictError(
            f"An account with {field} '{value}' already exists",
            code=f"duplicate_{field}",
        )

    def _expiry_from(self, moment: datetime) -> datetime:
        return moment + timedelta(days=self.settings.password_expiry_days)

    def _threshold(self, threshold_days: int | None) -> int:
        if threshold_days is None:
            return self.settings.password_expiry_warning_days
        if threshold_days < 0:
            raise ValidationError("threshold_days cannot be negative", code="invalid_threshold")
        return threshold_days

    def _check_password_strength(self, password: str) -> None:
        errors = self.password_validator.validate(password)
        if errors:
            logger.info("Password rejected by policy", codes=[e.code for e in errors])
            raise ValidationError(
                "Password does not meet the password policy",
                code="weak_password",
                details=errors,
            )

    def _validate_department(self, department: str | None) -> str:
        department = self._clean(department, "department")
        if department not in self.settings.departments:
            raise ValidationError(
                f"Unknown department '{department}'",
                code="unknown_department",
            )
        return department

    @staticmethod
    def _normalize_email(email: str | None) -> str:
        email = AccountDirectory._clean(email, "email")
        try:
            result = validate_email(email, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValidationError(f"Invalid email address: {e}", code="invalid_email") from e
        return result.normalized.lower()

    @staticmethod
    def _clean(value: str | None, field: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValidationError(f"{field} is required", code=f"{field}_required")
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
