"""Conversion from persistence models to domain entities."""

from datetime import datetime, timezone

from tenantaccess.domain.entities import Account, AccountStatus, Role
from tenantaccess.infrastructure.persistence.models import RoleModel, UserAccountModel


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def to_role(model: RoleModel, user_count: int = 0) -> Role:
    """Build a Role entity. ``user_count`` is computed by the caller."""
    return Role(
        id=model.id,
        company_id=model.company_id,
        name=model.name,
        description=model.description,
        permissions=list(model.permissions or []),
        is_system=model.is_system,
        user_count=user_count,
        created_at=as_utc(model.created_at),
        updated_at=as_utc(model.updated_at),
    )


def to_account(model: UserAccountModel) -> Account:
    """Build an Account entity. The model's role must already be loaded."""
    return Account(
        id=model.id,
        company_id=model.company_id,
        username=model.username,
        full_name=model.full_name,
        email=model.email,
        role_id=model.role_id,
        role_name=model.role.name,
        department=model.department,
        status=AccountStatus(model.status),
        two_factor_enabled=model.two_factor_enabled,
        password_expiry=as_utc(model.password_expiry),
        login_count=model.login_count,
        last_login=as_utc(model.last_login),
        created_at=as_utc(model.created_at),
        updated_at=as_utc(model.updated_at),
    )
