"""Unit tests for RoleRegistry."""

import pytest

from tenantaccess.core.config import Settings
from tenantaccess.core.hooks import HookEvent
from tenantaccess.domain.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from tenantaccess.domain.services import RoleRegistry, get_permission_catalog
from tenantaccess.infrastructure.persistence.models import RoleModel

COMPANY_ID = "acme"
ADMIN_ID, CLERK_ID, ACCOUNTANT_ID = 1, 2, 3


async def _role_names(role_registry) -> list[str]:
    return [role.name for role in await role_registry.list_roles(COMPANY_ID)]


@pytest.mark.asyncio
async def test_list_roles_includes_derived_user_counts(role_registry, directory, make_invitation):
    """user_count reflects the accounts holding each role."""
    await directory.invite_account(COMPANY_ID, make_invitation(username="a", email="a@example.com"))
    await directory.invite_account(COMPANY_ID, make_invitation(username="b", email="b@example.com"))

    roles = {role.name: role for role in await role_registry.list_roles(COMPANY_ID)}

    assert roles["Clerk"].user_count == 2
    assert roles["Clerk"].is_in_use is True
    assert roles["Accountant"].user_count == 0
    assert roles["Admin"].is_system is True


@pytest.mark.asyncio
async def test_list_roles_is_scoped_to_company(role_registry):
    """Roles of one company are invisible to another."""
    assert await role_registry.list_roles("globex") == []


@pytest.mark.asyncio
async def test_create_role_success(role_registry, hook_registry):
    """A created role is non-system, unassigned and fires the create hook."""
    events = []
    hook_registry.register(
        HookEvent.ON_ROLE_AFTER_CREATE,
        lambda event, data, context: events.append(data),
    )

    role = await role_registry.create_role(
        COMPANY_ID, "  Ops  ", "Ops team", ["Dashboard", "Inventory"]
    )

    assert role.id is not None
    assert role.name == "Ops"
    assert role.permissions == ["Dashboard", "Inventory"]
    assert role.is_system is False
    assert role.user_count == 0
    assert events == [{"company_id": COMPANY_ID, "role_id": role.id, "name": "Ops"}]


@pytest.mark.asyncio
async def test_create_role_with_empty_permission_set(role_registry):
    """A role may grant no permissions at all."""
    role = await role_registry.create_role(COMPANY_ID, "Guest", "Read nothing", [])
    assert role.permissions == []


@pytest.mark.asyncio
async def test_create_role_unknown_permission_rejected(role_registry):
    """An unknown tag is rejected and no role is created."""
    before = await _role_names(role_registry)

    with pytest.raises(ValidationError) as exc_info:
        await role_registry.create_role(COMPANY_ID, "Ops", "Ops team", ["Dashboard", "FakeTag"])

    assert exc_info.value.code == "unknown_permission"
    assert "FakeTag" in exc_info.value.message
    assert await _role_names(role_registry) == before


@pytest.mark.asyncio
async def test_create_role_permission_match_is_exact(role_registry):
    """Catalog membership is case-sensitive."""
    with pytest.raises(ValidationError):
        await role_registry.create_role(COMPANY_ID, "Ops", "Ops team", ["dashboard"])


@pytest.mark.asyncio
@pytest.mark.parametrize("name,description", [("", "Ops team"), ("Ops", "   ")])
async def test_create_role_requires_name_and_description(role_registry, name, description):
    with pytest.raises(ValidationError):
        await role_registry.create_role(COMPANY_ID, name, description, [])


@pytest.mark.asyncio
async def test_create_role_duplicate_name(role_registry):
    """Role names are unique within a company."""
    with pytest.raises(ConflictError) as exc_info:
        await role_registry.create_role(COMPANY_ID, "Clerk", "Another clerk", [])
    assert exc_info.value.code == "duplicate_role_name"


@pytest.mark.asyncio
async def test_same_role_name_allowed_in_other_company(role_registry):
    role = await role_registry.create_role("globex", "Clerk", "Globex clerks", ["Sales"])
    assert role.company_id == "globex"


@pytest.mark.asyncio
async def test_get_role_not_found_across_companies(role_registry):
    """A role id from another company does not resolve."""
    with pytest.raises(NotFoundError):
        await role_registry.get_role("globex", CLERK_ID)


@pytest.mark.asyncio
async def test_update_role_fields(role_registry):
    role = await role_registry.update_role(
        COMPANY_ID,
        ACCOUNTANT_ID,
        description="Books and payroll",
        permissions=["Accounting", "Payroll"],
    )

    assert role.name == "Accountant"
    assert role.description == "Books and payroll"
    assert role.permissions == ["Accounting", "Payroll"]


@pytest.mark.asyncio
async def test_rename_role_keeps_account_assignments(role_registry, directory, make_invitation):
    """Accounts reference the role by id, so a rename carries over."""
    account = await directory.invite_account(COMPANY_ID, make_invitation())

    await role_registry.update_role(COMPANY_ID, CLERK_ID, name="Sales Clerk")

    refreshed = await directory.get_account(COMPANY_ID, account.id)
    assert refreshed.role_id == CLERK_ID
    assert refreshed.role_name == "Sales Clerk"


@pytest.mark.asyncio
async def test_update_system_role_forbidden(role_registry):
    with pytest.raises(ForbiddenError):
        await role_registry.update_role(COMPANY_ID, ADMIN_ID, description="Changed")


@pytest.mark.asyncio
async def test_update_missing_role_not_found(role_registry):
    with pytest.raises(NotFoundError):
        await role_registry.update_role(COMPANY_ID, 999, description="Changed")


@pytest.mark.asyncio
async def test_update_role_unknown_permission(role_registry):
    with pytest.raises(ValidationError):
        await role_registry.update_role(COMPANY_ID, CLERK_ID, permissions=["FakeTag"])

    role = await role_registry.get_role(COMPANY_ID, CLERK_ID)
    assert role.permissions == ["Dashboard", "Sales"]


@pytest.mark.asyncio
async def test_update_role_name_conflict(role_registry):
    with pytest.raises(ConflictError):
        await role_registry.update_role(COMPANY_ID, CLERK_ID, name="Accountant")


@pytest.mark.asyncio
async def test_delete_scenario_system_role_then_unused_role(
    role_registry, directory, make_invitation
):
    """System role with accounts is forbidden; an unused role is deleted."""
    for name in ("root1", "root2"):
        await directory.invite_account(
            COMPANY_ID,
            make_invitation(username=name, email=f"{name}@example.com", role="Admin"),
        )

    with pytest.raises(ForbiddenError):
        await role_registry.delete_role(COMPANY_ID, ADMIN_ID)

    await role_registry.delete_role(COMPANY_ID, CLERK_ID)

    assert await _role_names(role_registry) == ["Admin", "Accountant"]


@pytest.mark.asyncio
async def test_delete_role_in_use_conflict(role_registry, directory, make_invitation):
    """A role held by accounts cannot be deleted and nothing changes."""
    account = await directory.invite_account(COMPANY_ID, make_invitation())

    with pytest.raises(ConflictError) as exc_info:
        await role_registry.delete_role(COMPANY_ID, CLERK_ID)

    assert exc_info.value.code == "role_in_use"
    role = await role_registry.get_role(COMPANY_ID, CLERK_ID)
    assert role.user_count == 1
    assert (await directory.get_account(COMPANY_ID, account.id)).role_name == "Clerk"


@pytest.mark.asyncio
async def test_delete_role_after_last_account_removed(role_registry, directory, make_invitation):
    account = await directory.invite_account(COMPANY_ID, make_invitation())
    await directory.remove_account(COMPANY_ID, account.id)

    await role_registry.delete_role(COMPANY_ID, CLERK_ID)

    with pytest.raises(NotFoundError):
        await role_registry.get_role(COMPANY_ID, CLERK_ID)


@pytest.mark.asyncio
async def test_delete_missing_role_not_found(role_registry):
    with pytest.raises(NotFoundError):
        await role_registry.delete_role(COMPANY_ID, 999)


@pytest.mark.asyncio
async def test_seed_system_roles_is_idempotent(role_registry):
    """Seeding creates one Super Admin holding every catalog permission."""
    first = await role_registry.seed_system_roles("globex")
    second = await role_registry.seed_system_roles("globex")

    assert [r.name for r in first] == ["Super Admin"]
    assert [r.id for r in second] == [first[0].id]
    assert first[0].is_system is True
    assert first[0].permissions == get_permission_catalog().all()
    assert len(await role_registry.list_roles("globex")) == 1


@pytest.mark.asyncio
async def test_create_role_with_system_role_name_rejected(role_registry):
    """The system role name is reserved so seeding can always claim it."""
    with pytest.raises(ConflictError) as exc_info:
        await role_registry.create_role("globex", "Super Admin", "Impostor", [])

    assert exc_info.value.code == "reserved_role_name"
    assert await role_registry.list_roles("globex") == []


@pytest.mark.asyncio
async def test_rename_role_to_system_role_name_rejected(role_registry):
    with pytest.raises(ConflictError) as exc_info:
        await role_registry.update_role(COMPANY_ID, CLERK_ID, name="Super Admin")

    assert exc_info.value.code == "reserved_role_name"
    assert (await role_registry.get_role(COMPANY_ID, CLERK_ID)).name == "Clerk"


@pytest.mark.asyncio
async def test_seed_fails_when_ordinary_role_holds_system_name(role_registry, db_session):
    """Seeding never reports success without a system role in place."""
    db_session.add(
        RoleModel(
            company_id="globex",
            name="Super Admin",
            description="Created before the name was reserved",
            permissions=[],
            is_system=False,
        )
    )
    await db_session.commit()

    with pytest.raises(ConflictError) as exc_info:
        await role_registry.seed_system_roles("globex")

    assert exc_info.value.code == "system_role_name_taken"
    roles = await role_registry.list_roles("globex")
    assert [(r.name, r.is_system) for r in roles] == [("Super Admin", False)]


@pytest.mark.asyncio
async def test_seed_uses_configured_system_role_name(db_session):
    settings = Settings(_env_file=None, environment="testing", system_role_name="Owner")
    registry = RoleRegistry(db_session, settings=settings)

    seeded = await registry.seed_system_roles("globex")

    assert [r.name for r in seeded] == ["Owner"]
