"""Role API schemas for request/response validation."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field

from tenantaccess.domain.entities import Role


class CreateRoleRequest(BaseModel):
    """Request schema for creating a role.

    Attributes:
        name: Role name, unique within the company.
        description: What the role is for.
        permissions: Permission tags, each from the permission catalog.
    """

    name: str = Field(..., validation_alias=AliasChoices("name", "role_name"))
    description: str
    permissions: list[str] = Field(default_factory=list)


class UpdateRoleRequest(BaseModel):
    """Request schema for updating a role. Omitted fields are unchanged."""

    name: str | None = Field(None, validation_alias=AliasChoices("name", "role_name"))
    description: str | None = None
    permissions: list[str] | None = None


class RoleResponse(BaseModel):
    """Response schema for a role.

    Attributes:
        id: Role ID.
        name: Role name.
        description: Role description.
        permissions: Granted permission tags.
        is_system: System roles cannot be edited or deleted.
        user_count: Accounts currently holding the role.
    """

    id: int
    company_id: str
    name: str
    description: str
    permissions: list[str]
    is_system: bool
    user_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, role: Role) -> "RoleResponse":
        return cls(
            id=role.id,
            company_id=role.company_id,
            name=role.name,
            description=role.description,
            permissions=list(role.permissions),
            is_system=role.is_system,
            user_count=role.user_count,
            created_at=role.created_at,
            updated_at=role.updated_at,
        )


class RoleListResponse(BaseModel):
    """Response schema for listing roles."""

    items: list[RoleResponse]
    total: int


class CatalogResponse(BaseModel):
    """Response schema for a configured catalog (permissions or departments)."""

    items: list[str]
    total: int
