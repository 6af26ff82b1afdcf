"""Roles API routes.

Mounted under ``{api_prefix}/companies/{company_id}/roles``.
"""

from fastapi import APIRouter, Response, status

from tenantaccess.core.logging import get_logger
from tenantaccess.infrastructure.api.dependencies import CompanyId, Roles
from tenantaccess.infrastructure.api.schemas import (
    CreateRoleRequest,
    RoleListResponse,
    RoleResponse,
    UpdateRoleRequest,
)

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=RoleListResponse)
async def list_roles(company_id: CompanyId, roles: Roles) -> RoleListResponse:
    """List all roles with their assigned-user counts."""
    items = await roles.list_roles(company_id)
    logger.debug("Roles listed", company_id=company_id, count=len(items))
    return RoleListResponse(items=[RoleResponse.from_entity(r) for r in items], total=len(items))


@router.post(
    "/seed",
    response_model=RoleListResponse,
)
async def seed_system_roles(company_id: CompanyId, roles: Roles) -> RoleListResponse:
    """Create the company's system role if it does not exist yet."""
    seeded = await roles.seed_system_roles(company_id)
    return RoleListResponse(items=[RoleResponse.from_entity(r) for r in seeded], total=len(seeded))


@router.get(
    "/{role_id}",
    response_model=RoleResponse,
    responses={404: {"description": "Role not found"}},
)
async def get_role(company_id: CompanyId, role_id: int, roles: Roles) -> RoleResponse:
    """Get one role."""
    return RoleResponse.from_entity(await roles.get_role(company_id, role_id))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=RoleResponse,
    responses={
        400: {"description": "Validation error"},
        409: {"description": "Role name already exists"},
    },
)
async def create_role(
    company_id: CompanyId, request: CreateRoleRequest, roles: Roles
) -> RoleResponse:
    """Create a new role."""
    role = await roles.create_role(
        company_id, request.name, request.description, request.permissions
    )
    return RoleResponse.from_entity(role)


@router.patch(
    "/{role_id}",
    response_model=RoleResponse,
    responses={
        400: {"description": "Validation error"},
        403: {"description": "System role"},
        404: {"description": "Role not found"},
        409: {"description": "Role name already exists"},
    },
)
async def update_role(
    company_id: CompanyId, role_id: int, request: UpdateRoleRequest, roles: Roles
) -> RoleResponse:
    """Update a role's name, description or permissions."""
    role = await roles.update_role(
        company_id,
        role_id,
        name=request.name,
        description=request.description,
        permissions=request.permissions,
    )
    return RoleResponse.from_entity(role)


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        403: {"description": "System role"},
        404: {"description": "Role not found"},
        409: {"description": "Role is assigned to accounts"},
    },
)
async def delete_role(company_id: CompanyId, role_id: int, roles: Roles) -> Response:
    """Delete a role nobody holds."""
    await roles.delete_role(company_id, role_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
