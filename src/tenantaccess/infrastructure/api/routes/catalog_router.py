"""Catalog API routes.

Read-only views of the configured permission catalog and department list,
used to populate role and account forms.
"""

from fastapi import APIRouter

from tenantaccess.core.config import get_settings
from tenantaccess.domain.services import get_permission_catalog
from tenantaccess.infrastructure.api.dependencies import CompanyId
from tenantaccess.infrastructure.api.schemas import CatalogResponse

router = APIRouter()


@router.get("/permissions", response_model=CatalogResponse)
async def list_permissions(company_id: CompanyId) -> CatalogResponse:  # noqa: ARG001
    """Permission tags a role may grant. Identical for every company."""
    permissions = get_permission_catalog().all()
    return CatalogResponse(items=permissions, total=len(permissions))


@router.get("/departments", response_model=CatalogResponse)
async def list_departments(company_id: CompanyId) -> CatalogResponse:  # noqa: ARG001
    """Departments an account may belong to."""
    departments = list(get_settings().departments)
    return CatalogResponse(items=departments, total=len(departments))
