"""TenantAccess - company user accounts and role-based access control.

Per-company account directory and role registry with a fixed permission
catalog, credential expiry and two-factor flags.
"""

__version__ = "0.1.0"

from tenantaccess.infrastructure.api.app import app

__all__ = ["app", "__version__"]
