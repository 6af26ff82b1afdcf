"""Permission Catalog.

The fixed set of permission tags a role may grant. The catalog is identical
for every company and is built once per process from configuration.
Membership is an exact, case-sensitive match.
"""

from collections.abc import Iterable
from functools import lru_cache

from tenantaccess.core.config import get_settings


class PermissionCatalog:
    """Read-only enumeration of recognized permission tags."""

    def __init__(self, permissions: Iterable[str]) -> None:
        self._ordered = tuple(dict.fromkeys(permissions))
        self._members = frozenset(self._ordered)

    def __contains__(self, permission: object) -> bool:
        return permission in self._members

    def __iter__(self):
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def contains(self, permission: str) -> bool:
        """Check whether a tag is a member of the catalog."""
        return permission in self._members

    def unknown(self, permissions: Iterable[str]) -> list[str]:
        """Return the tags that are not catalog members, in input order."""
        return [p for p in dict.fromkeys(permissions) if p not in self._members]

    def all(self) -> list[str]:
        """All tags in catalog order."""
        return list(self._ordered)


@lru_cache
def get_permission_catalog() -> PermissionCatalog:
    """Process-wide catalog, loaded from settings on first use."""
    return PermissionCatalog(get_settings().permissions)
