"""Hook system core module.

Session, audit and notification layers attach here instead of being wired
into the directory services.

Example usage:
    from tenantaccess.core.hooks import HookEvent, HookRegistry

    registry = HookRegistry()

    async def revoke_sessions(event, data, context):
        await session_store.revoke_all(data["company_id"], data["account_id"])

    registry.register(HookEvent.ON_ACCOUNT_CREDENTIALS_RESET, revoke_sessions)
"""

from tenantaccess.core.hooks.hook_events import (
    EVENT_CATEGORIES,
    HookCategory,
    HookEvent,
    get_all_events,
)
from tenantaccess.core.hooks.hook_registry import HookRegistry, RegisteredHook

__all__ = [
    "EVENT_CATEGORIES",
    "HookCategory",
    "HookEvent",
    "HookRegistry",
    "RegisteredHook",
    "get_all_events",
]
