"""Hook registry - central hook registration and dispatch.

The registry provides:
- Registration of async callbacks with tag filters and priority
- Dispatch in priority order (FIFO within the same priority)
- Error isolation: a failing hook is logged and recorded in the result,
  it never propagates into the directory operation that fired it
"""

import inspect
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from tenantaccess.core.logging import get_logger
from tenantaccess.domain.entities.hook_context import HookContext, HookResult

logger = get_logger(__name__)


@dataclass
class RegisteredHook:
    """Internal representation of a registered hook.

    Attributes:
        id: Unique identifier for this hook registration.
        event: The event this hook is registered for.
        callback: The function to call with (event, data, context).
        filters: Tag-based filters (e.g., {"company_id": "acme"}).
        priority: Execution priority (higher = earlier).
        stop_on_error: Whether an error stops the remaining hooks.
        registration_order: Order in which this hook was registered.
    """

    id: str
    event: str
    callback: Callable
    filters: dict[str, Any] = field(default_factory=dict)
    priority: int = 0
    stop_on_error: bool = False
    registration_order: int = 0


class HookRegistry:
    """Central hook registration and dispatch engine.

    Example:
        registry = HookRegistry()

        hook_id = registry.register(
            event=HookEvent.ON_ROLE_AFTER_DELETE,
            callback=invalidate_role_cache,
            filters={"company_id": "acme"},
        )

        await registry.trigger(
            event=HookEvent.ON_ROLE_AFTER_DELETE,
            data={"company_id": "acme", "role_id": 7},
            filters={"company_id": "acme"},
        )
    """

    def __init__(self) -> None:
        self._hooks: dict[str, list[RegisteredHook]] = {}
        self._hook_map: dict[str, RegisteredHook] = {}
        self._registration_counter: int = 0

    def register(
        self,
        event: str,
        callback: Callable,
        filters: Optional[dict[str, Any]] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> str:
        """Register a hook for an event.

        Args:
            event: Hook event name (see HookEvent).
            callback: Sync or async function accepting (event, data, context).
            filters: Optional tag filters. The hook only fires when every
                filter key is present in the trigger filters with an equal value.
            priority: Higher priority hooks run first. Default 0.
            stop_on_error: If True, an error in this hook skips the rest.

        Returns:
            Unique hook_id string for later removal.
        """
        hook_id = f"hook_{uuid.uuid4().hex[:12]}"
        self._registration_counter += 1

        hook = RegisteredHook(
            id=hook_id,
            event=event,
            callback=callback,
            filters=filters or {},
            priority=priority,
            stop_on_error=stop_on_error,
            registration_order=self._registration_counter,
        )
        self._hooks.setdefault(event, []).append(hook)
        self._hook_map[hook_id] = hook

        logger.debug(
            "Hook registered",
            hook_id=hook_id,
            hook_event=event,
            priority=priority,
            filters=filters,
        )
        return hook_id

    def unregister(self, hook_id: str) -> bool:
        """Remove a registered hook.

        Returns:
            True if the hook was removed, False if it was not found.
        """
        hook = self._hook_map.pop(hook_id, None)
        if hook is None:
            logger.warning("Hook not found for unregister", hook_id=hook_id)
            return False

        remaining = [h for h in self._hooks.get(hook.event, []) if h.id != hook_id]
        if remaining:
            self._hooks[hook.event] = remaining
        else:
            self._hooks.pop(hook.event, None)

        logger.debug("Hook unregistered", hook_id=hook_id, hook_event=hook.event)
        return True

    async def trigger(
        self,
        event: str,
        data: Optional[dict[str, Any]] = None,
        context: Optional[HookContext] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> HookResult:
        """Execute all matching hooks for an event.

        Args:
            event: Hook event name.
            data: Payload passed to every hook.
            context: HookContext describing who triggered the event.
            filters: Trigger-time tags matched against hook filters.

        Returns:
            HookResult listing any hook errors.
        """
        result = HookResult(success=True, data=data)

        matching_hooks = self._filter_hooks(self._hooks.get(event, []), filters)
        if not matching_hooks:
            return result

        ordered = sorted(matching_hooks, key=lambda h: (-h.priority, h.registration_order))
        logger.debug("Triggering hooks", hook_event=event, hook_count=len(ordered))

        for hook in ordered:
            try:
                outcome = hook.callback(event, data, context)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as e:
                logger.error(
                    "Hook execution failed",
                    hook_id=hook.id,
                    hook_event=event,
                    error=str(e),
                    stop_on_error=hook.stop_on_error,
                )
                result.errors.append(f"Hook {hook.id} failed: {e}")
                result.success = False
                if hook.stop_on_error:
                    break

        return result

    def _filter_hooks(
        self,
        hooks: list[RegisteredHook],
        filters: Optional[dict[str, Any]],
    ) -> list[RegisteredHook]:
        """Keep hooks whose filters are all satisfied by the trigger filters.

        A hook without filters matches every trigger.
        """
        filters = filters or {}
        return [
            hook
            for hook in hooks
            if all(
                key in filters and filters[key] == value
                for key, value in hook.filters.items()
            )
        ]

    def get_hooks_for_event(self, event: str) -> list[RegisteredHook]:
        """Get all hooks registered for an event."""
        return self._hooks.get(event, []).copy()

    def get_hook_by_id(self, hook_id: str) -> Optional[RegisteredHook]:
        """Get a hook by its ID."""
        return self._hook_map.get(hook_id)

    def clear(self) -> int:
        """Remove all registered hooks.

        Returns:
            Number of hooks removed.
        """
        count = len(self._hook_map)
        self._hooks.clear()
        self._hook_map.clear()
        logger.debug("Hooks cleared", count=count)
        return count
