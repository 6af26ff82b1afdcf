"""Unit tests for the hook system.

Tests cover:
- Hook registration and unregistration
- Priority ordering
- Tag-based filtering
- Error isolation
"""

import pytest

from tenantaccess.core.hooks import (
    EVENT_CATEGORIES,
    HookCategory,
    HookEvent,
    HookRegistry,
    get_all_events,
)
from tenantaccess.domain.entities import HookContext


class TestHookRegistry:
    """Tests for the HookRegistry class."""

    def test_register_returns_unique_id(self) -> None:
        registry = HookRegistry()

        hook_ids = [
            registry.register(HookEvent.ON_ACCOUNT_AFTER_CREATE, lambda e, d, c: None)
            for _ in range(10)
        ]

        assert all(hook_id.startswith("hook_") for hook_id in hook_ids)
        assert len(set(hook_ids)) == 10

    def test_unregister(self) -> None:
        registry = HookRegistry()
        hook_id = registry.register(HookEvent.ON_ROLE_AFTER_DELETE, lambda e, d, c: None)

        assert registry.unregister(hook_id) is True
        assert registry.get_hook_by_id(hook_id) is None
        assert registry.get_hooks_for_event(HookEvent.ON_ROLE_AFTER_DELETE) == []
        assert registry.unregister(hook_id) is False

    def test_clear(self) -> None:
        registry = HookRegistry()
        registry.register(HookEvent.ON_ROLE_AFTER_CREATE, lambda e, d, c: None)
        registry.register(HookEvent.ON_ROLE_AFTER_UPDATE, lambda e, d, c: None)

        assert registry.clear() == 2
        assert registry.get_hooks_for_event(HookEvent.ON_ROLE_AFTER_CREATE) == []

    @pytest.mark.asyncio
    async def test_priority_then_registration_order(self) -> None:
        """Higher priority runs first; equal priorities run in FIFO order."""
        registry = HookRegistry()
        calls = []

        registry.register(HookEvent.ON_ACCOUNT_AFTER_UPDATE, lambda e, d, c: calls.append("low"))
        registry.register(
            HookEvent.ON_ACCOUNT_AFTER_UPDATE, lambda e, d, c: calls.append("high"), priority=10
        )
        registry.register(
            HookEvent.ON_ACCOUNT_AFTER_UPDATE, lambda e, d, c: calls.append("low2")
        )

        await registry.trigger(HookEvent.ON_ACCOUNT_AFTER_UPDATE, data={})

        assert calls == ["high", "low", "low2"]

    @pytest.mark.asyncio
    async def test_async_callbacks_are_awaited(self) -> None:
        registry = HookRegistry()
        seen = []

        async def record(event, data, context):
            seen.append((event, data["account_id"], context.company_id))

        registry.register(HookEvent.ON_ACCOUNT_STATUS_CHANGED, record)

        result = await registry.trigger(
            HookEvent.ON_ACCOUNT_STATUS_CHANGED,
            data={"account_id": "a1"},
            context=HookContext(company_id="acme"),
        )

        assert result.success is True
        assert seen == [(HookEvent.ON_ACCOUNT_STATUS_CHANGED, "a1", "acme")]

    @pytest.mark.asyncio
    async def test_filters_match_company(self) -> None:
        """A filtered hook only fires for triggers carrying the same tag."""
        registry = HookRegistry()
        calls = []
        registry.register(
            HookEvent.ON_ROLE_AFTER_CREATE,
            lambda e, d, c: calls.append(d["company_id"]),
            filters={"company_id": "acme"},
        )

        await registry.trigger(
            HookEvent.ON_ROLE_AFTER_CREATE, {"company_id": "globex"}, filters={"company_id": "globex"}
        )
        await registry.trigger(HookEvent.ON_ROLE_AFTER_CREATE, {"company_id": "none"})
        await registry.trigger(
            HookEvent.ON_ROLE_AFTER_CREATE, {"company_id": "acme"}, filters={"company_id": "acme"}
        )

        assert calls == ["acme"]

    @pytest.mark.asyncio
    async def test_failing_hook_is_isolated(self) -> None:
        """A failing hook is recorded and the remaining hooks still run."""
        registry = HookRegistry()
        calls = []

        def broken(event, data, context):
            raise RuntimeError("boom")

        registry.register(HookEvent.ON_ACCOUNT_AFTER_DELETE, broken, priority=5)
        registry.register(HookEvent.ON_ACCOUNT_AFTER_DELETE, lambda e, d, c: calls.append("ok"))

        result = await registry.trigger(HookEvent.ON_ACCOUNT_AFTER_DELETE, data={})

        assert result.success is False
        assert len(result.errors) == 1
        assert "boom" in result.errors[0]
        assert calls == ["ok"]

    @pytest.mark.asyncio
    async def test_stop_on_error_skips_remaining(self) -> None:
        registry = HookRegistry()
        calls = []

        def broken(event, data, context):
            raise RuntimeError("boom")

        registry.register(
            HookEvent.ON_ACCOUNT_AFTER_DELETE, broken, priority=5, stop_on_error=True
        )
        registry.register(HookEvent.ON_ACCOUNT_AFTER_DELETE, lambda e, d, c: calls.append("ok"))

        result = await registry.trigger(HookEvent.ON_ACCOUNT_AFTER_DELETE, data={})

        assert result.success is False
        assert calls == []


class TestHookEvents:
    def test_every_event_has_a_category(self) -> None:
        events = get_all_events()
        assert len(events) == 10
        assert set(events) == set(EVENT_CATEGORIES)

    def test_credential_events_category(self) -> None:
        assert (
            EVENT_CATEGORIES[HookEvent.ON_ACCOUNT_CREDENTIALS_RESET]
            == HookCategory.CREDENTIAL_OPERATIONS
        )
