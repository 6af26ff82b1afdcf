"""Hook event definitions and categories.

Every event is an "after" event: it fires once the change it describes has
been committed, so a hook can observe the fresh entity but never veto it.
Adding events is non-breaking; renaming or removing one is a breaking change
for attached session, audit and notification layers.
"""


class HookCategory:
    """Categories for organizing hooks."""

    ACCOUNT_OPERATIONS = "account_operations"
    CREDENTIAL_OPERATIONS = "credential_operations"
    ROLE_OPERATIONS = "role_operations"


class HookEvent:
    """Hook event names, in the format ON_<ENTITY>_<WHAT_HAPPENED>."""

    # Account Operations
    ON_ACCOUNT_AFTER_CREATE = "on_account_after_create"
    ON_ACCOUNT_AFTER_UPDATE = "on_account_after_update"
    ON_ACCOUNT_AFTER_DELETE = "on_account_after_delete"
    ON_ACCOUNT_STATUS_CHANGED = "on_account_status_changed"
    ON_ACCOUNT_LOGIN_RECORDED = "on_account_login_recorded"

    # Credential Operations
    ON_ACCOUNT_CREDENTIALS_RESET = "on_account_credentials_reset"
    ON_ACCOUNT_TWO_FACTOR_CHANGED = "on_account_two_factor_changed"

    # Role Operations
    ON_ROLE_AFTER_CREATE = "on_role_after_create"
    ON_ROLE_AFTER_UPDATE = "on_role_after_update"
    ON_ROLE_AFTER_DELETE = "on_role_after_delete"


EVENT_CATEGORIES: dict[str, str] = {
    HookEvent.ON_ACCOUNT_AFTER_CREATE: HookCategory.ACCOUNT_OPERATIONS,
    HookEvent.ON_ACCOUNT_AFTER_UPDATE: HookCategory.ACCOUNT_OPERATIONS,
    HookEvent.ON_ACCOUNT_AFTER_DELETE: HookCategory.ACCOUNT_OPERATIONS,
    HookEvent.ON_ACCOUNT_STATUS_CHANGED: HookCategory.ACCOUNT_OPERATIONS,
    HookEvent.ON_ACCOUNT_LOGIN_RECORDED: HookCategory.ACCOUNT_OPERATIONS,
    HookEvent.ON_ACCOUNT_CREDENTIALS_RESET: HookCategory.CREDENTIAL_OPERATIONS,
    HookEvent.ON_ACCOUNT_TWO_FACTOR_CHANGED: HookCategory.CREDENTIAL_OPERATIONS,
    HookEvent.ON_ROLE_AFTER_CREATE: HookCategory.ROLE_OPERATIONS,
    HookEvent.ON_ROLE_AFTER_UPDATE: HookCategory.ROLE_OPERATIONS,
    HookEvent.ON_ROLE_AFTER_DELETE: HookCategory.ROLE_OPERATIONS,
}


def get_all_events() -> list[str]:
    """Get all available hook event names."""
    return [
        value
        for name, value in vars(HookEvent).items()
        if not name.startswith("_") and isinstance(value, str)
    ]
