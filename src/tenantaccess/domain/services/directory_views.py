"""Computed views over a company's current accounts.

These are pure functions of their inputs. Nothing here is stored or cached:
"now" is an argument, so every call recomputes from the accounts it is given.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from tenantaccess.domain.entities import Account


@dataclass(frozen=True)
class DirectorySummary:
    """Headline counts for a company's directory.

    Attributes:
        total_accounts: Number of accounts.
        active_accounts: Accounts with status Active.
        two_factor_enabled: Accounts with two-factor authentication on.
        total_roles: Number of roles in the registry.
        password_reset_due: Accounts whose password expires within the window.
    """

    total_accounts: int
    active_accounts: int
    two_factor_enabled: int
    total_roles: int
    password_reset_due: int


def accounts_needing_password_reset(
    accounts: Iterable[Account],
    now: datetime,
    threshold_days: int,
) -> list[Account]:
    """Accounts whose password expires within ``threshold_days`` of ``now``.

    Already expired passwords are included. The result is ordered by expiry,
    soonest first. A naive ``now`` is taken to be UTC.
    """
    if threshold_days < 0:
        raise ValueError("threshold_days cannot be negative")
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    window = timedelta(days=threshold_days)
    due = [a for a in accounts if a.time_until_password_expiry(now) <= window]
    return sorted(due, key=lambda a: a.password_expiry)


def summarize_accounts(
    accounts: Iterable[Account],
    total_roles: int,
    now: datetime,
    threshold_days: int,
) -> DirectorySummary:
    """Compute the directory summary for the given accounts."""
    accounts = list(accounts)
    return DirectorySummary(
        total_accounts=len(accounts),
        active_accounts=sum(1 for a in accounts if a.is_active),
        two_factor_enabled=sum(1 for a in accounts if a.two_factor_enabled),
        total_roles=total_roles,
        password_reset_due=len(accounts_needing_password_reset(accounts, now, threshold_days)),
    )
