"""Account directory API routes.

Mounted under ``{api_prefix}/companies/{company_id}/users``. Directory errors
propagate to the exception handlers registered in app.py, which map each
error kind to its status code.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from tenantaccess.core.logging import get_logger
from tenantaccess.infrastructure.api.dependencies import CompanyId, Directory
from tenantaccess.infrastructure.api.schemas import (
    AccountInviteRequest,
    AccountListResponse,
    AccountResponse,
    AccountUpdateRequest,
    DirectorySummaryResponse,
    PasswordResetRequest,
)

logger = get_logger(__name__)

router = APIRouter()

_NOT_FOUND = {404: {"description": "Account not found"}}


@router.get("", response_model=AccountListResponse)
async def list_accounts(company_id: CompanyId, directory: Directory) -> AccountListResponse:
    """List all accounts of the company."""
    accounts = await directory.list_accounts(company_id)
    logger.debug("Accounts listed", company_id=company_id, count=len(accounts))
    return AccountListResponse(
        items=[AccountResponse.from_entity(a) for a in accounts],
        total=len(accounts),
    )


@router.get("/summary", response_model=DirectorySummaryResponse)
async def directory_summary(
    company_id: CompanyId,
    directory: Directory,
    now: Annotated[datetime | None, Query()] = None,
    threshold_days: Annotated[int | None, Query(ge=0)] = None,
) -> DirectorySummaryResponse:
    """Totals for accounts, active accounts, two-factor adoption, roles and due resets."""
    summary = await directory.summarize(company_id, now, threshold_days)
    return DirectorySummaryResponse.from_summary(summary)


@router.get("/password-expiring", response_model=AccountListResponse)
async def password_expiring(
    company_id: CompanyId,
    directory: Directory,
    now: Annotated[datetime | None, Query()] = None,
    threshold_days: Annotated[int | None, Query(ge=0)] = None,
) -> AccountListResponse:
    """Accounts whose password expires within the warning window.

    Defaults to the current time and the configured warning window.
    """
    accounts = await directory.accounts_needing_password_reset(
        company_id, now, threshold_days
    )
    return AccountListResponse(
        items=[AccountResponse.from_entity(a) for a in accounts],
        total=len(accounts),
    )


@router.get("/{account_id}", response_model=AccountResponse, responses=_NOT_FOUND)
async def get_account(
    company_id: CompanyId, account_id: str, directory: Directory
) -> AccountResponse:
    """Get one account."""
    return AccountResponse.from_entity(await directory.get_account(company_id, account_id))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=AccountResponse,
    responses={
        400: {"description": "Validation error"},
        409: {"description": "Username or email already exists"},
    },
)
async def invite_account(
    company_id: CompanyId,
    request: AccountInviteRequest,
    directory: Directory,
) -> AccountResponse:
    """Invite a new account. The account is Active immediately."""
    account = await directory.invite_account(company_id, request.to_invitation())
    return AccountResponse.from_entity(account)


@router.patch(
    "/{account_id}",
    response_model=AccountResponse,
    responses={
        **_NOT_FOUND,
        400: {"description": "Validation error"},
        409: {"description": "Username or email already exists"},
    },
)
async def update_account(
    company_id: CompanyId,
    account_id: str,
    request: AccountUpdateRequest,
    directory: Directory,
) -> AccountResponse:
    """Update an account's profile fields and role."""
    account = await directory.update_account(company_id, account_id, request.to_changes())
    return AccountResponse.from_entity(account)


@router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_NOT_FOUND,
)
async def remove_account(company_id: CompanyId, account_id: str, directory: Directory) -> Response:
    """Remove an account. Removing it again returns 404."""
    await directory.remove_account(company_id, account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{account_id}/toggle-status", response_model=AccountResponse, responses=_NOT_FOUND)
async def toggle_account_status(
    company_id: CompanyId, account_id: str, directory: Directory
) -> AccountResponse:
    """Flip the account between Active and Inactive."""
    account = await directory.toggle_account_status(company_id, account_id)
    return AccountResponse.from_entity(account)


@router.post(
    "/{account_id}/reset-password",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**_NOT_FOUND, 400: {"description": "Password rejected by policy"}},
)
async def reset_password(
    company_id: CompanyId,
    account_id: str,
    request: PasswordResetRequest,
    directory: Directory,
) -> Response:
    """Set a new password and restart the expiry window."""
    await directory.reset_credential(
        company_id,
        account_id,
        request.new_password.get_secret_value(),
        None if request.confirm_password is None else request.confirm_password.get_secret_value(),
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{account_id}/toggle-two-factor",
    response_model=AccountResponse,
    responses=_NOT_FOUND,
)
async def toggle_two_factor(
    company_id: CompanyId, account_id: str, directory: Directory
) -> AccountResponse:
    """Flip the account's two-factor flag."""
    account = await directory.toggle_two_factor(company_id, account_id)
    return AccountResponse.from_entity(account)
