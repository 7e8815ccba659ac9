"""Utility for resolving account names to IDs."""

from ledgerbook.domain.account import AccountService
from ledgerbook.domain.errors import AccountNotFound


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Names are matched case-insensitively. A purely numeric string is tried as
    an ID first and then as a name.

    Raises:
        AccountNotFound: If account is not found
    """
    if isinstance(account, int):
        if account_service.get_account(account) is None:
            raise AccountNotFound(f"Account ID {account} not found")
        return account

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None and account_service.get_account(account_id) is not None:
        return account_id

    account_obj = account_service.get_account_by_name(account)
    if account_obj is not None:
        return account_obj.id

    if account_id is not None:
        raise AccountNotFound(f"Account ID {account_id} not found")
    raise AccountNotFound(f"Account '{account}' not found")
