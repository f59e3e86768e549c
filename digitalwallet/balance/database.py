"""SQL storage of account balances in the ``account_balances`` table.

Works on any DB-API connection using the ``qmark`` parameter style and
leaves committing to the caller.
"""

from __future__ import annotations

from contextlib import closing
from typing import Any, Sequence

from digitalwallet.balance.entities import AccountBalance


class AccountNotFoundError(LookupError):
    """Raised when a balance to update does not exist."""

    def __init__(self, message: str = "account not found") -> None:
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0])


class BalanceDB:
    """Reads and writes account balances."""

    def __init__(self, connection: Any) -> None:
        self.connection = connection

    def _execute(self, query: str, params: Sequence[Any]) -> Any:
        with closing(self.connection.cursor()) as cursor:
            cursor.execute(query, tuple(params))
            return cursor.fetchone() if query.lstrip().upper().startswith("SELECT") else cursor.rowcount

    def find_by_id(self, account_id: str) -> AccountBalance | None:
        """Return the stored balance, or ``None`` if there is none."""
        row = self._execute(
            "SELECT account_id, balance FROM account_balances WHERE account_id = ?",
            (account_id,),
        )
        if row is None:
            return None
        found_id, balance = row
        return AccountBalance(account_id=found_id, balance=float(balance))

    def save(self, account: AccountBalance) -> None:
        """Insert a new balance; storing an existing account fails."""
        self._execute(
            "INSERT INTO account_balances (account_id, balance) VALUES (?, ?)",
            (account.account_id, account.balance),
        )

    def update_balance(self, account: AccountBalance) -> None:
        """Write the balance of a stored account or raise :class:`AccountNotFoundError`."""
        affected = self._execute(
            "UPDATE account_balances SET balance = ? WHERE account_id = ?",
            (account.balance, account.account_id),
        )
        if affected == 0:
            raise AccountNotFoundError()