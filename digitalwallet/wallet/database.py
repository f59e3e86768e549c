"""SQL repositories for clients, accounts and transactions.

They work on any DB-API connection using the ``qmark`` parameter style and
leave committing to the caller.
"""

from __future__ import annotations

from contextlib import closing
from datetime import date, datetime, time
from typing import Any, Sequence

from digitalwallet.wallet.entities import Account, Client, Transaction


class RepositoryError(Exception):
    """Raised when a repository cannot complete a storage operation."""


class NotFoundError(RepositoryError, LookupError):
    """Raised when a looked-up row does not exist."""


def _to_db(moment: datetime) -> str:
    return moment.isoformat(sep=" ")


def _from_db(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8")
    return datetime.fromisoformat(str(value))


class _SqlRepository:
    def __init__(self, connection: Any) -> None:
        self.connection = connection

    def _fetchone(self, query: str, params: Sequence[Any]) -> Any:
        with closing(self.connection.cursor()) as cursor:
            cursor.execute(query, tuple(params))
            return cursor.fetchone()

    def _execute(self, query: str, params: Sequence[Any]) -> int:
        with closing(self.connection.cursor()) as cursor:
            cursor.execute(query, tuple(params))
            return cursor.rowcount

    def _exists(self, query: str, params: Sequence[Any]) -> bool:
        row = self._fetchone(query, params)
        return row is not None and bool(row[0])


class AccountDB(_SqlRepository):
    """Accounts stored in the ``accounts`` table, joined with their clients."""

    def find_by_id(self, account_id: str) -> Account:
        """Return the account with its client, or raise :class:`NotFoundError`."""
        row = self._fetchone(
            """SELECT a.id, a.client_id, a.balance, a.created_at,
                      c.id, c.name, c.email, c.created_at
               FROM accounts a INNER JOIN clients c ON a.client_id = c.id
               WHERE a.id = ?""",
            (account_id,),
        )
        if row is None:
            raise NotFoundError(f"account {account_id} not found")
        acc_id, _client_id, balance, acc_created, cl_id, name, email, cl_created = row
        client_created = _from_db(cl_created)
        client = Client(
            id=cl_id,
            name=name,
            email=email,
            created_at=client_created,
            updated_at=client_created,
        )
        account_created = _from_db(acc_created)
        return Account(
            id=acc_id,
            client=client,
            balance=float(balance),
            created_at=account_created,
            updated_at=account_created,
        )

    def save(self, account: Account) -> None:
        """Insert a new account whose client is already stored."""
        client_id = account.client.id if account.client is not None else None
        if self._fetchone("SELECT id FROM clients WHERE id = ?", (client_id,)) is None:
            raise RepositoryError("client does not exist")
        if self._fetchone("SELECT id FROM accounts WHERE id = ?", (account.id,)) is not None:
            raise RepositoryError("account already exists")
        self._execute(
            "INSERT INTO accounts (id, client_id, balance, created_at) VALUES (?, ?, ?, ?)",
            (account.id, client_id, account.balance, _to_db(account.created_at)),
        )

    def update_balance(self, account: Account) -> None:
        """Write the account's balance."""
        try:
            self._execute(
                "UPDATE accounts SET balance = ? WHERE id = ?",
                (account.balance, account.id),
            )
        except Exception as err:
            raise RepositoryError(f"failed to update account balance: {err}") from err


class ClientDB(_SqlRepository):
    """Clients stored in the ``clients`` table."""

    def get(self, client_id: str) -> Client:
        """Return the client, or raise :class:`NotFoundError`."""
        row = self._fetchone(
            "SELECT id, name, email, created_at FROM clients WHERE id = ?", (client_id,)
        )
        if row is None:
            raise NotFoundError(f"client {client_id} not found")
        found_id, name, email, created = row
        created_at = _from_db(created)
        return Client(
            id=found_id, name=name, email=email, created_at=created_at, updated_at=created_at
        )

    def save(self, client: Client) -> None:
        """Insert a new client."""
        self._execute(
            "INSERT INTO clients (id, name, email, created_at) VALUES (?, ?, ?, ?)",
            (client.id, client.name, client.email, _to_db(client.created_at)),
        )


class TransactionDB(_SqlRepository):
    """Transactions stored in the ``transactions`` table."""

    _ACCOUNT_EXISTS = "SELECT EXISTS(SELECT 1 FROM accounts WHERE id = ?)"

    def create(self, transaction: Transaction) -> None:
        """Insert a transaction between two stored accounts."""
        from_id = transaction.account_from.id
        if not self._exists(self._ACCOUNT_EXISTS, (from_id,)):
            raise RepositoryError(f"account_from with id {from_id} does not exist")
        to_id = transaction.account_to.id
        if not self._exists(self._ACCOUNT_EXISTS, (to_id,)):
            raise RepositoryError(f"account_to with id {to_id} does not exist")
        self._execute(
            """INSERT INTO transactions
               (id, account_id_from, account_id_to, amount, created_at)
               VALUES (?, ?, ?, ?, ?)""",
            (
                transaction.id,
                from_id,
                to_id,
                transaction.amount,
                _to_db(transaction.created_at),
            ),
        )