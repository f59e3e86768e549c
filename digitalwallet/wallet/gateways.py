"""Storage interfaces the wallet use cases depend on."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from digitalwallet.wallet.entities import Account, Client, Transaction


@runtime_checkable
class AccountGateway(Protocol):
    """Loads and stores accounts."""

    def find_by_id(self, account_id: str) -> Account:
        """Return the account with ``account_id`` or raise if there is none."""

    def save(self, account: Account) -> None:
        """Store a new account."""

    def update_balance(self, account: Account) -> None:
        """Persist the account's current balance."""


@runtime_checkable
class ClientGateway(Protocol):
    """Loads and stores clients."""

    def get(self, client_id: str) -> Client:
        """Return the client with ``client_id`` or raise if there is none."""

    def save(self, client: Client) -> None:
        """Store a new client."""


@runtime_checkable
class TransactionGateway(Protocol):
    """Stores transactions."""

    def create(self, transaction: Transaction) -> None:
        """Store a new transaction."""