"""Wallet domain objects: clients, their accounts and transfers between accounts."""

from __future__ import annotations

import contextlib
import uuid
from dataclasses import dataclass, field
from datetime import datetime

ERR_INVALID_CLIENT = "invalid client"
ERR_INSUFFICIENT_BALANCE = "insufficient balance"
ERR_INVALID_NAME = "invalid name"
ERR_INVALID_EMAIL = "invalid email"
ERR_ACCOUNT_MISMATCH = "account client mismatch"
ERR_INVALID_TRANSACTION = "invalid transaction"
ERR_INVALID_ACCOUNT = "invalid account"
ERR_INVALID_AMOUNT = "invalid amount"
ERR_NOT_ENOUGH_BALANCE = "not enough balance"


class DomainError(ValueError):
    """Raised when a domain object would break one of its rules."""


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(eq=False)
class Client:
    """A wallet customer who may own several accounts."""

    id: str
    name: str
    email: str
    accounts: list[Account] = field(default_factory=list, repr=False)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def validate(self) -> None:
        """Raise :class:`DomainError` if the name or e-mail is empty."""
        if not self.name:
            raise DomainError(ERR_INVALID_NAME)
        if not self.email:
            raise DomainError(ERR_INVALID_EMAIL)

    def update(self, name: str, email: str) -> None:
        """Change name and e-mail, then validate the result."""
        self.name = name
        self.email = email
        self.updated_at = datetime.now()
        self.validate()

    def add_account(self, account: Account) -> None:
        """Attach ``account``, which must belong to this client."""
        if account.client is None or account.client.id != self.id:
            raise DomainError(ERR_ACCOUNT_MISMATCH)
        self.accounts.append(account)


@dataclass(eq=False)
class Account:
    """A client's account holding a balance."""

    id: str
    client: Client | None
    balance: float = 0.0
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def validate(self) -> None:
        """Raise :class:`DomainError` if the account has no client."""
        if self.client is None:
            raise DomainError(ERR_INVALID_CLIENT)

    def credit(self, amount: float) -> None:
        """Add ``amount`` to the balance."""
        self.balance += amount
        self.updated_at = datetime.now()

    def debit(self, amount: float) -> None:
        """Take ``amount`` from the balance, which must cover it."""
        if self.balance < amount:
            raise DomainError(ERR_INSUFFICIENT_BALANCE)
        self.balance -= amount
        self.updated_at = datetime.now()


@dataclass(eq=False)
class Transaction:
    """A transfer of an amount from one account to another."""

    id: str
    account_from: Account | None
    account_to: Account | None
    amount: float
    created_at: datetime = field(default_factory=datetime.now)

    def validate(self) -> None:
        """Raise :class:`DomainError` if the transfer cannot take place."""
        if self.account_from is None or self.account_to is None:
            raise DomainError(ERR_INVALID_ACCOUNT)
        if self.amount <= 0:
            raise DomainError(ERR_INVALID_AMOUNT)
        if self.account_from is self.account_to:
            raise DomainError(ERR_INVALID_TRANSACTION)
        if self.account_from.balance < self.amount:
            raise DomainError(ERR_NOT_ENOUGH_BALANCE)

    def commit(self) -> None:
        """Move the amount from the source account to the destination account."""
        # A debit that fails leaves the source untouched; the credit still happens.
        with contextlib.suppress(DomainError):
            self.account_from.debit(self.amount)
        self.account_to.credit(self.amount)


def new_client(name: str, email: str) -> Client:
    """Create a validated client with a fresh id."""
    client = Client(id=_new_id(), name=name, email=email)
    client.validate()
    return client


def new_account(client: Client | None) -> Account:
    """Create a validated, empty account for ``client``."""
    account = Account(id=_new_id(), client=client)
    account.validate()
    return account


def new_transaction(
    account_from: Account | None, account_to: Account | None, amount: float
) -> Transaction:
    """Create a validated transaction and apply it to both accounts."""
    transaction = Transaction(
        id=_new_id(), account_from=account_from, account_to=account_to, amount=amount
    )
    transaction.validate()
    transaction.commit()
    return transaction