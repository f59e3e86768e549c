"""Balance use cases: creating, reading and updating account balances."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from digitalwallet.balance.entities import AccountBalance, new_balance


@runtime_checkable
class BalanceGateway(Protocol):
    """Loads and stores account balances."""

    def find_by_id(self, account_id: str) -> AccountBalance | None:
        """Return the stored balance, or ``None`` if there is none."""

    def save(self, account: AccountBalance) -> None:
        """Store a new balance."""

    def update_balance(self, account: AccountBalance) -> None:
        """Persist the balance of a stored account."""


class BalanceNotFoundError(LookupError):
    """Raised when no balance is stored for an account."""

    def __init__(self, message: str = "account balance not found") -> None:
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0])


@dataclass(frozen=True)
class AccountBalanceInput:
    """An account id with the balance to create or set."""

    account_id: str
    balance: float = 0.0


@dataclass(frozen=True)
class AccountBalanceOutput:
    """An account id with its balance."""

    account_id: str
    balance: float


def _output(account: AccountBalance) -> AccountBalanceOutput:
    return AccountBalanceOutput(account_id=account.account_id, balance=account.balance)


class CreateAccountBalanceUseCase:
    """Creates a balance unless one is already stored."""

    def __init__(self, balance_gateway: BalanceGateway) -> None:
        self.balance_gateway = balance_gateway

    def execute(self, input_dto: AccountBalanceInput) -> AccountBalanceOutput:
        """Return the stored balance if there is one, otherwise store a new one."""
        try:
            existing = self.balance_gateway.find_by_id(input_dto.account_id)
        except Exception:
            existing = None
        if existing is not None:
            return _output(existing)
        account = new_balance(input_dto.account_id, input_dto.balance)
        self.balance_gateway.save(account)
        return _output(account)


class GetAccountBalanceUseCase:
    """Reads the balance of an account."""

    def __init__(self, balance_gateway: BalanceGateway) -> None:
        self.balance_gateway = balance_gateway

    def execute(self, account_id: str) -> AccountBalanceOutput:
        """Return the balance or raise :class:`BalanceNotFoundError`."""
        account = self.balance_gateway.find_by_id(account_id)
        if account is None:
            raise BalanceNotFoundError()
        return _output(account)


class UpdateAccountBalanceUseCase:
    """Sets the balance of a stored account."""

    def __init__(self, balance_gateway: BalanceGateway) -> None:
        self.balance_gateway = balance_gateway

    def execute(self, input_dto: AccountBalanceInput) -> AccountBalanceOutput:
        """Replace the stored balance and return the new value."""
        account = self.balance_gateway.find_by_id(input_dto.account_id)
        if account is None:
            raise BalanceNotFoundError()
        account.update_balance(input_dto.balance)
        self.balance_gateway.update_balance(account)
        return _output(account)