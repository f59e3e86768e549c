"""The balance kept for one wallet account."""

from __future__ import annotations

from dataclasses import dataclass

ERR_INVALID_CLIENT = "invalid client"
ERR_INSUFFICIENT_BALANCE = "insufficient balance"


class BalanceError(ValueError):
    """Raised when an account balance would break one of its rules."""


@dataclass
class AccountBalance:
    """The current balance of an account."""

    account_id: str
    balance: float = 0.0

    def validate(self) -> None:
        """Raise :class:`BalanceError` if the id is empty or the balance negative."""
        if not self.account_id:
            raise BalanceError(ERR_INVALID_CLIENT)
        if self.balance < 0:
            raise BalanceError(ERR_INSUFFICIENT_BALANCE)

    def update_balance(self, new_balance: float) -> None:
        """Replace the balance; a negative one is refused and leaves it unchanged."""
        if new_balance < 0:
            raise BalanceError(ERR_INSUFFICIENT_BALANCE)
        self.balance = new_balance


def new_balance(account_id: str, balance: float) -> AccountBalance:
    """Create a validated account balance."""
    account = AccountBalance(account_id=account_id, balance=balance)
    account.validate()
    return account