"""The balance event received from the wallet and the handler applying it."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from digitalwallet.balance.usecases import AccountBalanceInput, UpdateAccountBalanceUseCase
from digitalwallet.events import Event, EventHandler

logger = logging.getLogger(__name__)

BALANCE_UPDATED = "BalanceUpdated"


@dataclass
class BalanceUpdated(Event):
    """Announces the balances of both accounts after a transfer."""

    name: str = BALANCE_UPDATED


@dataclass(frozen=True)
class BalanceUpdatedPayload:
    """Both accounts of a transfer with their new balances."""

    account_id_from: str
    account_id_to: str
    balance_account_id_from: float
    balance_account_id_to: float


def _text(fields: Mapping[str, Any], name: str) -> str:
    value = fields.get(name)
    if not isinstance(value, str):
        raise ValueError(f"payload field {name} must be a string")
    return value


def _number(fields: Mapping[str, Any], name: str) -> float:
    value = fields.get(name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"payload field {name} must be a number")
    return float(value)


def _parse_payload(fields: Mapping[str, Any]) -> BalanceUpdatedPayload:
    return BalanceUpdatedPayload(
        account_id_from=_text(fields, "account_id_from"),
        account_id_to=_text(fields, "account_id_to"),
        balance_account_id_from=_number(fields, "balance_account_id_from"),
        balance_account_id_to=_number(fields, "balance_account_id_to"),
    )


class BalanceUpdatedHandler(EventHandler):
    """Stores the new balances announced by a balance event."""

    def __init__(self, update_balance: UpdateAccountBalanceUseCase) -> None:
        self.update_balance = update_balance

    def handle(self, event: Event) -> None:
        """Update the source account, then the destination account.

        Events of another name and payloads that are not mappings are logged
        and ignored; a mapping lacking a field raises :class:`ValueError`.
        Processing stops at the first account that cannot be updated.
        """
        if event.name != BALANCE_UPDATED:
            logger.warning("Received message with wrong event name")
            return
        if not isinstance(event.payload, Mapping):
            logger.warning("Failed to read message payload as a mapping")
            return
        payload = _parse_payload(event.payload)
        for account_id, balance in (
            (payload.account_id_from, payload.balance_account_id_from),
            (payload.account_id_to, payload.balance_account_id_to),
        ):
            try:
                output = self.update_balance.execute(
                    AccountBalanceInput(account_id=account_id, balance=balance)
                )
            except Exception as err:
                logger.error("Failed to update balance for account %s: %s", account_id, err)
                return
            logger.info("Updated balance for account %s: %f", output.account_id, output.balance)