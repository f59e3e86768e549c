"""Wallet use cases: creating clients, accounts and transfers between accounts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from digitalwallet.events import Event, EventDispatcher
from digitalwallet.uow import UnitOfWork
from digitalwallet.wallet.entities import new_account, new_client, new_transaction
from digitalwallet.wallet.gateways import AccountGateway, ClientGateway, TransactionGateway

logger = logging.getLogger(__name__)

ACCOUNT_REPOSITORY = "AccountRepository"
TRANSACTION_REPOSITORY = "TransactionRepository"


@dataclass(frozen=True)
class CreateClientInput:
    """Data needed to create a client."""

    name: str
    email: str


@dataclass(frozen=True)
class CreateClientOutput:
    """The client that was created."""

    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class CreateClientUseCase:
    """Creates a client and stores it."""

    def __init__(self, client_gateway: ClientGateway) -> None:
        self.client_gateway = client_gateway

    def execute(self, input_dto: CreateClientInput) -> CreateClientOutput:
        """Validate and store a new client, returning what was stored."""
        client = new_client(input_dto.name, input_dto.email)
        self.client_gateway.save(client)
        return CreateClientOutput(
            id=client.id,
            name=client.name,
            email=client.email,
            created_at=client.created_at,
            updated_at=client.updated_at,
        )


@dataclass(frozen=True)
class CreateAccountInput:
    """Data needed to open an account."""

    client_id: str


@dataclass(frozen=True)
class CreateAccountOutput:
    """The account that was opened."""

    id: str


class CreateAccountUseCase:
    """Opens an account for an existing client."""

    def __init__(self, account_gateway: AccountGateway, client_gateway: ClientGateway) -> None:
        self.account_gateway = account_gateway
        self.client_gateway = client_gateway

    def execute(self, input_dto: CreateAccountInput) -> CreateAccountOutput:
        """Look up the client, open an empty account for it and store the account."""
        client = self.client_gateway.get(input_dto.client_id)
        account = new_account(client)
        self.account_gateway.save(account)
        return CreateAccountOutput(id=account.id)


@dataclass(frozen=True)
class CreateTransactionInput:
    """Data needed to transfer money between two accounts."""

    account_id_from: str
    account_id_to: str
    amount: float


@dataclass(frozen=True)
class CreateTransactionOutput:
    """The transfer that was made."""

    id: str
    account_id_from: str
    account_id_to: str
    amount: float


@dataclass(frozen=True)
class BalanceUpdatedOutput:
    """Balances of both accounts after a transfer."""

    account_id_from: str
    account_id_to: str
    balance_account_id_from: float
    balance_account_id_to: float


class CreateTransactionUseCase:
    """Transfers money inside one unit of work, then announces the result."""

    def __init__(
        self,
        uow: UnitOfWork,
        event_dispatcher: EventDispatcher,
        transaction_created_event: Event,
        balance_updated_event: Event,
    ) -> None:
        self.uow = uow
        self.event_dispatcher = event_dispatcher
        self.transaction_created_event = transaction_created_event
        self.balance_updated_event = balance_updated_event

    def execute(self, input_dto: CreateTransactionInput) -> CreateTransactionOutput:
        """Make the transfer; events are dispatched only after it is committed."""

        def transfer(unit: UnitOfWork) -> tuple[CreateTransactionOutput, BalanceUpdatedOutput]:
            accounts: AccountGateway = unit.get_repository(ACCOUNT_REPOSITORY)
            transactions: TransactionGateway = unit.get_repository(TRANSACTION_REPOSITORY)

            account_from = accounts.find_by_id(input_dto.account_id_from)
            account_to = accounts.find_by_id(input_dto.account_id_to)
            transaction = new_transaction(account_from, account_to, input_dto.amount)

            accounts.update_balance(account_from)
            accounts.update_balance(account_to)
            transactions.create(transaction)

            balances = BalanceUpdatedOutput(
                account_id_from=account_from.id,
                account_id_to=account_to.id,
                balance_account_id_from=account_from.balance,
                balance_account_id_to=account_to.balance,
            )
            created = CreateTransactionOutput(
                id=transaction.id,
                account_id_from=transaction.account_from.id,
                account_id_to=transaction.account_to.id,
                amount=transaction.amount,
            )
            return created, balances

        transaction_output, balance_output = self.uow.do(transfer)

        self._announce(self.transaction_created_event, transaction_output)
        self._announce(self.balance_updated_event, balance_output)
        return transaction_output

    def _announce(self, event: Event, payload: Any) -> None:
        event.payload = payload
        try:
            self.event_dispatcher.dispatch(event)
        except Exception:
            # The transfer is already committed; a failed announcement must not undo it.
            logger.exception("dispatching %s failed", event.name)