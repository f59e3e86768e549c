"""Wiring and command-line entry point of the wallet service."""

from __future__ import annotations

import argparse
import logging
import sqlite3
from typing import Any

from digitalwallet.events import EventDispatcher
from digitalwallet.messaging import Producer
from digitalwallet.uow import UnitOfWork
from digitalwallet.wallet.database import AccountDB, ClientDB, TransactionDB
from digitalwallet.wallet.handlers import (
    BalanceUpdated,
    BalanceUpdatedHandler,
    TransactionCreated,
    TransactionCreatedHandler,
)
from digitalwallet.wallet.usecases import (
    ACCOUNT_REPOSITORY,
    TRANSACTION_REPOSITORY,
    CreateAccountUseCase,
    CreateClientUseCase,
    CreateTransactionUseCase,
)
from digitalwallet.wallet.web import AccountHandler, ClientHandler, TransactionHandler
from digitalwallet.webserver import Request, Response, WebServer

DEFAULT_ADDRESS = ":8080"
DEFAULT_BOOTSTRAP_SERVERS = "kafka:29092"
DEFAULT_DATABASE = "wallet.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS clients (
    id varchar(255) PRIMARY KEY,
    name varchar(255),
    email varchar(255),
    created_at date
);
CREATE TABLE IF NOT EXISTS accounts (
    id varchar(255) PRIMARY KEY,
    client_id varchar(255),
    balance float,
    created_at date,
    FOREIGN KEY (client_id) REFERENCES clients(id)
);
CREATE TABLE IF NOT EXISTS transactions (
    id varchar(255) PRIMARY KEY,
    account_id_from varchar(255),
    account_id_to varchar(255),
    amount float,
    created_at date,
    FOREIGN KEY (account_id_from) REFERENCES accounts(id),
    FOREIGN KEY (account_id_to) REFERENCES accounts(id)
);
"""


def _health(request: Request) -> Response:
    return Response(status=200, body=b"ok")


def build_server(connection: Any, producer: Producer, address: str = DEFAULT_ADDRESS) -> WebServer:
    """Assemble the wallet web server on ``connection``.

    Client and account creation are not wrapped in a transaction, so the
    connection is expected to commit each statement on its own.
    """
    dispatcher = EventDispatcher()
    dispatcher.register("TransactionCreated", TransactionCreatedHandler(producer))
    dispatcher.register("BalanceUpdated", BalanceUpdatedHandler(producer))

    client_db = ClientDB(connection)
    account_db = AccountDB(connection)

    uow = UnitOfWork(connection)
    uow.register(ACCOUNT_REPOSITORY, AccountDB)
    uow.register(TRANSACTION_REPOSITORY, TransactionDB)

    create_client = CreateClientUseCase(client_db)
    create_account = CreateAccountUseCase(account_db, client_db)
    create_transaction = CreateTransactionUseCase(
        uow, dispatcher, TransactionCreated(), BalanceUpdated()
    )

    server = WebServer(address)
    server.add_handler("/clients", ClientHandler(create_client).create_client)
    server.add_handler("/accounts", AccountHandler(create_account).create_account)
    server.add_handler(
        "/transactions", TransactionHandler(create_transaction).create_transaction
    )
    server.add_handler("/health", _health)
    return server


def main(argv: list[str] | None = None) -> None:
    """Run the wallet service until interrupted."""
    parser = argparse.ArgumentParser(prog="walletcore", description="Run the wallet service.")
    parser.add_argument("--address", default=DEFAULT_ADDRESS, help="host:port to listen on")
    parser.add_argument("--database", default=DEFAULT_DATABASE, help="SQLite database file")
    parser.add_argument(
        "--bootstrap-servers",
        default=DEFAULT_BOOTSTRAP_SERVERS,
        help="message broker the events are published to",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    connection = sqlite3.connect(args.database, isolation_level=None, check_same_thread=False)
    try:
        connection.executescript(_SCHEMA)
        producer = Producer({"bootstrap.servers": args.bootstrap_servers, "group.id": "wallet"})
        build_server(connection, producer, args.address).start()
    finally:
        connection.close()


if __name__ == "__main__":
    main()