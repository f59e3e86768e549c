"""Wiring and command-line entry point of the balance service."""

from __future__ import annotations

import argparse
import json
import logging
import sqlite3
import threading
from typing import Any

from digitalwallet.balance.database import BalanceDB
from digitalwallet.balance.handlers import BalanceUpdated, BalanceUpdatedHandler
from digitalwallet.balance.usecases import GetAccountBalanceUseCase, UpdateAccountBalanceUseCase
from digitalwallet.balance.web import BalanceHandler
from digitalwallet.messaging import Consumer
from digitalwallet.webserver import Request, Response, WebServer

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = ":3003"
DEFAULT_BOOTSTRAP_SERVERS = "kafka:29092"
DEFAULT_DATABASE = "balance.db"
BALANCES_TOPIC = "balances"
CONSUMER_GROUP = "balance-service"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS account_balances (
    account_id TEXT PRIMARY KEY,
    balance REAL NOT NULL
);
"""


def _health(request: Request) -> Response:
    return Response(status=200, body=b"ok")


def build_server(connection: Any, address: str = DEFAULT_ADDRESS) -> WebServer:
    """Assemble the balance web server reading balances from ``connection``."""
    balance_db = BalanceDB(connection)
    handler = BalanceHandler(GetAccountBalanceUseCase(balance_db))
    server = WebServer(address)
    server.add_get_handler("/balances/{account_id}", handler.get_account_balance)
    server.add_get_handler("/health", _health)
    return server


def handle_message(handler: BalanceUpdatedHandler, raw: bytes | str) -> BalanceUpdated:
    """Decode one JSON event message, pass it to ``handler`` and return it.

    Raises :class:`ValueError` if the message is not a JSON event object.
    """
    document = json.loads(raw)
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ValueError("event message must be a JSON object")
    fields = {key.lower(): value for key, value in document.items()}
    name = fields.get("name")
    if name is None:
        name = ""
    if not isinstance(name, str):
        raise ValueError("event name must be a string")
    event = BalanceUpdated(name=name, payload=fields.get("payload"))
    handler.handle(event)
    return event


def _consume(consumer: Consumer, handler: BalanceUpdatedHandler) -> None:
    for message in consumer.consume():
        try:
            handle_message(handler, message.value)
        except ValueError as err:
            logger.error("Error parsing JSON: %s", err)
            return


def main(argv: list[str] | None = None) -> None:
    """Run the balance service until interrupted."""
    parser = argparse.ArgumentParser(prog="balancecore", description="Run the balance service.")
    parser.add_argument("--address", default=DEFAULT_ADDRESS, help="host:port to listen on")
    parser.add_argument("--database", default=DEFAULT_DATABASE, help="SQLite database file")
    parser.add_argument(
        "--bootstrap-servers",
        default=DEFAULT_BOOTSTRAP_SERVERS,
        help="message broker the balance events are read from",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    connection = sqlite3.connect(args.database, isolation_level=None, check_same_thread=False)
    try:
        connection.executescript(_SCHEMA)
        consumer = Consumer(
            {
                "bootstrap.servers": args.bootstrap_servers,
                "group.id": CONSUMER_GROUP,
                "auto.offset.reset": "earliest",
            },
            [BALANCES_TOPIC],
        )
        handler = BalanceUpdatedHandler(UpdateAccountBalanceUseCase(BalanceDB(connection)))
        threading.Thread(target=_consume, args=(consumer, handler), daemon=True).start()

        server = build_server(connection, args.address)
        print(f"Balance service started on {args.address}")
        server.start()
    finally:
        connection.close()


if __name__ == "__main__":
    main()