# digitalwallet

Two small services for moving money between accounts, with no dependencies
beyond the standard library:

- **wallet** keeps clients, accounts and transfers in SQLite. Every transfer
  runs in a single unit of work, and once it is committed a
  `TransactionCreated` event and a `BalanceUpdated` event are published to
  the `transactions` and `balances` topics.
- **balance** reads `BalanceUpdated` messages from the `balances` topic,
  stores the new balance of both accounts, and answers balance queries over
  HTTP.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Running the services

The package installs two commands:

```
digitalwallet-wallet [--address HOST:PORT] [--database FILE] [--bootstrap-servers NAME]
digitalwallet-balance [--address HOST:PORT] [--database FILE] [--bootstrap-servers NAME]
```

| Option                | wallet default  | balance default |
|-----------------------|-----------------|-----------------|
| `--address`           | `:8080`         | `:3003`         |
| `--database`          | `wallet.db`     | `balance.db`    |
| `--bootstrap-servers` | `kafka:29092`   | `kafka:29092`   |

Each command creates its tables in the SQLite file if they are missing and
serves until interrupted.

The wallet service accepts `POST` requests with JSON bodies and answers
`200` with a JSON document, `400` for a body it cannot read and `500` when
the operation fails:

| Path            | Body                                                                 | Answer                                              |
|-----------------|----------------------------------------------------------------------|-----------------------------------------------------|
| `/clients`      | `{"name": "...", "email": "..."}`                                    | `id`, `name`, `email`, `created_at`, `updated_at`   |
| `/accounts`     | `{"client_id": "..."}`                                               | `id`                                                |
| `/transactions` | `{"account_id_from": "...", "account_id_to": "...", "amount": 50}`   | `id`, `account_id_from`, `account_id_to`, `amount`  |
| `/health`       | none                                                                 | `ok`                                                |

The balance service answers `GET` requests:

| Path                     | Answer                                                       |
|--------------------------|--------------------------------------------------------------|
| `/balances/{account_id}` | `{"account_id":"...","balance":100}`, or `500` with the error text |
| `/health`                | `ok`                                                         |

Both servers are WSGI applications (`digitalwallet.webserver.WebServer`).
`digitalwallet.wallet.app.build_server(connection, producer, address)` and
`digitalwallet.balance.app.build_server(connection, address)` assemble one
around your own DB-API connection (qmark parameter style), and
`WebServer.handle(method, path, body)` routes a request without a network:

```python
import sqlite3

from digitalwallet.balance.app import build_server

connection = sqlite3.connect(":memory:")
connection.execute("CREATE TABLE account_balances (account_id TEXT PRIMARY KEY, balance REAL NOT NULL)")
connection.execute("INSERT INTO account_balances VALUES ('account1', 100.0)")

server = build_server(connection)
response = server.handle("GET", "/balances/account1")
print(response.status, response.body)   # 200 b'{"account_id":"account1","balance":100}'
```

## What the services do not do

- **Messages stay inside one process.** `digitalwallet.messaging` keeps each
  topic as an in-memory log shared by the producers and consumers that name
  the same `bootstrap.servers` in the same Python process. Nothing is sent
  over the network, so a wallet and a balance service started as two
  separate commands do not see each other's events.
- **The balance service does not create balances.** It only updates rows
  already in `account_balances`; an event for an unknown account is logged
  and skipped. `CreateAccountBalanceUseCase` exists in
  `digitalwallet.balance.usecases` for code that needs it, but no command
  uses it.
- Storage is SQLite only as far as the commands go; other databases need a
  connection passed to `build_server` yourself.

## Using the domain model

```python
from digitalwallet.wallet.entities import (
    DomainError,
    new_account,
    new_client,
    new_transaction,
)

john = new_client("John Doe", "john@example.com")
jane = new_client("Jane Doe", "jane@example.com")

source = new_account(john)
target = new_account(jane)
source.credit(100.0)

transfer = new_transaction(source, target, 50.0)
print(source.balance, target.balance)   # 50.0 50.0

try:
    source.debit(500.0)
except DomainError as error:
    print(error)                        # insufficient balance
```

A transfer is refused when either account is missing, when the amount is zero
or negative, when both sides are the same account, or when the paying account
does not hold enough money.

The balance side has its own small model:

```python
from digitalwallet.balance.entities import BalanceError, new_balance

balance = new_balance("account1", 100.0)
balance.update_balance(200.0)

try:
    balance.update_balance(-1.0)
except BalanceError as error:
    print(error)                        # insufficient balance
```

## Events

`digitalwallet.events.EventDispatcher` maps event names to handlers. A
handler is an object with a `handle(event)` method; registering the same
handler object twice for one name raises `HandlerAlreadyRegisteredError`.
`dispatch` runs every handler registered for the event's name in its own
thread, waits for all of them, and then re-raises the first error, if any,
in registration order.

```python
from digitalwallet.events import Event, EventDispatcher, EventHandler

class PrintingHandler(EventHandler):
    def handle(self, event):
        print(event.name, event.payload)

dispatcher = EventDispatcher()
handler = PrintingHandler()
dispatcher.register("TransactionCreated", handler)
dispatcher.dispatch(Event("TransactionCreated", {"id": "t1"}))
print(dispatcher.has("TransactionCreated", handler))   # True
dispatcher.remove("TransactionCreated", handler)
```

## Transactions

`digitalwallet.uow.UnitOfWork` builds repositories from registered factories,
each given the connection. `do(fn)` starts a transaction, calls `fn` with the
unit of work, commits and returns its result when it returns, and rolls back
and re-raises when it raises. Starting a second transaction while one is open
raises `TransactionError`, as does a rollback that itself fails.