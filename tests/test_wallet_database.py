import sqlite3

import pytest

from digitalwallet.wallet.database import (
    AccountDB,
    ClientDB,
    NotFoundError,
    RepositoryError,
    TransactionDB,
)
from digitalwallet.wallet.entities import new_account, new_client, new_transaction

SCHEMA = """
CREATE TABLE clients (
    id varchar(255) PRIMARY KEY,
    name varchar(255),
    email varchar(255),
    created_at date
);
CREATE TABLE accounts (
    id varchar(255) PRIMARY KEY,
    client_id varchar(255),
    balance float,
    created_at date,
    FOREIGN KEY (client_id) REFERENCES clients(id)
);
CREATE TABLE transactions (
    id varchar(255) PRIMARY KEY,
    account_id_from varchar(255),
    account_id_to varchar(255),
    amount float,
    created_at date,
    FOREIGN KEY (account_id_from) REFERENCES accounts(id),
    FOREIGN KEY (account_id_to) REFERENCES accounts(id)
);
"""


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    conn.executescript(SCHEMA)
    yield conn
    conn.close()


@pytest.fixture
def client_db(connection):
    return ClientDB(connection)


@pytest.fixture
def account_db(connection):
    return AccountDB(connection)


def _count(connection, table, row_id):
    return connection.execute(f"SELECT COUNT(*) FROM {table} WHERE id = ?", (row_id,)).fetchone()[0]


# clients


def test_client_save(connection, client_db):
    client = new_client("John Doe", "john@example.com")
    client_db.save(client)
    assert _count(connection, "clients", client.id) == 1


def test_client_save_duplicate(client_db):
    client = new_client("Jane Doe", "jane@example.com")
    client_db.save(client)
    with pytest.raises(sqlite3.IntegrityError):
        client_db.save(client)


def test_client_get(connection, client_db):
    expected = new_client("Alice Smith", "alice@example.com")
    connection.execute(
        "INSERT INTO clients (id, name, email, created_at) VALUES (?, ?, ?, ?)",
        (expected.id, expected.name, expected.email, expected.created_at.isoformat(sep=" ")),
    )
    client = client_db.get(expected.id)
    assert client.id == expected.id
    assert client.name == expected.name
    assert client.email == expected.email
    assert client.created_at == expected.created_at


def test_client_get_non_existent(client_db):
    with pytest.raises(NotFoundError):
        client_db.get("non-existent-id")


# accounts


def test_account_save(connection, client_db, account_db):
    client = new_client("John Doe", "john@example.com")
    client_db.save(client)
    account = new_account(client)
    account_db.save(account)
    assert _count(connection, "accounts", account.id) == 1


def test_account_save_duplicate(connection, client_db, account_db):
    client = new_client("Jane Doe", "jane@example.com")
    client_db.save(client)
    account = new_account(client)
    account_db.save(account)
    with pytest.raises(RepositoryError, match="account already exists"):
        account_db.save(account)
    assert _count(connection, "accounts", account.id) == 1


def test_account_find_by_id(client_db, account_db):
    client = new_client("Alice Smith", "alice@example.com")
    client_db.save(client)
    expected = new_account(client)
    expected.credit(100.0)
    account_db.save(expected)

    account = account_db.find_by_id(expected.id)

    assert account.id == expected.id
    assert account.balance == expected.balance == 100.0
    assert account.created_at == expected.created_at
    assert account.client.id == client.id
    assert account.client.name == client.name
    assert account.client.email == client.email


def test_account_find_by_id_non_existent(account_db):
    with pytest.raises(NotFoundError):
        account_db.find_by_id("non-existent-id")


def test_account_save_with_non_existent_client(connection, account_db):
    client = new_client("Bob Johnson", "bob@example.com")
    account = new_account(client)
    with pytest.raises(RepositoryError, match="client does not exist"):
        account_db.save(account)
    assert _count(connection, "accounts", account.id) == 0


def test_account_update_balance(connection, client_db, account_db):
    client = new_client("John Doe", "john@example.com")
    client_db.save(client)
    account = new_account(client)
    account_db.save(account)
    account.credit(250.0)
    account_db.update_balance(account)
    assert account_db.find_by_id(account.id).balance == 250.0


def test_account_update_balance_wraps_database_errors(connection, client_db, account_db):
    client = new_client("John Doe", "john@example.com")
    client_db.save(client)
    account = new_account(client)
    account_db.save(account)
    connection.close()
    with pytest.raises(RepositoryError, match="^failed to update account balance: "):
        account_db.update_balance(account)


# transactions


@pytest.fixture
def seeded(connection, client_db, account_db):
    client1 = new_client("John", "john@example.com")
    client2 = new_client("Jane", "jane@example.com")
    client_db.save(client1)
    client_db.save(client2)
    account1 = new_account(client1)
    account2 = new_account(client2)
    account1.credit(1000)
    account_db.save(account1)
    account_db.save(account2)
    return TransactionDB(connection), client1, account1, account2


def test_transaction_create(connection, seeded):
    transaction_db, _, account1, account2 = seeded
    transaction = new_transaction(account1, account2, 100)
    transaction_db.create(transaction)

    assert _count(connection, "transactions", transaction.id) == 1
    row = connection.execute(
        "SELECT id, account_id_from, account_id_to, amount FROM transactions WHERE id = ?",
        (transaction.id,),
    ).fetchone()
    assert row == (transaction.id, account1.id, account2.id, 100.0)
    assert account1.balance == 900.0
    assert account2.balance == 100.0


def test_transaction_create_with_unknown_destination(connection, seeded):
    transaction_db, client1, account1, _ = seeded
    missing = new_account(client1)
    transaction = new_transaction(account1, missing, 100)
    with pytest.raises(RepositoryError, match=f"account_to with id {missing.id} does not exist"):
        transaction_db.create(transaction)
    assert _count(connection, "transactions", transaction.id) == 0


def test_transaction_create_with_unknown_source(connection, seeded):
    transaction_db, client1, _, account2 = seeded
    missing = new_account(client1)
    missing.credit(500)
    transaction = new_transaction(missing, account2, 100)
    with pytest.raises(RepositoryError, match=f"account_from with id {missing.id} does not exist"):
        transaction_db.create(transaction)
    assert _count(connection, "transactions", transaction.id) == 0


def test_transaction_create_duplicate(connection, seeded):
    transaction_db, _, account1, account2 = seeded
    transaction = new_transaction(account1, account2, 100)
    transaction_db.create(transaction)
    account1.credit(100)
    with pytest.raises(sqlite3.IntegrityError):
        transaction_db.create(transaction)
    assert _count(connection, "transactions", transaction.id) == 1