import sqlite3

import pytest

from digitalwallet.balance.database import AccountNotFoundError, BalanceDB
from digitalwallet.balance.entities import new_balance


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    connection.execute(
        "CREATE TABLE account_balances (account_id TEXT PRIMARY KEY, balance REAL NOT NULL)"
    )
    yield connection
    connection.close()


@pytest.fixture
def db(conn):
    return BalanceDB(conn)


def test_save(db, conn):
    account = new_balance("account1", 100.0)
    db.save(account)
    row = conn.execute(
        "SELECT account_id, balance FROM account_balances WHERE account_id = ?",
        ("account1",),
    ).fetchone()
    assert row == ("account1", 100.0)
    found = db.find_by_id("account1")
    assert (found.account_id, found.balance) == ("account1", 100.0)


def test_save_fails_for_duplicate(db):
    account = new_balance("account1", 100.0)
    db.save(account)
    account.balance = 200.0
    with pytest.raises(sqlite3.IntegrityError):
        db.save(account)


def test_find_by_id_returns_account_when_exists(db, conn):
    conn.execute(
        "INSERT INTO account_balances (account_id, balance) VALUES (?, ?)", ("account1", 100.0)
    )
    account = db.find_by_id("account1")
    assert account is not None
    assert account.account_id == "account1"
    assert account.balance == 100.0


def test_find_by_id_returns_none_when_not_exists(db):
    assert db.find_by_id("account_not_exists") is None


def test_update_balance(db, conn):
    conn.execute(
        "INSERT INTO account_balances (account_id, balance) VALUES (?, ?)", ("account1", 100.0)
    )
    db.update_balance(new_balance("account1", 200.0))
    row = conn.execute(
        "SELECT balance FROM account_balances WHERE account_id = ?", ("account1",)
    ).fetchone()
    assert row == (200.0,)
    assert db.find_by_id("account1").balance == 200.0


def test_update_balance_with_non_existing_account(db):
    with pytest.raises(AccountNotFoundError) as info:
        db.update_balance(new_balance("account_not_exists", 200.0))
    assert str(info.value) == "account not found"


def test_save_then_find_round_trip(db):
    db.save(new_balance("account2", 42.5))
    found = db.find_by_id("account2")
    assert (found.account_id, found.balance) == ("account2", 42.5)