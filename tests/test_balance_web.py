import json

from digitalwallet.balance.entities import new_balance
from digitalwallet.balance.usecases import GetAccountBalanceUseCase
from digitalwallet.balance.web import BalanceHandler
from digitalwallet.webserver import Request


class FakeGateway:
    def __init__(self, balances=(), find_error=None):
        self.balances = {account.account_id: account for account in balances}
        self.find_error = find_error

    def find_by_id(self, account_id):
        if self.find_error is not None:
            raise self.find_error
        return self.balances.get(account_id)

    def save(self, account):
        self.balances[account.account_id] = account

    def update_balance(self, account):
        self.balances[account.account_id] = account


def get(handler, account_id):
    return handler.get_account_balance(
        Request(method="GET", path=f"/balances/{account_id}", params={"account_id": account_id})
    )


def test_returns_balance_as_json():
    handler = BalanceHandler(GetAccountBalanceUseCase(FakeGateway([new_balance("a1", 12.5)])))
    response = get(handler, "a1")
    assert response.status == 200
    assert response.headers["Content-Type"] == "application/json"
    assert json.loads(response.body) == {"account_id": "a1", "balance": 12.5}


def test_whole_balance_is_written_without_fraction():
    handler = BalanceHandler(GetAccountBalanceUseCase(FakeGateway([new_balance("a1", 100.0)])))
    assert get(handler, "a1").body == b'{"account_id":"a1","balance":100}'


def test_missing_balance_is_server_error():
    handler = BalanceHandler(GetAccountBalanceUseCase(FakeGateway()))
    response = get(handler, "nobody")
    assert response.status == 500
    assert response.body == b"account balance not found\n"


def test_gateway_error_message_is_returned():
    gateway = FakeGateway(find_error=RuntimeError("database error"))
    response = get(BalanceHandler(GetAccountBalanceUseCase(gateway)), "a1")
    assert response.status == 500
    assert response.body.decode("utf-8").strip() == "database error"
    assert response.headers["Content-Type"].startswith("text/plain")