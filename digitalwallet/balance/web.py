"""HTTP handler for reading account balances."""

from __future__ import annotations

import json
import logging
from http import HTTPStatus

from digitalwallet.balance.usecases import AccountBalanceOutput, GetAccountBalanceUseCase
from digitalwallet.webserver import Request, Response

logger = logging.getLogger(__name__)


def _error(message: str) -> Response:
    return Response(
        status=HTTPStatus.INTERNAL_SERVER_ERROR,
        body=(message + "\n").encode("utf-8"),
        headers={
            "Content-Type": "text/plain; charset=utf-8",
            "X-Content-Type-Options": "nosniff",
        },
    )


def _number(value: float) -> float | int:
    # Whole numbers are written without a fractional part.
    if value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


def _encode(output: AccountBalanceOutput) -> bytes:
    document = {"account_id": output.account_id, "balance": _number(float(output.balance))}
    return json.dumps(
        document, separators=(",", ":"), ensure_ascii=False, allow_nan=False
    ).encode("utf-8")


class BalanceHandler:
    """Serves the balance of one account."""

    def __init__(self, use_case: GetAccountBalanceUseCase) -> None:
        self.use_case = use_case

    def get_account_balance(self, request: Request) -> Response:
        """Answer with the balance of the account named by the ``account_id`` parameter."""
        account_id = request.params.get("account_id", "")
        try:
            output = self.use_case.execute(account_id)
            body = _encode(output)
        except Exception as err:
            logger.info("balance lookup for %r failed: %s", account_id, err)
            return _error(str(err))
        return Response(
            status=HTTPStatus.OK,
            body=body,
            headers={"Content-Type": "application/json"},
        )