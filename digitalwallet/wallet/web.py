"""HTTP handlers for the wallet use cases."""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Callable
from datetime import date
from http import HTTPStatus
from typing import Any, TypeVar

from digitalwallet.wallet.usecases import (
    CreateAccountInput,
    CreateAccountUseCase,
    CreateClientInput,
    CreateClientUseCase,
    CreateTransactionInput,
    CreateTransactionUseCase,
)
from digitalwallet.webserver import Request, Response

logger = logging.getLogger(__name__)

I = TypeVar("I")


def _decode_object(body: bytes) -> dict[str, Any]:
    """Decode the first JSON value of ``body`` as an object with case-folded keys."""
    text = body.decode("utf-8")
    value, _ = json.JSONDecoder().raw_decode(text.lstrip())
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError("request body must be a JSON object")
    return {key.lower(): item for key, item in value.items()}


def _text(fields: dict[str, Any], name: str) -> str:
    value = fields.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    return value


def _number(fields: dict[str, Any], name: str) -> float:
    value = fields.get(name)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number")
    return float(value)


def _encode(obj: Any) -> Any:
    if isinstance(obj, date):
        return obj.isoformat()
    raise TypeError(f"object of type {type(obj).__name__} is not JSON serializable")


def _json_response(output: Any) -> Response:
    document = json.dumps(
        dataclasses.asdict(output), default=_encode, separators=(",", ":"), ensure_ascii=False
    )
    return Response(
        status=HTTPStatus.OK,
        body=(document + "\n").encode("utf-8"),
        headers={"Content-Type": "application/json"},
    )


def _serve(
    request: Request,
    parse: Callable[[dict[str, Any]], I],
    run: Callable[[I], Any],
) -> Response:
    try:
        input_dto = parse(_decode_object(request.body))
    except ValueError:
        return Response(status=HTTPStatus.BAD_REQUEST)
    try:
        output = run(input_dto)
    except Exception:
        logger.exception("%s %s failed", request.method, request.path)
        return Response(status=HTTPStatus.INTERNAL_SERVER_ERROR)
    return _json_response(output)


class ClientHandler:
    """Serves client creation."""

    def __init__(self, use_case: CreateClientUseCase) -> None:
        self.use_case = use_case

    def create_client(self, request: Request) -> Response:
        """Create a client from a JSON body holding ``name`` and ``email``."""
        return _serve(
            request,
            lambda fields: CreateClientInput(
                name=_text(fields, "name"), email=_text(fields, "email")
            ),
            self.use_case.execute,
        )


class AccountHandler:
    """Serves account creation."""

    def __init__(self, use_case: CreateAccountUseCase) -> None:
        self.use_case = use_case

    def create_account(self, request: Request) -> Response:
        """Open an account from a JSON body holding ``client_id``."""
        return _serve(
            request,
            lambda fields: CreateAccountInput(client_id=_text(fields, "client_id")),
            self.use_case.execute,
        )


class TransactionHandler:
    """Serves transfers between accounts."""

    def __init__(self, use_case: CreateTransactionUseCase) -> None:
        self.use_case = use_case

    def create_transaction(self, request: Request) -> Response:
        """Make a transfer from a JSON body holding both account ids and the amount."""
        return _serve(
            request,
            lambda fields: CreateTransactionInput(
                account_id_from=_text(fields, "account_id_from"),
                account_id_to=_text(fields, "account_id_to"),
                amount=_number(fields, "amount"),
            ),
            self.use_case.execute,
        )