"""A small routing WSGI application with path parameters."""

from __future__ import annotations

import dataclasses
import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any
from wsgiref.simple_server import make_server

logger = logging.getLogger(__name__)


@dataclass
class Request:
    """An incoming HTTP request as seen by a handler."""

    method: str
    path: str
    body: bytes = b""
    params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class Response:
    """What a handler sends back."""

    status: int = 200
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)


Handler = Callable[[Request], Response]


def _is_param(segment: str) -> bool:
    return len(segment) > 2 and segment.startswith("{") and segment.endswith("}")


@dataclass(frozen=True)
class _Route:
    method: str
    pattern: str
    handler: Handler

    @property
    def segments(self) -> list[str]:
        return self.pattern.split("/")

    @property
    def param_count(self) -> int:
        return sum(_is_param(segment) for segment in self.segments)

    def match(self, parts: list[str]) -> dict[str, str] | None:
        segments = self.segments
        if len(segments) != len(parts):
            return None
        params: dict[str, str] = {}
        for segment, part in zip(segments, parts):
            if _is_param(segment):
                if not part:
                    return None
                params[segment[1:-1]] = part
            elif segment != part:
                return None
        return params


def _status_line(status: int) -> str:
    try:
        phrase = HTTPStatus(status).phrase
    except ValueError:
        phrase = "Unknown"
    return f"{status} {phrase}"


class WebServer:
    """Routes requests by method and path pattern to handlers."""

    def __init__(self, address: str) -> None:
        self.address = address
        self._handlers: dict[tuple[str, str], Handler] = {}

    def add_handler(self, path: str, handler: Handler) -> None:
        """Route POST requests for ``path`` to ``handler``."""
        self.add_post_handler(path, handler)

    def add_get_handler(self, path: str, handler: Handler) -> None:
        """Route GET requests for ``path`` to ``handler``."""
        self._handlers[(path, "GET")] = handler

    def add_post_handler(self, path: str, handler: Handler) -> None:
        """Route POST requests for ``path`` to ``handler``."""
        self._handlers[(path, "POST")] = handler

    def handle(self, method: str, path: str, body: bytes = b"") -> Response:
        """Route one request and return the handler's response."""
        return self._dispatch(Request(method=method.upper(), path=path, body=body))

    def _routes(self) -> list[_Route]:
        routes = [
            _Route(method, pattern, handler)
            for (pattern, method), handler in self._handlers.items()
        ]
        return sorted(routes, key=lambda route: route.param_count)

    def _dispatch(self, request: Request) -> Response:
        path = request.path.split("?", 1)[0]
        parts = path.split("/")
        path_known = False
        for route in self._routes():
            params = route.match(parts)
            if params is None:
                continue
            if route.method != request.method:
                path_known = True
                continue
            return route.handler(dataclasses.replace(request, path=path, params=params))
        if path_known:
            return Response(status=HTTPStatus.METHOD_NOT_ALLOWED)
        return Response(
            status=HTTPStatus.NOT_FOUND,
            body=b"404 page not found\n",
            headers={"Content-Type": "text/plain; charset=utf-8"},
        )

    def __call__(
        self, environ: dict[str, Any], start_response: Callable[..., Any]
    ) -> Iterable[bytes]:
        started = time.perf_counter()
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        body = environ["wsgi.input"].read(length) if length > 0 else b""
        headers = {
            key[5:].replace("_", "-").title(): value
            for key, value in environ.items()
            if key.startswith("HTTP_")
        }
        if environ.get("CONTENT_TYPE"):
            headers["Content-Type"] = environ["CONTENT_TYPE"]
        request = Request(
            method=str(environ.get("REQUEST_METHOD", "GET")).upper(),
            path=environ.get("PATH_INFO") or "/",
            body=body,
            headers=headers,
        )
        try:
            response = self._dispatch(request)
        except Exception:
            logger.exception("handler failed for %s %s", request.method, request.path)
            response = Response(
                status=HTTPStatus.INTERNAL_SERVER_ERROR, body=b"Internal Server Error\n"
            )
        out_headers = [
            (name, value)
            for name, value in response.headers.items()
            if name.lower() != "content-length"
        ]
        out_headers.append(("Content-Length", str(len(response.body))))
        start_response(_status_line(int(response.status)), out_headers)
        logger.info(
            '"%s %s" from %s - %d %dB in %.3fms',
            request.method,
            request.path,
            environ.get("REMOTE_ADDR", "-"),
            int(response.status),
            len(response.body),
            (time.perf_counter() - started) * 1000,
        )
        return [response.body]

    def start(self) -> None:
        """Serve requests on the configured ``host:port`` address until stopped."""
        host, _, port = self.address.rpartition(":")
        logger.info("Starting web server on port %s", self.address)
        with make_server(host, int(port), self) as server:
            server.serve_forever()