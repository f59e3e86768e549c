"""Topic-based message log with JSON producers and group-aware consumers.

Producers and consumers whose configuration names the same
``bootstrap.servers`` share one log inside the running process.
"""

from __future__ import annotations

import base64
import dataclasses
import enum
import json
import threading
import time
from collections import defaultdict
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

_EARLIEST = frozenset({"earliest", "smallest", "beginning"})


@dataclass(frozen=True)
class Message:
    """One record in a topic."""

    topic: str
    value: bytes
    key: bytes | None = None
    offset: int = 0


class _Broker:
    def __init__(self) -> None:
        self._logs: defaultdict[str, list[Message]] = defaultdict(list)
        self._offsets: dict[tuple[str, str], int] = {}
        self._changed = threading.Condition()

    def append(self, topic: str, key: bytes | None, value: bytes) -> Message:
        with self._changed:
            log = self._logs[topic]
            message = Message(topic=topic, value=value, key=key, offset=len(log))
            log.append(message)
            self._changed.notify_all()
            return message

    def poll(
        self, group: str, topics: list[str], reset: str, timeout: float | None
    ) -> Message | None:
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._changed:
            while True:
                for topic in topics:
                    log = self._logs[topic]
                    position = self._offsets.setdefault(
                        (group, topic), 0 if reset in _EARLIEST else len(log)
                    )
                    if position < len(log):
                        self._offsets[(group, topic)] = position + 1
                        return log[position]
                if deadline is None:
                    self._changed.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return None
                self._changed.wait(remaining)


_brokers: dict[str, _Broker] = {}
_brokers_lock = threading.Lock()


def _broker_for(config: Mapping[str, Any]) -> _Broker:
    servers = str(config.get("bootstrap.servers", ""))
    with _brokers_lock:
        return _brokers.setdefault(servers, _Broker())


def _encode(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {field.name: getattr(obj, field.name) for field in dataclasses.fields(obj)}
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(bytes(obj)).decode("ascii")
    if isinstance(obj, enum.Enum):
        return obj.value
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    if isinstance(obj, Mapping):
        return dict(obj)
    raise TypeError(f"object of type {type(obj).__name__} is not JSON serializable")


def _to_json(obj: Any) -> bytes:
    return json.dumps(
        obj, default=_encode, separators=(",", ":"), ensure_ascii=False, allow_nan=False
    ).encode("utf-8")


class Producer:
    """Publishes values, encoded as compact JSON, to topics."""

    def __init__(self, config: Mapping[str, Any]) -> None:
        self.config = dict(config)

    def publish(self, msg: Any, key: bytes | None, topic: str) -> Message:
        """Encode ``msg`` as JSON and append it to ``topic``; return the stored message."""
        value = _to_json(msg)
        return _broker_for(self.config).append(topic, key, value)


class Consumer:
    """Reads messages from topics on behalf of a consumer group."""

    def __init__(
        self,
        config: Mapping[str, Any],
        topics: Iterable[str],
        *,
        poll_timeout: float | None = None,
    ) -> None:
        self.config = dict(config)
        self.topics = list(topics)
        self.poll_timeout = poll_timeout

    def consume(self) -> Iterator[Message]:
        """Yield messages as they arrive.

        Waits forever unless ``poll_timeout`` is set, in which case the
        iteration ends once no message arrives within that many seconds.
        """
        group = self.config.get("group.id")
        if not group:
            raise ValueError("consumer configuration requires group.id")
        reset = str(self.config.get("auto.offset.reset", "latest"))
        broker = _broker_for(self.config)
        while (
            message := broker.poll(str(group), self.topics, reset, self.poll_timeout)
        ) is not None:
            yield message