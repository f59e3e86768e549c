"""In-process event dispatching to registered handlers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class Event:
    """A named event carrying an arbitrary payload."""

    name: str
    payload: Any = None

    def date_time(self) -> datetime:
        """Return the moment the event is looked at."""
        return datetime.now()


class EventHandler(ABC):
    """Something that reacts to a dispatched event."""

    @abstractmethod
    def handle(self, event: Event) -> None:
        """React to ``event``."""


class HandlerAlreadyRegisteredError(Exception):
    """Raised when the same handler is registered twice for one event."""

    def __init__(self, message: str = "handler already registered") -> None:
        super().__init__(message)


class EventDispatcher:
    """Keeps handlers per event name and runs them when an event is dispatched."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}

    def register(self, event_name: str, handler: EventHandler) -> None:
        """Add ``handler`` for ``event_name``; the same object may be added only once."""
        registered = self._handlers.setdefault(event_name, [])
        if any(existing is handler for existing in registered):
            raise HandlerAlreadyRegisteredError()
        registered.append(handler)

    def dispatch(self, event: Event) -> None:
        """Run every handler of the event's name concurrently and wait for all of them.

        If handlers raise, the first error in registration order is re-raised
        once every handler has finished.
        """
        handlers = list(self._handlers.get(event.name, ()))
        if not handlers:
            return
        with ThreadPoolExecutor(max_workers=len(handlers)) as pool:
            futures = [pool.submit(handler.handle, event) for handler in handlers]
        for future in futures:
            future.result()

    def has(self, event_name: str, handler: EventHandler) -> bool:
        """Tell whether ``handler`` is registered for ``event_name``."""
        return any(existing is handler for existing in self._handlers.get(event_name, ()))

    def remove(self, event_name: str, handler: EventHandler) -> None:
        """Drop ``handler`` from ``event_name``; unknown handlers are ignored."""
        registered = self._handlers.get(event_name)
        if registered is None:
            return
        position = next(
            (index for index, existing in enumerate(registered) if existing is handler),
            None,
        )
        if position is not None:
            del registered[position]

    def clear(self) -> None:
        """Forget every registered handler."""
        self._handlers = {}

    def handlers_for(self, event_name: str) -> tuple[EventHandler, ...]:
        """Return the handlers registered for ``event_name``, in registration order."""
        return tuple(self._handlers.get(event_name, ()))