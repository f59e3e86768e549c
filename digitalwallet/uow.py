"""Unit of work: groups repository calls into one database transaction."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

RepositoryFactory = Callable[[Any], Any]
T = TypeVar("T")


class TransactionError(Exception):
    """Raised for misuse of a transaction or a failed rollback."""


class UnitOfWork:
    """Builds repositories on one DB-API connection and commits or rolls back their work."""

    def __init__(self, connection: Any) -> None:
        self.connection = connection
        self._repositories: dict[str, RepositoryFactory] = {}
        self._active = False

    @property
    def in_transaction(self) -> bool:
        """Whether a transaction is open."""
        return self._active

    def register(self, name: str, factory: RepositoryFactory) -> None:
        """Register ``factory`` under ``name``; it receives the connection."""
        self._repositories[name] = factory

    def unregister(self, name: str) -> None:
        """Forget the factory registered under ``name``."""
        self._repositories.pop(name, None)

    def get_repository(self, name: str) -> Any:
        """Build the repository ``name``, opening a transaction if none is open."""
        try:
            factory = self._repositories[name]
        except KeyError:
            raise KeyError(f"repository {name!r} is not registered") from None
        self._active = True
        return factory(self.connection)

    def do(self, fn: Callable[[UnitOfWork], T]) -> T:
        """Run ``fn`` in a fresh transaction: commit on success, roll back on error."""
        if self._active:
            raise TransactionError("transaction already started")
        self._active = True
        try:
            result = fn(self)
        except Exception as err:
            self._rollback_after(err)
            raise
        self.commit_or_rollback()
        return result

    def rollback(self) -> None:
        """Roll back the open transaction."""
        if not self._active:
            raise TransactionError("no transaction to rollback")
        self.connection.rollback()
        self._active = False

    def commit_or_rollback(self) -> None:
        """Commit the open transaction, rolling it back if the commit fails."""
        if not self._active:
            raise TransactionError("no transaction to commit")
        try:
            self.connection.commit()
        except Exception as err:
            self._rollback_after(err)
            raise
        self._active = False

    def _rollback_after(self, err: Exception) -> None:
        try:
            self.rollback()
        except Exception as rollback_err:
            raise TransactionError(
                f"original error: {err}, rollback error: {rollback_err}"
            ) from err