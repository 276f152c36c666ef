"""
Transaction boundary contract shared by the SQL adapters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """
    A context manager owning one transaction and the repositories inside it.

    Implementations expose repositories as attributes (``users``, ``roles``,
    ``permissions``, ``revoked_tokens``) that all share the same session.
    Leaving the block normally commits, leaving it with an exception rolls
    back; read-only variants may refuse :meth:`commit` altogether.
    """

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
