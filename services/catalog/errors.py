"""Exceptions raised by the console services."""
from __future__ import annotations


class ConsoleError(RuntimeError):
    """Base class for service failures that map onto client errors."""


class RecordNotFound(ConsoleError):
    """Raised when a requested record does not exist."""

    def __init__(self, kind: str, identifier: object) -> None:
        super().__init__(f"{kind} {identifier} not found")
        self.kind = kind
        self.identifier = identifier


class RecordConflict(ConsoleError):
    """Raised when a write would break uniqueness or a ledger balance."""


__all__ = ["ConsoleError", "RecordConflict", "RecordNotFound"]
