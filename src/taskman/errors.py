"""Errors raised by taskman."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from taskman.record import RecordKey


class TaskmanError(Exception):
    """Base error for this package."""


class StoreIOError(TaskmanError):
    """Raised when a task file cannot be read or written."""


class InvalidMutationError(TaskmanError):
    """Raised when a mutation request is missing or has malformed input."""


class RecordNotFoundError(TaskmanError):
    """Raised when no record matches a locator key."""

    def __init__(self, key: RecordKey) -> None:
        self.key = key
        priority = f"({key.priority}) " if key.priority else ""
        super().__init__(f"No task matches: {priority}{key.body}")
