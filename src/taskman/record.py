"""Task record model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class RecordKey(NamedTuple):
    """Content-based identity of a record: its body and priority."""

    body: str
    priority: str | None = None


@dataclass(frozen=True)
class Record:
    """One task line.

    Contexts and tags stay inline in ``body``; attributes are stripped from
    it and kept in ``attributes`` in the order they were found.
    """

    body: str
    done: bool = False
    priority: str | None = None
    contexts: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    attributes: tuple[tuple[str, str], ...] = ()

    @property
    def key(self) -> RecordKey:
        """The key a caller uses to find this record again."""
        return RecordKey(self.body, self.priority)

    def attribute(self, name: str) -> str | None:
        """Return the first value stored under ``name``."""
        for key, value in self.attributes:
            if key == name:
                return value
        return None
