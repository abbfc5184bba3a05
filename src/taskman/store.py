"""Task store - the in-memory task list backed by todo.txt and done.txt.

The store holds one snapshot of records as a tuple. Every load and every
mutation replaces the whole tuple; individual records are never modified in
place. Saving always rewrites the todo file completely. Archiving prepends
finished records to the done file.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import replace
from pathlib import Path
from string import ascii_uppercase
from typing import TYPE_CHECKING

from taskman.errors import InvalidMutationError, StoreIOError
from taskman.locator import Updater, locate_and_update
from taskman.parser import parse_line, serialize_record
from taskman.record import Record, RecordKey

if TYPE_CHECKING:
    from taskman.config import TaskmanConfig

logger = logging.getLogger(__name__)

NO_PRIORITY_SORT_KEY = "Z"

_ATTRIBUTE_NAME = re.compile(r"\w+")
_ATTRIBUTE_VALUE = re.compile(r"[\w\-_]+")


def sort_records(records: Iterable[Record]) -> list[Record]:
    """Sort by priority letter; tasks without one sort as if they were ``Z``.

    The sort is stable, so equal keys keep their file order. Real ``(Z)``
    tasks end up mixed in with the unprioritised ones.
    """
    return sorted(records, key=lambda r: r.priority or NO_PRIORITY_SORT_KEY)


def filter_records(records: Iterable[Record], query: str | None) -> list[Record]:
    """Filter records for display.

    A single character selects that priority (case-insensitive). Anything
    longer is a case-insensitive substring search over the body. An empty
    query keeps everything.
    """
    if not query:
        return list(records)

    if len(query) == 1:
        wanted = query.upper()
        return [r for r in records if r.priority == wanted]

    needle = query.casefold()
    return [r for r in records if needle in r.body.casefold()]


def parse_text(text: str) -> list[Record]:
    """Parse a whole file, dropping lines that are not tasks. Not sorted."""
    lines = [line for line in text.split("\n") if line]
    records = [r for r in (parse_line(line) for line in lines) if r is not None]

    dropped = len(lines) - len(records)
    if dropped:
        logger.debug("Skipped %d line(s) with no task", dropped)

    return records


def serialize_records(records: Iterable[Record]) -> str:
    """Serialise records one per line with a trailing newline."""
    return "\n".join(serialize_record(r) for r in records) + "\n"


class TodoStore:
    """Owner of the current task snapshot and the two files behind it."""

    def __init__(self, todo_path: Path, done_path: Path) -> None:
        self.todo_path = Path(todo_path)
        self.done_path = Path(done_path)
        self.records: tuple[Record, ...] = ()

    @classmethod
    def from_config(cls, config: TaskmanConfig) -> TodoStore:
        return cls(config.todo_path, config.done_path)

    def load(self) -> tuple[Record, ...]:
        """Read the todo file, parse and sort it, and make it the snapshot.

        Raises:
            StoreIOError: If the todo file cannot be read.
        """
        text = _read(self.todo_path)
        self.records = tuple(sort_records(parse_text(text)))
        logger.debug("Loaded %d task(s) from %s", len(self.records), self.todo_path)
        return self.records

    def save(self, records: Sequence[Record] | None = None) -> None:
        """Rewrite the todo file from ``records`` (default: the snapshot).

        Passing records also makes them the new snapshot.
        """
        if records is not None:
            self.records = tuple(records)
        _write(self.todo_path, serialize_records(self.records))
        logger.debug("Saved %d task(s) to %s", len(self.records), self.todo_path)

    def archive(self, selected: Sequence[Record]) -> None:
        """Prepend ``selected`` to the done file.

        This does not touch the snapshot or the todo file; callers remove the
        same records from the store themselves (see ``cleanup``). A missing
        done file counts as empty.
        """
        if not selected:
            return

        previous = _read(self.done_path) if self.done_path.exists() else ""
        _write(self.done_path, serialize_records(selected) + previous)
        logger.debug("Archived %d task(s) to %s", len(selected), self.done_path)

    def cleanup(self) -> tuple[Record, ...]:
        """Move finished tasks to the done file. Returns the archived records."""
        keep = tuple(r for r in self.records if not r.done)
        finished = tuple(r for r in self.records if r.done)

        self.archive(finished)
        self.save(keep)
        return finished

    def add(self, line: str) -> Record:
        """Parse ``line`` and append it to the list."""
        check_task(line)
        record = parse_line(line)
        if record is None:
            raise InvalidMutationError("Cannot add an empty task")

        self.save((*self.records, record))
        return record

    def update(self, key: RecordKey, updater: Updater) -> Record:
        """Apply ``updater`` to the task(s) matching key and save.

        Every task sharing the key is updated. Returns the updated record.

        Raises:
            RecordNotFoundError: If no task matches key.
        """
        check_key(key)
        records, updated = locate_and_update(self.records, key, updater)
        self.save(records)
        return updated

    def set_done(self, key: RecordKey, done: bool) -> Record:
        return self.update(key, lambda r: replace(r, done=done))

    def set_priority(self, key: RecordKey, priority: str | None) -> Record:
        """Set or clear (``None`` or empty string) the priority letter."""
        priority = priority or None
        check_priority(priority)
        return self.update(key, lambda r: replace(r, priority=priority))

    def update_body(self, key: RecordKey, body: str) -> Record:
        """Replace the body text.

        The result is serialised and parsed again, so markers typed into the
        new body (attributes, contexts, tags) are picked up.
        """
        check_body(body)

        def reparse(record: Record) -> Record:
            reparsed = parse_line(serialize_record(replace(record, body=body)))
            if reparsed is None:
                raise InvalidMutationError("Task body cannot be empty")
            return reparsed

        return self.update(key, reparse)

    def set_attribute(self, key: RecordKey, name: str, value: str) -> Record:
        """Replace any ``name`` attributes with a single ``name:value``."""
        check_attribute(name, value)

        def set_value(record: Record) -> Record:
            kept = tuple((k, v) for k, v in record.attributes if k != name)
            return replace(record, attributes=(*kept, (name, value)))

        return self.update(key, set_value)


# Input checks. Each raises InvalidMutationError and touches no files.


def check_key(key: RecordKey) -> None:
    if not isinstance(key.body, str):
        raise InvalidMutationError("Task key is missing its body")
    check_priority(key.priority)


def check_priority(priority: str | None) -> None:
    if priority is not None and (len(priority) != 1 or priority not in ascii_uppercase):
        raise InvalidMutationError(f"Priority must be a single letter A-Z, got {priority!r}")


def check_line(text: str, what: str) -> None:
    if not isinstance(text, str):
        raise InvalidMutationError(f"Missing {what} text")
    if "\n" in text or "\r" in text:
        raise InvalidMutationError(f"The {what} must be a single line")


def check_task(line: str) -> None:
    """A line to add: one line with some text on it."""
    check_line(line, "task")
    if not line.strip():
        raise InvalidMutationError("Cannot add an empty task")


def check_body(body: str) -> None:
    check_line(body, "body")
    if not body.strip():
        raise InvalidMutationError("Task body cannot be empty")


def check_attribute(name: str, value: str) -> None:
    if not _ATTRIBUTE_NAME.fullmatch(name or ""):
        raise InvalidMutationError(f"Invalid attribute name: {name!r}")
    if not _ATTRIBUTE_VALUE.fullmatch(value or ""):
        raise InvalidMutationError(f"Invalid attribute value: {value!r}")


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise StoreIOError(f"Cannot read {path}: {e}") from e


def _write(path: Path, content: str) -> None:
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
    except OSError as e:
        raise StoreIOError(f"Cannot write {path}: {e}") from e
