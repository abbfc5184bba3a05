"""Finding records by content.

Records carry no identifier. A caller identifies the record it wants to change
by the body and priority it saw before making the edit (a ``RecordKey``).

Two records may share the same key. ``locate_and_update`` then rewrites every
one of them with the same updater; callers that need a single record should
check ``locate_all`` first.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from taskman.errors import RecordNotFoundError
from taskman.record import Record, RecordKey

logger = logging.getLogger(__name__)

Updater = Callable[[Record], Record]


def matches(record: Record, key: RecordKey) -> bool:
    """Exact body and priority equality. No priority on both sides is a match."""
    return record.body == key.body and record.priority == key.priority


def locate_all(records: Sequence[Record], key: RecordKey) -> list[int]:
    """Return the indexes of every record matching key, in order."""
    return [i for i, record in enumerate(records) if matches(record, key)]


def locate(records: Sequence[Record], key: RecordKey) -> int:
    """Return the index of the first record matching key.

    Raises:
        RecordNotFoundError: If nothing matches.
    """
    for i, record in enumerate(records):
        if matches(record, key):
            return i
    raise RecordNotFoundError(key)


def locate_and_update(
    records: Sequence[Record],
    key: RecordKey,
    updater: Updater,
) -> tuple[tuple[Record, ...], Record]:
    """Build a new collection with every match replaced by ``updater(match)``.

    Returns the new collection and the last record the updater produced.
    The input sequence is not modified.

    Raises:
        RecordNotFoundError: If nothing matches. No update is applied.
    """
    indexes = locate_all(records, key)
    if not indexes:
        raise RecordNotFoundError(key)

    if len(indexes) > 1:
        logger.warning(
            "%d tasks share the key %r; updating all of them", len(indexes), key
        )

    rebuilt: list[Record] = list(records)
    for i in indexes:
        rebuilt[i] = updater(records[i])

    return tuple(rebuilt), rebuilt[indexes[-1]]
