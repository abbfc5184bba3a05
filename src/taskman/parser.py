"""Parsing and serialising todo.txt style lines.

Line grammar::

    [x ][(P) ]body text with @contexts +tags and key:value attributes

Contexts and tags stay inline in the body. Attributes are lifted out of the
body into ``Record.attributes`` and written back at the end of the line.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from string import ascii_uppercase

from taskman.record import Record

CONTEXT_PATTERN = re.compile(r"@(\w+)")
TAG_PATTERN = re.compile(r"\+(\w+)")
ATTRIBUTE_PATTERN = re.compile(r"(\w+):([\w\-_]+)")


def parse_line(line: str) -> Record | None:
    """Parse one line into a Record.

    Returns None for blank lines. Anything that does not fit a marker's exact
    shape is kept as body text, so this never raises.

    The returned record always serialises back to a line that parses to the
    same record.
    """
    if not line.strip():
        return None

    record = _parse(line)

    # Removing attributes after "x " can leave text that the next read takes
    # as a priority marker (the spaces after "x" are not kept). Settle on the
    # form that reads back as itself; each pass only sets markers or
    # shortens the body.
    settled = _parse(serialize_record(record))
    while settled != record:
        record = settled
        settled = _parse(serialize_record(record))

    return record


def serialize_record(record: Record) -> str:
    """Serialise a Record to its canonical line (no trailing newline)."""
    done = "x " if record.done else ""
    priority = f"({record.priority}) " if record.priority else ""
    attributes = "".join(f" {key}:{value}" for key, value in record.attributes)
    return f"{done}{priority}{record.body}{attributes}"


def _parse(line: str) -> Record:
    rest, done = _take_done_marker(line)
    rest, priority = _take_priority(rest)
    body, attributes = _take_attributes(rest.rstrip())

    return Record(
        body=body,
        done=done,
        priority=priority,
        contexts=tuple(_scan(CONTEXT_PATTERN, body)),
        tags=tuple(_scan(TAG_PATTERN, body)),
        attributes=tuple(attributes),
    )


def _take_done_marker(line: str) -> tuple[str, bool]:
    """Strip a leading ``x``/``X`` and the spaces after it.

    The line must start with the marker; leading spaces keep a task open and
    stay in the body. The marker only counts when something is left after
    it: a line reading just ``x`` is an open task called "x".
    """
    if line[:1] in ("x", "X"):
        rest = line[1:].lstrip(" ")
        if rest.strip():
            return rest, True
    return line, False


def _take_priority(text: str) -> tuple[str, str | None]:
    """Strip a ``(A) `` marker. Any other shape is left as body text."""
    if (
        len(text) > 4
        and text[0] == "("
        and text[1] in ascii_uppercase
        and text[2] == ")"
        and text[3] == " "
        and text[4:].strip()
    ):
        return text[4:], text[1]
    return text, None


def _starts_like_marker(text: str) -> bool:
    return text[:1] in ("x", "X") or _take_priority(text)[1] is not None


def _take_attributes(text: str) -> tuple[str, list[tuple[str, str]]]:
    """Remove ``key:value`` tokens from text.

    A token that ends a word also takes one separating space with it: the
    one before it, or the run after it when it opens the body. An opening
    token keeps the run after it if the text behind it starts like a done or
    priority marker, so that text stays body text when written back.
    """
    attributes: list[tuple[str, str]] = []
    pieces: list[str] = []
    cursor = 0

    for match in ATTRIBUTE_PATTERN.finditer(text):
        start, end = match.span()
        attributes.append((match.group(1), match.group(2)))

        if end == len(text) or text[end].isspace():
            if start > cursor and text[start - 1].isspace():
                start -= 1
            elif start == cursor and not any(pieces):
                after = end
                while after < len(text) and text[after].isspace():
                    after += 1
                if not _starts_like_marker(text[after:]):
                    end = after

        pieces.append(text[cursor:start])
        cursor = end

    pieces.append(text[cursor:])
    return "".join(pieces).rstrip(), attributes


def _scan(pattern: re.Pattern[str], text: str) -> Iterable[str]:
    return (match.group(1) for match in pattern.finditer(text))
