"""Attribute links: turning pasted URLs into attributes and back."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

from taskman.errors import InvalidMutationError
from taskman.record import Record


def node_id_from_url(url: str, param: str = "node-id") -> str:
    """Extract the ``param`` query value from a pasted URL.

    Raises:
        InvalidMutationError: If the URL has no scheme/host or lacks ``param``.
    """
    parts = urlsplit(url.strip())
    if not parts.scheme or not parts.netloc:
        raise InvalidMutationError(f"Not a URL: {url!r}")

    values = parse_qs(parts.query).get(param)
    if not values or not values[0]:
        raise InvalidMutationError(f"URL has no {param!r} parameter: {url}")

    return values[0]


def attribute_link(record: Record, name: str, template: str) -> str | None:
    """Build the link for a record's ``name`` attribute, if it has one."""
    value = record.attribute(name)
    if value is None:
        return None
    return template.replace("{value}", value)
