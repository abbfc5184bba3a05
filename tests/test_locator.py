"""Tests for taskman.locator module."""

from __future__ import annotations

import logging
from dataclasses import replace

import pytest

from taskman.errors import RecordNotFoundError
from taskman.locator import locate, locate_all, locate_and_update, matches
from taskman.record import Record, RecordKey


@pytest.fixture
def records() -> tuple[Record, ...]:
    return (
        Record(body="buy milk", priority="A"),
        Record(body="call mum"),
        Record(body="buy milk"),
        Record(body="call mum"),
    )


class TestMatches:
    """Tests for matches function."""

    def test_body_and_priority(self) -> None:
        """Test exact body and priority match."""
        assert matches(Record(body="a", priority="A"), RecordKey("a", "A"))

    def test_both_without_priority(self) -> None:
        """Test missing priority on both sides matches."""
        assert matches(Record(body="a"), RecordKey("a", None))

    def test_priority_differs(self) -> None:
        """Test a different priority is not a match."""
        assert not matches(Record(body="a", priority="A"), RecordKey("a", None))
        assert not matches(Record(body="a"), RecordKey("a", "B"))

    def test_body_differs(self) -> None:
        """Test body comparison is exact."""
        assert not matches(Record(body="Buy milk"), RecordKey("buy milk"))
        assert not matches(Record(body="buy milk "), RecordKey("buy milk"))


class TestLocate:
    """Tests for locate and locate_all functions."""

    def test_locate_first(self, records: tuple[Record, ...]) -> None:
        """Test the index of the first match is returned."""
        assert locate(records, RecordKey("call mum")) == 1

    def test_locate_with_priority(self, records: tuple[Record, ...]) -> None:
        """Test priority distinguishes records with the same body."""
        assert locate(records, RecordKey("buy milk", "A")) == 0
        assert locate(records, RecordKey("buy milk")) == 2

    def test_locate_miss(self, records: tuple[Record, ...]) -> None:
        """Test a miss raises RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError) as exc_info:
            locate(records, RecordKey("walk dog"))
        assert exc_info.value.key == RecordKey("walk dog")
        assert "walk dog" in str(exc_info.value)

    def test_locate_all(self, records: tuple[Record, ...]) -> None:
        """Test all matching indexes are returned in order."""
        assert locate_all(records, RecordKey("call mum")) == [1, 3]
        assert locate_all(records, RecordKey("walk dog")) == []


class TestLocateAndUpdate:
    """Tests for locate_and_update function."""

    def test_single_match(self, records: tuple[Record, ...]) -> None:
        """Test only the matching record is replaced."""
        new_records, updated = locate_and_update(
            records, RecordKey("buy milk", "A"), lambda r: replace(r, done=True)
        )
        assert updated == Record(body="buy milk", priority="A", done=True)
        assert new_records[0] is updated
        assert new_records[1:] == records[1:]

    def test_input_not_modified(self, records: tuple[Record, ...]) -> None:
        """Test the original collection is left alone."""
        before = list(records)
        new_records, _ = locate_and_update(
            records, RecordKey("buy milk", "A"), lambda r: replace(r, priority="B")
        )
        assert list(records) == before
        assert new_records is not records

    def test_duplicate_keys_all_updated(
        self, records: tuple[Record, ...], caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test every record sharing the key is changed by one call."""
        with caplog.at_level(logging.WARNING, logger="taskman.locator"):
            new_records, updated = locate_and_update(
                records, RecordKey("call mum"), lambda r: replace(r, done=True)
            )

        assert new_records[1].done is True
        assert new_records[3].done is True
        assert updated == Record(body="call mum", done=True)
        assert "2 tasks share the key" in caplog.text

    def test_returns_last_update(self, records: tuple[Record, ...]) -> None:
        """Test the returned record is the one built for the last match."""
        seen: list[Record] = []

        def updater(record: Record) -> Record:
            seen.append(record)
            return replace(record, priority="ABCD"[len(seen)])

        new_records, updated = locate_and_update(records, RecordKey("call mum"), updater)

        assert updated is new_records[3]
        assert updated.priority == "C"
        assert new_records[1].priority == "B"

    def test_miss_raises(self, records: tuple[Record, ...]) -> None:
        """Test a miss raises and the updater is never called."""
        calls: list[Record] = []

        def updater(record: Record) -> Record:
            calls.append(record)
            return record

        with pytest.raises(RecordNotFoundError):
            locate_and_update(records, RecordKey("walk dog"), updater)
        assert calls == []


class TestRecordKey:
    """Tests for Record.key."""

    def test_key_from_record(self) -> None:
        """Test the key is the body and priority."""
        record = Record(body="a", priority="C", done=True, attributes=(("k", "v"),))
        assert record.key == RecordKey("a", "C")

    def test_key_finds_record(self, records: tuple[Record, ...]) -> None:
        """Test a record's own key locates it."""
        assert locate(records, records[2].key) == 2
