"""Tests for arrival data models."""

import dataclasses

import pytest

from subway_arrivals.logging import get_log_facade
from subway_arrivals.models import (
    STATION_CAPACITY,
    TRAIN_TYPE_CAPACITY,
    ArrivalRecord,
    BoundedText,
    DecodeSession,
    StationFilter,
)


class TestBoundedText:
    def test_copy_within_capacity(self) -> None:
        text = BoundedText.copy_from(b"A32", 8)
        assert text.value == b"A32"
        assert text.text == "A32"
        assert text.truncated is False

    def test_copy_exactly_capacity_minus_one(self) -> None:
        text = BoundedText.copy_from(b"ABCDEFG", 8)
        assert text.value == b"ABCDEFG"
        assert text.truncated is False

    def test_copy_truncates(self) -> None:
        text = BoundedText.copy_from(b"ABCDEFGH", 8)
        assert text.value == b"ABCDEFG"
        assert text.truncated is True

    def test_copy_stops_at_nul(self) -> None:
        text = BoundedText.copy_from(b"AB\x00CD", 8)
        assert text.value == b"AB"
        assert text.truncated is False

    def test_capacity_one_keeps_nothing(self) -> None:
        text = BoundedText.copy_from(b"A", 1)
        assert text.value == b""
        assert text.truncated is True

    def test_invalid_capacity(self) -> None:
        with pytest.raises(ValueError):
            BoundedText.copy_from(b"A", 0)

    def test_non_utf8_is_replaced_for_display(self) -> None:
        assert BoundedText.copy_from(b"\xff", 2).text == "�"

    def test_truthiness(self) -> None:
        assert not BoundedText.empty(8)
        assert BoundedText.copy_from(b"A", 2)


class TestArrivalRecord:
    def test_zero_initialized(self) -> None:
        record = ArrivalRecord()
        assert record.station == BoundedText.empty(STATION_CAPACITY)
        assert record.train_type == BoundedText.empty(TRAIN_TYPE_CAPACITY)
        assert record.arrival_epoch == 0
        assert record.departure_epoch == 0

    def test_copy_is_independent(self) -> None:
        record = ArrivalRecord(departure_epoch=5)
        copy = dataclasses.replace(record)
        record.departure_epoch = 6
        assert copy.departure_epoch == 5


class TestStationFilter:
    def test_keeps_order_and_duplicates(self) -> None:
        stations = StationFilter.of(["A32S", "A32N", "A32S"])
        assert list(stations) == ["A32S", "A32N", "A32S"]
        assert len(stations) == 3


class TestDecodeSession:
    def test_defaults(self) -> None:
        session = DecodeSession()
        assert session.entities_seen == 0
        assert session.arrivals == []
        assert session.log is get_log_facade()

    def test_sessions_do_not_share_output(self) -> None:
        first = DecodeSession()
        second = DecodeSession()
        first.arrivals.append(ArrivalRecord())
        assert second.arrivals == []
