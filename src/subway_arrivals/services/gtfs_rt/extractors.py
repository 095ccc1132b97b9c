"""Scalar field extractors that copy wire text into an ArrivalRecord."""

from __future__ import annotations

from typing import TYPE_CHECKING

from subway_arrivals.logging import LogLevel
from subway_arrivals.models.arrival import (
    STATION_CAPACITY,
    TRAIN_TYPE_CAPACITY,
    BoundedText,
)
from subway_arrivals.services.gtfs_rt.wire import WireFormatError

if TYPE_CHECKING:
    from subway_arrivals.logging import LogFacade
    from subway_arrivals.models.arrival import ArrivalRecord
    from subway_arrivals.services.gtfs_rt.wire import ProtoStream


def read_bounded_text(stream: ProtoStream, capacity: int) -> BoundedText | None:
    """Read the rest of ``stream`` into a ``capacity``-sized text buffer.

    Returns None when the field carries no bytes. Bytes beyond
    ``capacity - 1`` are dropped and flagged on the result.

    Raises:
        WireFormatError: If the stream cannot be read.
    """
    if stream.bytes_left <= 0:
        return None
    return BoundedText.copy_from(stream.read(stream.bytes_left), capacity)


def extract_route_id(stream: ProtoStream, record: ArrivalRecord, log: LogFacade) -> None:
    log.log(LogLevel.DEBUG, "Decoding route_id")
    try:
        value = read_bounded_text(stream, TRAIN_TYPE_CAPACITY)
    except WireFormatError:
        log.log(LogLevel.ERROR, "Bad trip route id")
        raise

    if value is not None:
        record.train_type = value
        log.log(LogLevel.DEBUG, "Done writing route_id")


def extract_stop_id(stream: ProtoStream, record: ArrivalRecord, log: LogFacade) -> None:
    log.log(LogLevel.DEBUG, "Decoding stop_id")
    try:
        value = read_bounded_text(stream, STATION_CAPACITY)
    except WireFormatError:
        log.log(LogLevel.ERROR, "Bad stop id")
        raise

    if value is not None:
        record.station = value
        log.log(LogLevel.DEBUG, "Done writing stop_id")
