"""Streaming GTFS-RT arrival decoder.

Walks FeedMessage -> FeedEntity -> TripUpdate -> StopTimeUpdate without
building the message tree, keeping arrival/departure times only for the
stations in a caller-supplied filter.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

from subway_arrivals.logging import LogLevel
from subway_arrivals.models.arrival import ArrivalRecord, DecodeSession, NyctStopTimeUpdate
from subway_arrivals.services.gtfs_rt import schema
from subway_arrivals.services.gtfs_rt.extractors import extract_route_id, extract_stop_id
from subway_arrivals.services.gtfs_rt.wire import (
    LENGTH_DELIMITED,
    VARINT,
    Field,
    ProtoStream,
    WireFormatError,
    decode_message,
)

if TYPE_CHECKING:
    from subway_arrivals.logging import LogFacade
    from subway_arrivals.models.arrival import StationFilter


class FeedDecodeError(Exception):
    """Raised by ``SubwayFeedDecoder.get_arrivals`` when a feed fails to decode.

    ``session`` keeps whatever was decoded before the failure.
    """

    def __init__(self, message: str, session: DecodeSession) -> None:
        super().__init__(message)
        self.session = session


def _discard(_value: Any) -> None:
    return None


def _read_text(stream: ProtoStream) -> str:
    return stream.read(stream.bytes_left).decode("utf-8", errors="replace")


def decode_event_time(stream: ProtoStream) -> int:
    """Return the ``time`` of a StopTimeEvent, 0 when the field is absent."""
    result = 0

    def on_time(value: int) -> None:
        nonlocal result
        result = value

    decode_message(
        stream,
        {schema.EVENT_TIME: Field(VARINT, on_time)},
        name="StopTimeEvent",
    )
    return result


def decode_nyct_extension(stream: ProtoStream) -> NyctStopTimeUpdate:
    """Decode a NyctStopTimeUpdate extension payload."""
    tracks: dict[str, str] = {}

    def on_scheduled(sub: ProtoStream) -> None:
        tracks["scheduled_track"] = _read_text(sub)

    def on_actual(sub: ProtoStream) -> None:
        tracks["actual_track"] = _read_text(sub)

    decode_message(
        stream,
        {
            schema.NYCT_SCHEDULED_TRACK: Field(LENGTH_DELIMITED, on_scheduled),
            schema.NYCT_ACTUAL_TRACK: Field(LENGTH_DELIMITED, on_actual),
        },
        name="NyctStopTimeUpdate",
    )
    return NyctStopTimeUpdate(**tracks)


def decode_stop_time_update(
    stream: ProtoStream,
    record: ArrivalRecord,
    station_filter: StationFilter,
    log: LogFacade,
) -> NyctStopTimeUpdate | None:
    """Decode one StopTimeUpdate into the entity's scratch ``record``.

    The station id overwrites ``record.station``. When it equals an entry of
    ``station_filter``, the arrival/departure times present on the wire are
    copied. Every entry is checked, so a later match overwrites an earlier one.

    Returns the NYCT extension if the row carried one. It is informational
    only and does not replace the station id.
    """
    log.log(LogLevel.DEBUG, "Decoding stop_time_update")
    arrival: int | None = None
    departure: int | None = None
    extension: NyctStopTimeUpdate | None = None

    def on_arrival(sub: ProtoStream) -> None:
        nonlocal arrival
        arrival = decode_event_time(sub)

    def on_departure(sub: ProtoStream) -> None:
        nonlocal departure
        departure = decode_event_time(sub)

    def on_extension(sub: ProtoStream) -> None:
        nonlocal extension
        extension = decode_nyct_extension(sub)

    fields = {
        schema.STOP_TIME_STOP_ID: Field(
            LENGTH_DELIMITED, lambda sub: extract_stop_id(sub, record, log)
        ),
        schema.STOP_TIME_ARRIVAL: Field(LENGTH_DELIMITED, on_arrival),
        schema.STOP_TIME_DEPARTURE: Field(LENGTH_DELIMITED, on_departure),
        schema.NYCT_STOP_TIME_UPDATE: Field(LENGTH_DELIMITED, on_extension),
    }

    try:
        decode_message(stream, fields, name="StopTimeUpdate")
    except WireFormatError:
        log.log(LogLevel.DEBUG, "Bad stop time update")
        raise

    if extension is not None:
        log.log(
            LogLevel.DEBUG,
            f"NYCT extension scheduled_track={extension.scheduled_track} "
            f"actual_track={extension.actual_track}",
        )

    for station in station_filter:
        if record.station.value != station.encode():
            continue
        log.log(LogLevel.DEBUG, "Matched a station")
        if arrival is not None:
            log.log(LogLevel.DEBUG, "Writing arrival")
            record.arrival_epoch = arrival
        if departure is not None:
            log.log(LogLevel.DEBUG, "Writing departure")
            record.departure_epoch = departure

    return extension


def finalize_entity(record: ArrivalRecord, session: DecodeSession) -> bool:
    """Append a copy of ``record`` if it has a departure. Returns True if kept."""
    if record.departure_epoch == 0:
        return False

    session.log.log(LogLevel.DEBUG, "Found a match")
    session.arrivals.append(dataclasses.replace(record))
    return True


def decode_entity(
    stream: ProtoStream,
    station_filter: StationFilter,
    session: DecodeSession,
) -> None:
    """Decode one FeedEntity and finalize its scratch record."""
    log = session.log
    log.log(LogLevel.DEBUG, "Decoding entity")
    session.entities_seen += 1
    record = ArrivalRecord()

    trip_fields = {
        schema.TRIP_ROUTE_ID: Field(
            LENGTH_DELIMITED, lambda sub: extract_route_id(sub, record, log)
        ),
    }
    trip_update_fields = {
        schema.TRIP_UPDATE_TRIP: Field(
            LENGTH_DELIMITED,
            lambda sub: decode_message(sub, trip_fields, name="TripDescriptor"),
        ),
        schema.TRIP_UPDATE_STOP_TIME_UPDATE: Field(
            LENGTH_DELIMITED,
            lambda sub: decode_stop_time_update(sub, record, station_filter, log),
        ),
    }
    entity_fields = {
        schema.ENTITY_ID: Field(LENGTH_DELIMITED, _discard),
        schema.ENTITY_TRIP_UPDATE: Field(
            LENGTH_DELIMITED,
            lambda sub: decode_message(
                sub,
                trip_update_fields,
                required=(schema.TRIP_UPDATE_TRIP,),
                name="TripUpdate",
            ),
        ),
    }

    try:
        decode_message(stream, entity_fields, required=(schema.ENTITY_ID,), name="FeedEntity")
    except WireFormatError:
        log.log(LogLevel.DEBUG, "Bad entity")
        raise

    finalize_entity(record, session)


def _decode_header(stream: ProtoStream, session: DecodeSession) -> None:
    def on_version(sub: ProtoStream) -> None:
        session.gtfs_realtime_version = _read_text(sub)

    def on_timestamp(value: int) -> None:
        session.feed_timestamp = value

    decode_message(
        stream,
        {
            schema.HEADER_VERSION: Field(LENGTH_DELIMITED, on_version),
            schema.HEADER_TIMESTAMP: Field(VARINT, on_timestamp),
        },
        required=(schema.HEADER_VERSION,),
        name="FeedHeader",
    )


def decode_feed(
    data: bytes | memoryview,
    station_filter: StationFilter,
    session: DecodeSession,
) -> bool:
    """Stream-decode a FeedMessage, appending matches to ``session.arrivals``.

    Stops at the first malformed field and returns False. Records appended
    for earlier entities stay in place.
    """
    fields = {
        schema.FEED_HEADER: Field(LENGTH_DELIMITED, lambda sub: _decode_header(sub, session)),
        schema.FEED_ENTITY: Field(
            LENGTH_DELIMITED, lambda sub: decode_entity(sub, station_filter, session)
        ),
    }

    try:
        decode_message(
            ProtoStream(data), fields, required=(schema.FEED_HEADER,), name="FeedMessage"
        )
    except WireFormatError as exc:
        session.log.log(LogLevel.ERROR, f"Decode failed: {exc}")
        return False

    session.log.log(
        LogLevel.DEBUG,
        f"Decoded {session.entities_seen} entities, {len(session.arrivals)} arrivals",
    )
    return True


class SubwayFeedDecoder:
    """Decodes raw GTFS-RT bytes into arrivals for stations of interest."""

    @staticmethod
    def decode(
        data: bytes | memoryview,
        station_filter: StationFilter,
        session: DecodeSession,
    ) -> bool:
        """Decode ``data`` into ``session``. See ``decode_feed``."""
        return decode_feed(data, station_filter, session)

    @staticmethod
    def get_arrivals(
        data: bytes | memoryview,
        station_filter: StationFilter,
        log: LogFacade | None = None,
    ) -> list[ArrivalRecord]:
        """Decode ``data`` with a fresh session and return its arrivals.

        Raises:
            FeedDecodeError: If the feed is malformed or truncated.
        """
        session = DecodeSession() if log is None else DecodeSession(log=log)
        if not decode_feed(data, station_filter, session):
            msg = f"Failed to decode feed after {session.entities_seen} entities"
            raise FeedDecodeError(msg, session)
        return session.arrivals
