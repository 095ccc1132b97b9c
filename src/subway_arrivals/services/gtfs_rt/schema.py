"""Field numbers for the GTFS-RT messages the arrival decoder walks.

Base schema numbers come from the ``gtfs_realtime_pb2`` descriptors. The
NYCT overlay has no published bindings, so its numbers are listed here
(see nyct-subway.proto).
"""

from __future__ import annotations

from typing import Any

from google.transit import gtfs_realtime_pb2  # type: ignore[import-untyped]


def _number(message: Any, field_name: str) -> int:
    return int(message.DESCRIPTOR.fields_by_name[field_name].number)


_StopTimeUpdate = gtfs_realtime_pb2.TripUpdate.StopTimeUpdate

# FeedMessage
FEED_HEADER = _number(gtfs_realtime_pb2.FeedMessage, "header")
FEED_ENTITY = _number(gtfs_realtime_pb2.FeedMessage, "entity")

# FeedHeader
HEADER_VERSION = _number(gtfs_realtime_pb2.FeedHeader, "gtfs_realtime_version")
HEADER_TIMESTAMP = _number(gtfs_realtime_pb2.FeedHeader, "timestamp")

# FeedEntity
ENTITY_ID = _number(gtfs_realtime_pb2.FeedEntity, "id")
ENTITY_TRIP_UPDATE = _number(gtfs_realtime_pb2.FeedEntity, "trip_update")

# TripUpdate
TRIP_UPDATE_TRIP = _number(gtfs_realtime_pb2.TripUpdate, "trip")
TRIP_UPDATE_STOP_TIME_UPDATE = _number(gtfs_realtime_pb2.TripUpdate, "stop_time_update")

# TripDescriptor
TRIP_ROUTE_ID = _number(gtfs_realtime_pb2.TripDescriptor, "route_id")

# TripUpdate.StopTimeUpdate
STOP_TIME_ARRIVAL = _number(_StopTimeUpdate, "arrival")
STOP_TIME_DEPARTURE = _number(_StopTimeUpdate, "departure")
STOP_TIME_STOP_ID = _number(_StopTimeUpdate, "stop_id")

# TripUpdate.StopTimeEvent
EVENT_TIME = _number(gtfs_realtime_pb2.TripUpdate.StopTimeEvent, "time")

# NYCT extension on StopTimeUpdate
NYCT_STOP_TIME_UPDATE = 1001
NYCT_SCHEDULED_TRACK = 1
NYCT_ACTUAL_TRACK = 2
