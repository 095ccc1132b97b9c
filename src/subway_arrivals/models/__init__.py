"""Data models for decoded subway arrivals."""

from subway_arrivals.models.arrival import (
    STATION_CAPACITY,
    TRAIN_TYPE_CAPACITY,
    ArrivalRecord,
    BoundedText,
    DecodeSession,
    NyctStopTimeUpdate,
    StationFilter,
)

__all__ = [
    "STATION_CAPACITY",
    "TRAIN_TYPE_CAPACITY",
    "ArrivalRecord",
    "BoundedText",
    "DecodeSession",
    "NyctStopTimeUpdate",
    "StationFilter",
]
