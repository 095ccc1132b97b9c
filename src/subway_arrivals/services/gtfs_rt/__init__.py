"""Streaming GTFS-Realtime arrival decoding for NYCT subway feeds."""

from subway_arrivals.services.gtfs_rt.decoder import (
    FeedDecodeError,
    SubwayFeedDecoder,
    decode_feed,
)
from subway_arrivals.services.gtfs_rt.presenter import format_arrival_list, print_arrival_list
from subway_arrivals.services.gtfs_rt.reporter import ArrivalReporter, ReportResult

__all__ = [
    "ArrivalReporter",
    "FeedDecodeError",
    "ReportResult",
    "SubwayFeedDecoder",
    "decode_feed",
    "format_arrival_list",
    "print_arrival_list",
]
