"""Human-readable departure lines."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from subway_arrivals.logging import LogLevel, get_log_facade

if TYPE_CHECKING:
    from collections.abc import Iterable

    from subway_arrivals.logging import LogFacade
    from subway_arrivals.models.arrival import ArrivalRecord


UNKNOWN_TIME = "unknown time"


def _signed_epoch(epoch: int) -> int:
    """Reinterpret a uint64 wire value as int64 seconds."""
    if epoch >= 1 << 63:
        return epoch - (1 << 64)
    return epoch


def format_epoch(epoch: int) -> str:
    """Local calendar time for ``epoch``, or ``UNKNOWN_TIME`` if out of range."""
    try:
        return time.ctime(_signed_epoch(epoch))
    except (OverflowError, OSError, ValueError):
        return UNKNOWN_TIME


def format_departure(record: ArrivalRecord, stop_name: str) -> str:
    """Render e.g. ``"A train departs Canal St at Tue Nov 14 22:13:20 2023"``.

    The time is the departure epoch in local calendar time.
    """
    departs_at = format_epoch(record.departure_epoch)
    return f"{record.train_type.text} train departs {stop_name} at {departs_at}"


def format_arrival_list(records: Iterable[ArrivalRecord], stop_name: str) -> list[str]:
    return [format_departure(record, stop_name) for record in records]


def print_arrival_list(
    records: Iterable[ArrivalRecord],
    stop_name: str,
    log: LogFacade | None = None,
) -> None:
    """Emit one INFO line per record through ``log``."""
    facade = log if log is not None else get_log_facade()
    for line in format_arrival_list(records, stop_name):
        facade.log(LogLevel.INFO, line)
