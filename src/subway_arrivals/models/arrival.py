"""In-memory models produced by the streaming arrival decoder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from subway_arrivals.logging import LogFacade, get_log_facade

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

STATION_CAPACITY = 8
TRAIN_TYPE_CAPACITY = 2


@dataclass(frozen=True)
class BoundedText:
    """Text copied into a fixed-capacity buffer.

    ``capacity`` counts the terminator, so at most ``capacity - 1`` bytes are
    kept. ``truncated`` is set when the source had more bytes than that.
    """

    value: bytes = b""
    capacity: int = STATION_CAPACITY
    truncated: bool = False

    @classmethod
    def empty(cls, capacity: int) -> BoundedText:
        return cls(b"", capacity, False)

    @classmethod
    def copy_from(cls, raw: bytes, capacity: int) -> BoundedText:
        """Lossy copy of ``raw``: stops at the first NUL, keeps ``capacity - 1`` bytes."""
        if capacity < 1:
            msg = f"capacity must be at least 1, got {capacity}"
            raise ValueError(msg)

        nul = raw.find(b"\x00")
        if nul != -1:
            raw = raw[:nul]
        limit = capacity - 1
        return cls(bytes(raw[:limit]), capacity, len(raw) > limit)

    @property
    def text(self) -> str:
        return self.value.decode("utf-8", errors="replace")

    def __bool__(self) -> bool:
        return bool(self.value)

    def __str__(self) -> str:
        return self.text


@dataclass
class ArrivalRecord:
    """One decoded match: a station and its arrival/departure epochs.

    Epoch values of 0 mean the time was not present on the wire.
    """

    station: BoundedText = field(default_factory=lambda: BoundedText.empty(STATION_CAPACITY))
    train_type: BoundedText = field(
        default_factory=lambda: BoundedText.empty(TRAIN_TYPE_CAPACITY)
    )
    arrival_epoch: int = 0
    departure_epoch: int = 0

    @property
    def station_id(self) -> str:
        return self.station.text

    @property
    def route_id(self) -> str:
        return self.train_type.text


@dataclass(frozen=True)
class StationFilter:
    """Ordered station identifiers of interest. Duplicates are kept."""

    stations: tuple[str, ...] = ()

    @classmethod
    def of(cls, stations: Iterable[str]) -> StationFilter:
        return cls(tuple(stations))

    def __iter__(self) -> Iterator[str]:
        return iter(self.stations)

    def __len__(self) -> int:
        return len(self.stations)


@dataclass(frozen=True)
class NyctStopTimeUpdate:
    """NYCT vendor extension attached to a stop-time update."""

    scheduled_track: str | None = None
    actual_track: str | None = None


@dataclass
class DecodeSession:
    """Caller-owned state for one or more decode calls.

    Holds the entity counter, the output list and the log facade. Use one
    session per concurrent decode.
    """

    arrivals: list[ArrivalRecord] = field(default_factory=list)
    entities_seen: int = 0
    log: LogFacade = field(default_factory=get_log_facade)
    gtfs_realtime_version: str = ""
    feed_timestamp: int = 0
