"""Settings-driven decode-and-report run over one feed payload."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from subway_arrivals.config import get_settings
from subway_arrivals.logging import LogFacade, get_logger, setup_logging
from subway_arrivals.models.arrival import ArrivalRecord, DecodeSession, StationFilter
from subway_arrivals.services.gtfs_rt.decoder import SubwayFeedDecoder
from subway_arrivals.services.gtfs_rt.presenter import print_arrival_list

if TYPE_CHECKING:
    from subway_arrivals.config import Settings

logger = get_logger(__name__)


@dataclass
class ReportResult:
    ok: bool
    entities_seen: int
    arrivals: list[ArrivalRecord]


class ArrivalReporter:
    """Decodes feed payloads for the configured stations and prints departures.

    Usage:
        reporter = ArrivalReporter(configure_logging=True)
        result = reporter.run(payload)

    Each ``run`` uses a fresh ``DecodeSession``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        log: LogFacade | None = None,
        *,
        configure_logging: bool = False,
    ) -> None:
        self._settings = settings or get_settings()
        if configure_logging:
            setup_logging(self._settings)
        self._station_filter = StationFilter.of(self._settings.station_list)
        self._stop_name = self._settings.stop_name
        self._log = log or LogFacade.from_settings(self._settings)

        missing = self._settings.missing_required_env()
        if missing:
            logger.warning("Reporter configuration incomplete", missing=missing)

    @property
    def station_filter(self) -> StationFilter:
        return self._station_filter

    @property
    def log(self) -> LogFacade:
        return self._log

    def run(self, data: bytes) -> ReportResult:
        """Decode ``data`` and print departures found before any failure."""
        session = DecodeSession(log=self._log)
        ok = SubwayFeedDecoder.decode(data, self._station_filter, session)

        logger.info(
            "Arrival feed decoded" if ok else "Arrival feed decode failed",
            entities_seen=session.entities_seen,
            arrivals=len(session.arrivals),
            feed_timestamp=session.feed_timestamp,
            stations=len(self._station_filter),
        )

        print_arrival_list(session.arrivals, self._stop_name, self._log)
        return ReportResult(ok=ok, entities_seen=session.entities_seen, arrivals=session.arrivals)
