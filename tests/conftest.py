"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest

from subway_arrivals.logging import LogFacade, LogLevel, register_logger
from subway_arrivals.models.arrival import DecodeSession, StationFilter


class CapturingSink:
    """Log sink that records every (level, message) pair."""

    def __init__(self) -> None:
        self.records: list[tuple[LogLevel, str]] = []

    def __call__(self, level: LogLevel, message: str) -> None:
        self.records.append((level, message))

    def messages(self, level: LogLevel | None = None) -> list[str]:
        return [msg for lvl, msg in self.records if level is None or lvl == level]


@pytest.fixture
def sink() -> CapturingSink:
    return CapturingSink()


@pytest.fixture
def log(sink: CapturingSink) -> LogFacade:
    return LogFacade(sink=sink)


@pytest.fixture
def session(log: LogFacade) -> DecodeSession:
    return DecodeSession(log=log)


@pytest.fixture
def stations() -> StationFilter:
    return StationFilter.of(["A32N", "A32S"])


@pytest.fixture
def process_sink(sink: CapturingSink) -> Iterator[CapturingSink]:
    """Register ``sink`` as the process-wide logger for one test."""
    register_logger(sink)
    yield sink
    register_logger(None)
