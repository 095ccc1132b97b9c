"""Streaming decoder for NYCT subway GTFS-Realtime arrivals."""

__version__ = "0.1.0"
