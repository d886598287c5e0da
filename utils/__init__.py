"""Utility modules for the Station Observation Map."""

from .nws_client import NwsClient, NwsError
from .station_directory import Station, StationDirectory
from .observation_fetcher import ObservationFetcher, ObservationResult

__all__ = [
    "NwsClient",
    "NwsError",
    "Station",
    "StationDirectory",
    "ObservationFetcher",
    "ObservationResult",
]
