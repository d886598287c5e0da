"""Station directory: the set of stations shown on a map screen.

The directory is fetched once from the NWS station-list endpoint and kept in
memory for the life of the process. A failed load is logged and degrades to
an empty directory; the screen is never left waiting on it.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from re import Pattern
from typing import Any, Callable, Dict, List, Optional, Tuple

from utils.nws_client import NwsClient, NwsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Station:
    """A fixed weather-observing location."""

    identifier: str
    name: str
    coordinate: Coordinate

    @classmethod
    def from_feature(cls, feature: Dict[str, Any]) -> Optional["Station"]:
        """Build a station from a GeoJSON feature of the station list.

        Returns None when the feature lacks an identifier or a usable
        [longitude, latitude] pair.
        """
        if not isinstance(feature, dict):
            return None
        props = feature.get("properties") or {}
        geometry = feature.get("geometry") or {}
        coords = geometry.get("coordinates") if isinstance(geometry, dict) else None

        identifier = props.get("stationIdentifier") if isinstance(props, dict) else None
        if not identifier or not isinstance(coords, (list, tuple)) or len(coords) < 2:
            return None
        try:
            longitude, latitude = float(coords[0]), float(coords[1])
        except (TypeError, ValueError):
            return None

        name = str(props.get("name") or identifier)
        return cls(str(identifier), name, Coordinate(latitude, longitude))


StationFilter = Callable[[Optional[str]], bool]


def accept_all(identifier: Optional[str]) -> bool:
    return True


def pattern_filter(pattern: Pattern) -> StationFilter:
    """Build a filter accepting identifiers that fully match a pattern."""

    def _matches(identifier: Optional[str]) -> bool:
        return isinstance(identifier, str) and pattern.fullmatch(identifier) is not None

    return _matches


def filter_features(features: List[Any], station_filter: StationFilter) -> Tuple[Station, ...]:
    """Parse station features, dropping malformed ones and filtered identifiers."""
    stations = []
    skipped = 0
    for feature in features:
        props = feature.get("properties") if isinstance(feature, dict) else None
        identifier = props.get("stationIdentifier") if isinstance(props, dict) else None
        if not station_filter(identifier):
            continue
        station = Station.from_feature(feature)
        if station is None:
            skipped += 1
            continue
        stations.append(station)

    if skipped:
        logger.debug("Skipped %d malformed station features", skipped)
    return tuple(stations)


class DirectoryState(Enum):
    LOADING = "loading"
    READY = "ready"


class StationDirectory:
    """Fetch and hold the station collection for one screen variant."""

    def __init__(
        self,
        client: NwsClient,
        page_size: int,
        station_filter: StationFilter = accept_all,
    ):
        """Initialize the directory.

        Args:
            client: NWS API client
            page_size: Number of stations requested in the single page fetched
            station_filter: Predicate on station identifiers
        """
        self.client = client
        self.page_size = page_size
        self.station_filter = station_filter
        self.state = DirectoryState.LOADING
        self._stations: Tuple[Station, ...] = ()
        self._lock = threading.Lock()

    def load_stations(self) -> Tuple[Station, ...]:
        """Load the station page once; later calls return the same collection."""
        with self._lock:
            if self.state is DirectoryState.READY:
                return self._stations

            try:
                payload = self.client.get_stations(self.page_size)
                features = payload.get("features")
                if not isinstance(features, list):
                    raise NwsError("Station list payload has no 'features' array")
                self._stations = filter_features(features, self.station_filter)
                logger.info(
                    "Loaded %d stations (%d features requested)",
                    len(self._stations), self.page_size,
                )
            except NwsError:
                logger.exception("Failed to fetch station data")
                self._stations = ()
            finally:
                self.state = DirectoryState.READY

            return self._stations
