"""Screen controller for the station map.

Owns the state of one mounted map screen: the station collection and the
single active callout. Selecting a station publishes a loading callout at a
fixed anchor before the observation fetch starts; the fetch result is applied
only if no newer selection or dismissal happened in the meantime.
"""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, replace
from enum import Enum
from re import Pattern
from typing import Callable, Dict, Optional, Tuple

import config
from components.overlay import OverlayPositioner, ScreenPoint, Viewport
from utils.nws_client import NwsClient
from utils.observation_fetcher import (
    DisplayObservation,
    ObservationFetcher,
    ObservationResult,
)
from utils.station_directory import (
    DirectoryState,
    Station,
    StationDirectory,
    StationFilter,
    accept_all,
    pattern_filter,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScreenVariant:
    """Configuration of one map screen."""

    key: str
    title: str
    page_size: int
    station_pattern: Optional[Pattern] = None
    callout_min_height: int = 140
    fields: Tuple[str, ...] = config.CALLOUT_FIELDS

    @classmethod
    def from_config(cls, key: str) -> "ScreenVariant":
        settings = config.SCREEN_VARIANTS[key]
        return cls(
            key=key,
            title=settings["title"],
            page_size=settings["page_size"],
            station_pattern=settings["station_pattern"],
            callout_min_height=settings["callout_min_height"],
            fields=tuple(settings["fields"]),
        )

    def station_filter(self) -> StationFilter:
        if self.station_pattern is None:
            return accept_all
        return pattern_filter(self.station_pattern)


class AppState(Enum):
    LOADING = "loading"
    READY = "ready"


class CalloutStatus(Enum):
    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


@dataclass(frozen=True)
class CalloutViewModel:
    station_id: str
    station_name: str
    anchor: ScreenPoint
    status: CalloutStatus
    message: Optional[str] = None
    display: Optional[DisplayObservation] = None


@dataclass(frozen=True)
class SelectionTicket:
    """Tag of an outstanding observation fetch.

    Tickets travel through the browser, so they carry what a controller needs
    to rebuild the loading callout. A dismissal is a ticket without station.
    """

    station_id: Optional[str]
    generation: int
    anchor: Optional[ScreenPoint] = None

    @property
    def is_dismissal(self) -> bool:
        return self.station_id is None

    def to_dict(self) -> Dict:
        data = {"station_id": self.station_id, "generation": self.generation}
        if self.anchor is not None:
            data["anchor"] = [self.anchor.x, self.anchor.y]
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional["SelectionTicket"]:
        if not data:
            return None
        station_id = data.get("station_id")
        anchor = data.get("anchor")
        return cls(
            str(station_id) if station_id is not None else None,
            int(data["generation"]),
            ScreenPoint(float(anchor[0]), float(anchor[1])) if anchor else None,
        )


class ScreenController:
    """State and transitions of a single map screen."""

    def __init__(
        self,
        variant: ScreenVariant,
        directory: StationDirectory,
        fetcher: ObservationFetcher,
        positioner: Optional[OverlayPositioner] = None,
    ):
        """Initialize the controller.

        Args:
            variant: Screen configuration
            directory: Station directory shared by screens of this variant
            fetcher: Observation fetcher
            positioner: Overlay positioner (defaults to Mercator projection)
        """
        self.variant = variant
        self.directory = directory
        self.fetcher = fetcher
        self.positioner = positioner or OverlayPositioner()

        self.app_state = AppState.LOADING
        self.callout: Optional[CalloutViewModel] = None
        self._stations: Dict[str, Station] = {}
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def stations(self) -> Tuple[Station, ...]:
        return tuple(self._stations.values())

    @property
    def generation(self) -> int:
        return self._generation

    def mount(self) -> Tuple[Station, ...]:
        """Load the station directory and mark the screen ready."""
        stations = self.directory.load_stations()
        with self._lock:
            self._stations = {s.identifier: s for s in stations}
            self.app_state = AppState.READY
        return stations

    def select_station(self, station_id: str, viewport: Viewport) -> Optional[SelectionTicket]:
        """Select a station: anchor the callout and publish it as loading.

        Returns:
            Ticket for the fetch to issue, or None for an unknown station
        """
        station = self._stations.get(station_id)
        if station is None:
            logger.warning("Selected unknown station %s", station_id)
            return None

        anchor = self.positioner.project(station.coordinate, viewport)
        with self._lock:
            self._generation += 1
            self.callout = CalloutViewModel(
                station_id=station.identifier,
                station_name=station.name,
                anchor=anchor,
                status=CalloutStatus.LOADING,
            )
            return SelectionTicket(station.identifier, self._generation, anchor)

    def fetch(self, ticket: SelectionTicket) -> ObservationResult:
        return self.fetcher.fetch_latest_observation(ticket.station_id)

    def apply_result(self, ticket: SelectionTicket, result: ObservationResult) -> bool:
        """Apply a fetch result to the callout it was issued for.

        Results for superseded selections are discarded.

        Returns:
            True if the callout was updated
        """
        with self._lock:
            if ticket.generation != self._generation or self.callout is None:
                logger.debug(
                    "Discarding stale observation for %s (generation %d, current %d)",
                    ticket.station_id, ticket.generation, self._generation,
                )
                return False

            # Anchor stays as computed at selection time
            if result.ok:
                self.callout = replace(
                    self.callout,
                    status=CalloutStatus.READY,
                    display=DisplayObservation.from_observation(result.observation),
                )
            else:
                self.callout = replace(
                    self.callout, status=CalloutStatus.ERROR, message=result.message
                )
            return True

    def sync_generation(self, generation: int) -> None:
        """Never issue a generation lower than one already handed out."""
        with self._lock:
            self._generation = max(self._generation, generation)

    def adopt(self, ticket: SelectionTicket) -> bool:
        """Take over a selection issued by a controller that no longer exists.

        A session's controller can be evicted, or live in another worker
        process, between selection and resolution. A ticket newer than
        anything this controller has seen rebuilds the loading callout from
        the ticket's own anchor.

        Returns:
            True if the ticket's selection became the current one
        """
        if ticket.is_dismissal or ticket.anchor is None:
            return False
        station = self._stations.get(ticket.station_id)
        if station is None:
            return False

        with self._lock:
            if ticket.generation <= self._generation:
                return False
            self._generation = ticket.generation
            self.callout = CalloutViewModel(
                station_id=station.identifier,
                station_name=station.name,
                anchor=ticket.anchor,
                status=CalloutStatus.LOADING,
            )
            logger.debug("Adopted selection of %s at generation %d", station.identifier, ticket.generation)
            return True

    def resolve(self, ticket: SelectionTicket) -> bool:
        """Fetch the observation for a ticket and apply it."""
        if ticket.is_dismissal:
            return False
        self.adopt(ticket)
        if ticket.generation < self._generation:
            logger.debug("Skipping fetch for superseded selection of %s", ticket.station_id)
            return False
        return self.apply_result(ticket, self.fetch(ticket))

    def dismiss(self) -> SelectionTicket:
        """Clear the callout; in-flight results become stale."""
        with self._lock:
            self._generation += 1
            self.callout = None
            return SelectionTicket(None, self._generation)

    def unmount(self) -> None:
        self.dismiss()


class ControllerRegistry:
    """Screen controllers of one variant, keyed by browser session.

    The station directory is shared by every session of the variant so the
    station list is fetched once per process. Controllers beyond
    `max_sessions` are unmounted oldest first.
    """

    def __init__(
        self,
        variant: ScreenVariant,
        client: Optional[NwsClient] = None,
        max_sessions: int = config.MAX_SESSIONS,
        controller_factory: Optional[Callable[..., ScreenController]] = None,
    ):
        self.variant = variant
        self.client = client or NwsClient()
        self.max_sessions = max_sessions
        self.directory = StationDirectory(
            self.client, variant.page_size, variant.station_filter()
        )
        self.fetcher = ObservationFetcher(self.client)
        self._controller_factory = controller_factory or ScreenController
        self._controllers: "OrderedDict[str, ScreenController]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def stations_ready(self) -> bool:
        return self.directory.state is DirectoryState.READY

    def mount(self, session_id: str) -> ScreenController:
        """Create (or return) the controller for a session and load stations."""
        with self._lock:
            controller = self._controllers.get(session_id)
            if controller is None:
                controller = self._controller_factory(
                    self.variant, self.directory, self.fetcher
                )
                self._controllers[session_id] = controller
                while len(self._controllers) > self.max_sessions:
                    _, evicted = self._controllers.popitem(last=False)
                    evicted.unmount()
            else:
                self._controllers.move_to_end(session_id)

        controller.mount()
        return controller

    def get(self, session_id: Optional[str]) -> Optional[ScreenController]:
        if not session_id:
            return None
        with self._lock:
            return self._controllers.get(session_id)

    def unmount(self, session_id: str) -> None:
        with self._lock:
            controller = self._controllers.pop(session_id, None)
        if controller is not None:
            controller.unmount()

    def __len__(self) -> int:
        return len(self._controllers)
