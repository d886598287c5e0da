"""Latest-observation fetching and display derivation.

A fetch has three outcomes: an observation with a temperature, a payload with
no temperature (not available), or a transport/parse failure.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import config
from utils.nws_client import NwsClient, NwsError
from utils.units import (
    degrees_to_cardinal,
    meters_per_second_to_mph,
    round_percent,
    to_fahrenheit,
)

logger = logging.getLogger(__name__)


def _measure_value(props: Dict[str, Any], key: str) -> Tuple[Optional[float], str]:
    """Read a `{value, unitCode}` measurement as (value, unit code)."""
    raw = props.get(key)
    unit = ""
    if isinstance(raw, dict):
        unit = str(raw.get("unitCode") or "")
        raw = raw.get("value")
    if raw is None:
        return None, unit
    try:
        return float(raw), unit
    except (TypeError, ValueError):
        return None, unit


def _to_mps(value: Optional[float], unit_code: str) -> Optional[float]:
    if value is None:
        return None
    if "km_h-1" in unit_code:
        return value / 3.6
    return value


@dataclass(frozen=True)
class Observation:
    temperature_c: Optional[float] = None
    text_description: Optional[str] = None
    wind_speed_mps: Optional[float] = None
    wind_direction_deg: Optional[float] = None
    relative_humidity_pct: Optional[float] = None

    @classmethod
    def from_properties(cls, props: Dict[str, Any]) -> "Observation":
        # Wind speed may be reported as wmoUnit:km_h-1 instead of m/s
        wind_speed, wind_unit = _measure_value(props, "windSpeed")

        return cls(
            temperature_c=_measure_value(props, "temperature")[0],
            text_description=props.get("textDescription") or None,
            wind_speed_mps=_to_mps(wind_speed, wind_unit),
            wind_direction_deg=_measure_value(props, "windDirection")[0],
            relative_humidity_pct=_measure_value(props, "relativeHumidity")[0],
        )


@dataclass(frozen=True)
class DisplayObservation:
    """Observation converted to display units."""

    temp_f: str
    conditions: Optional[str] = None
    wind_speed_mph: Optional[int] = None
    wind_direction_cardinal: Optional[str] = None
    humidity_pct: Optional[int] = None

    @classmethod
    def from_observation(cls, observation: Observation) -> "DisplayObservation":
        if observation.temperature_c is None:
            raise ValueError("Cannot display an observation without temperature")
        return cls(
            temp_f=to_fahrenheit(observation.temperature_c),
            conditions=observation.text_description,
            wind_speed_mph=meters_per_second_to_mph(observation.wind_speed_mps),
            wind_direction_cardinal=degrees_to_cardinal(observation.wind_direction_deg),
            humidity_pct=round_percent(observation.relative_humidity_pct),
        )


class FetchOutcome(Enum):
    OK = "ok"
    NOT_AVAILABLE = "not_available"
    FETCH_FAILED = "fetch_failed"


@dataclass(frozen=True)
class ObservationResult:
    outcome: FetchOutcome
    observation: Optional[Observation] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is FetchOutcome.OK

    @classmethod
    def not_available(cls) -> "ObservationResult":
        return cls(FetchOutcome.NOT_AVAILABLE, message=config.NOT_AVAILABLE_MESSAGE)

    @classmethod
    def failed(cls) -> "ObservationResult":
        return cls(FetchOutcome.FETCH_FAILED, message=config.FETCH_FAILED_MESSAGE)


def classify_payload(payload: Dict[str, Any]) -> ObservationResult:
    """Classify a latest-observation payload.

    A payload counts as an observation only when it carries a temperature.
    """
    props = payload.get("properties") if isinstance(payload, dict) else None
    if not isinstance(props, dict):
        return ObservationResult.not_available()

    observation = Observation.from_properties(props)
    if observation.temperature_c is None:
        return ObservationResult.not_available()
    return ObservationResult(FetchOutcome.OK, observation=observation)


class ObservationFetcher:
    """Fetch the latest observation for a single station on demand."""

    def __init__(self, client: NwsClient):
        self.client = client

    def fetch_latest_observation(self, station_id: str) -> ObservationResult:
        try:
            payload = self.client.get_latest_observation(station_id)
        except NwsError:
            logger.exception("Failed to fetch observation for %s", station_id)
            return ObservationResult.failed()

        result = classify_payload(payload)
        if not result.ok:
            logger.info("No recent observation for %s", station_id)
        return result
