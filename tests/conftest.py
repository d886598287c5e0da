import pytest

from utils.nws_client import NwsError


def station_feature(identifier, name, lon, lat):
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
        "properties": {"stationIdentifier": identifier, "name": name},
    }


def observation_payload(temp_c=20.0, text="Clear", wind=None, wind_unit="wmoUnit:m_s-1",
                        direction=None, humidity=None):
    return {
        "properties": {
            "textDescription": text,
            "temperature": {"unitCode": "wmoUnit:degC", "value": temp_c},
            "windSpeed": {"unitCode": wind_unit, "value": wind},
            "windDirection": {"unitCode": "wmoUnit:degree_(angle)", "value": direction},
            "relativeHumidity": {"unitCode": "wmoUnit:percent", "value": humidity},
        }
    }


class FakeNwsClient:
    """Stand-in for NwsClient serving canned payloads."""

    def __init__(self, stations=None, observations=None, fail_stations=False):
        self.stations_payload = stations if stations is not None else {"features": []}
        self.observations = observations or {}
        self.fail_stations = fail_stations
        self.station_calls = []
        self.observation_calls = []

    def get_stations(self, limit):
        self.station_calls.append(limit)
        if self.fail_stations:
            raise NwsError("connection refused")
        return self.stations_payload

    def get_latest_observation(self, station_id):
        self.observation_calls.append(station_id)
        payload = self.observations.get(station_id)
        if isinstance(payload, Exception):
            raise payload
        if payload is None:
            raise NwsError(f"404 for {station_id}")
        return payload


@pytest.fixture
def sample_features():
    return [
        station_feature("KJFK", "New York JFK", -73.7789, 40.6397),
        station_feature("KDEN", "Denver International", -104.6562, 39.8466),
        station_feature("PHNL", "Honolulu International", -157.9251, 21.3187),
        station_feature("K1", "Short Id", -100.0, 40.0),
    ]


@pytest.fixture
def fake_client(sample_features):
    return FakeNwsClient(
        stations={"type": "FeatureCollection", "features": sample_features},
        observations={
            "KJFK": observation_payload(temp_c=20.0, wind=10.0, direction=270, humidity=65.4),
            "KDEN": observation_payload(temp_c=-5.0, text="Snow"),
            "PHNL": observation_payload(temp_c=None),
        },
    )
