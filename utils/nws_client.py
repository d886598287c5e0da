"""HTTP client for the NWS API (api.weather.gov)."""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

import config

logger = logging.getLogger(__name__)


class NwsError(Exception):
    """Raised when an NWS request fails or returns an unusable payload."""


class NwsClient:
    """Thin wrapper around the two NWS endpoints the map uses."""

    def __init__(
        self,
        base_url: str = config.NWS_BASE_URL,
        user_agent: str = config.NWS_USER_AGENT,
        timeout: Optional[float] = config.NWS_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root, without trailing slash
            user_agent: User-Agent header sent with every request
            timeout: Request timeout in seconds, None to wait indefinitely
            session: Optional requests session to reuse
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": config.NWS_ACCEPT,
        })

    def _request_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self.session.get(url, params=params or {}, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise NwsError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise NwsError(f"Invalid JSON from {url}: {e}") from e

        if not isinstance(payload, dict):
            raise NwsError(f"Unexpected payload type from {url}: {type(payload).__name__}")
        return payload

    def get_stations(self, limit: int) -> Dict[str, Any]:
        """Fetch one page of station metadata as a GeoJSON FeatureCollection."""
        return self._request_json("/stations", params={"limit": int(limit)})

    def get_latest_observation(self, station_id: str) -> Dict[str, Any]:
        """Fetch the latest observation feature for a station."""
        return self._request_json(f"/stations/{quote(station_id)}/observations/latest")
