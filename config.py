"""Configuration for the Station Observation Map.

This file contains all configurable settings for the dashboard including:
- NWS API endpoint and request settings
- Initial map region and figure geometry
- Callout geometry
- Screen variants (page size, station filter, rendered fields)

A few settings can be overridden from the environment (see each section).
"""

import os
import re
from pathlib import Path

# =============================================================================
# BASE PATHS
# =============================================================================

# Base directory of the dashboard
BASE_DIR = Path(__file__).parent


# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"


# =============================================================================
# NWS API
# api.weather.gov rejects requests without a User-Agent identifying the client
# =============================================================================

NWS_BASE_URL = os.getenv("NWS_BASE_URL", "https://api.weather.gov")
NWS_USER_AGENT = os.getenv(
    "NWS_USER_AGENT", "StationObservationMap/1.0 (station-obs-map)"
)
NWS_ACCEPT = "application/geo+json"

# Seconds; unset means requests wait indefinitely
_timeout = os.getenv("NWS_TIMEOUT_SECONDS")
NWS_TIMEOUT_SECONDS = float(_timeout) if _timeout else None


# =============================================================================
# INITIAL MAP REGION
# Center of the contiguous US, spans in degrees
# =============================================================================

INITIAL_CENTER = (39.8283, -98.5795)  # (latitude, longitude)
INITIAL_LAT_SPAN = 50.0
INITIAL_LON_SPAN = 50.0


# =============================================================================
# FIGURE GEOMETRY
# The figure has a fixed pixel size so screen projection is deterministic
# =============================================================================

MAP_WIDTH = 1100
MAP_HEIGHT = 650
MAP_MARGINS = {"l": 10, "r": 10, "t": 10, "b": 10}

MARKER_SIZE = 7
MARKER_COLOR = "#2c3e50"


# =============================================================================
# BASEMAP
# Raster tiles in the Web Mercator XYZ scheme, drawn under the station markers
# =============================================================================

BASEMAP_TILE_URL = os.getenv(
    "BASEMAP_TILE_URL", "https://basemaps.cartocdn.com/light_all/{z}/{x}/{y}.png"
)
BASEMAP_ATTRIBUTION = "\u00a9 OpenStreetMap contributors \u00a9 CARTO"
BASEMAP_TILE_PX = 256
BASEMAP_MAX_ZOOM = 18
BASEMAP_MAX_TILES = 64


# =============================================================================
# CALLOUT GEOMETRY
# =============================================================================

CALLOUT_WIDTH = 220
# Vertical gap between the anchor point and the callout's bottom edge
CALLOUT_ANCHOR_OFFSET = 45


# =============================================================================
# MESSAGES
# =============================================================================

NOT_AVAILABLE_MESSAGE = "No recent observation."
FETCH_FAILED_MESSAGE = "Fetch failed."
LOADING_STATIONS_MESSAGE = "Loading stations..."


# =============================================================================
# SESSIONS
# Each browser page load mounts a screen controller; the oldest are evicted
# =============================================================================

MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "64"))


# =============================================================================
# SCREEN VARIANTS
# =============================================================================

# Fields a callout can render, in display order
CALLOUT_FIELDS = ("temperature", "conditions", "wind", "humidity")

# Four-letter ICAO identifiers in the contiguous US
K_STATION_PATTERN = re.compile(r"K[A-Z]{3}")

SCREEN_VARIANTS = {
    "all": {
        "title": "All Stations",
        "page_size": 500,
        "station_pattern": None,
        "callout_min_height": 140,
        "fields": CALLOUT_FIELDS,
    },
    "k_stations": {
        "title": "K Stations",
        "page_size": 2000,
        "station_pattern": K_STATION_PATTERN,
        "callout_min_height": 100,
        "fields": ("temperature", "conditions"),
    },
}
