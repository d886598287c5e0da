"""Dashboard components for the Station Observation Map."""

from .overlay import OverlayPositioner, ScreenPoint, Viewport, callout_origin
from .map_plot import create_station_figure, StationMap

__all__ = [
    "OverlayPositioner",
    "ScreenPoint",
    "Viewport",
    "callout_origin",
    "create_station_figure",
    "StationMap",
]
