"""Overlay positioning: geographic coordinates to screen points.

The station map plots Web Mercator (EPSG:3857) metres on linear axes, so a
screen point is the Mercator projection of a coordinate mapped linearly into
the plot area of the fixed-size figure.
"""

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

import numpy as np
from pyproj import CRS, Transformer

import config
from utils.station_directory import Coordinate

# Web Mercator is undefined at the poles
MAX_MERCATOR_LAT = 85.0511


def mercator_transformer() -> Transformer:
    return Transformer.from_crs(CRS("EPSG:4326"), CRS("EPSG:3857"), always_xy=True)


def to_mercator(lons, lats) -> Tuple[np.ndarray, np.ndarray]:
    """Transform longitude/latitude arrays to Web Mercator metres."""
    lats = np.clip(np.asarray(lats, dtype=float), -MAX_MERCATOR_LAT, MAX_MERCATOR_LAT)
    lons = np.asarray(lons, dtype=float)
    return mercator_transformer().transform(lons, lats)


@dataclass(frozen=True)
class ScreenPoint:
    x: float
    y: float


@dataclass(frozen=True)
class Viewport:
    """Visible map window of the station figure.

    Ranges are in Web Mercator metres; width/height are the figure size in
    pixels, margins the plotly layout margins around the plot area.
    """

    x_range: Tuple[float, float]
    y_range: Tuple[float, float]
    width: int = config.MAP_WIDTH
    height: int = config.MAP_HEIGHT
    margin_left: int = config.MAP_MARGINS["l"]
    margin_right: int = config.MAP_MARGINS["r"]
    margin_top: int = config.MAP_MARGINS["t"]
    margin_bottom: int = config.MAP_MARGINS["b"]

    @property
    def plot_width(self) -> int:
        return self.width - self.margin_left - self.margin_right

    @property
    def plot_height(self) -> int:
        return self.height - self.margin_top - self.margin_bottom

    @classmethod
    def initial(
        cls,
        center: Tuple[float, float] = config.INITIAL_CENTER,
        lat_span: float = config.INITIAL_LAT_SPAN,
        lon_span: float = config.INITIAL_LON_SPAN,
        width: int = config.MAP_WIDTH,
        height: int = config.MAP_HEIGHT,
        margins: Optional[Dict[str, int]] = None,
    ) -> "Viewport":
        """Build the starting window around a center coordinate.

        Both spans are kept visible; the axis with spare room is widened so
        that one pixel covers the same distance horizontally and vertically.

        Args:
            center: (latitude, longitude) of the window center
            lat_span: Latitude span in degrees
            lon_span: Longitude span in degrees
            width: Figure width in pixels
            height: Figure height in pixels
            margins: Plotly margins dict with l/r/t/b keys

        Returns:
            Viewport instance
        """
        margins = margins or config.MAP_MARGINS
        lat, lon = center
        xs, ys = to_mercator(
            [lon - lon_span / 2, lon + lon_span / 2, lon],
            [lat - lat_span / 2, lat + lat_span / 2, lat],
        )
        cx, cy = float(xs[2]), float(ys[2])
        # Mercator stretches latitude, so the span is not symmetric around cy
        reach_x = max(abs(float(xs[1]) - cx), abs(cx - float(xs[0])))
        reach_y = max(abs(float(ys[1]) - cy), abs(cy - float(ys[0])))

        plot_w = width - margins["l"] - margins["r"]
        plot_h = height - margins["t"] - margins["b"]
        metres_per_px = max(2 * reach_x / plot_w, 2 * reach_y / plot_h)
        half_w = metres_per_px * plot_w / 2
        half_h = metres_per_px * plot_h / 2

        return cls(
            x_range=(cx - half_w, cx + half_w),
            y_range=(cy - half_h, cy + half_h),
            width=width,
            height=height,
            margin_left=margins["l"],
            margin_right=margins["r"],
            margin_top=margins["t"],
            margin_bottom=margins["b"],
        )

    def apply_relayout(self, relayout_data: Optional[Dict[str, Any]]) -> "Viewport":
        """Follow a plotly relayout event (pan, zoom or autorange reset)."""
        if not relayout_data:
            return self
        if relayout_data.get("xaxis.autorange") or relayout_data.get("yaxis.autorange"):
            return Viewport.initial(
                width=self.width,
                height=self.height,
                margins={
                    "l": self.margin_left,
                    "r": self.margin_right,
                    "t": self.margin_top,
                    "b": self.margin_bottom,
                },
            )

        x_range = _read_range(relayout_data, "xaxis", self.x_range)
        y_range = _read_range(relayout_data, "yaxis", self.y_range)
        return replace(self, x_range=x_range, y_range=y_range)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x_range": list(self.x_range),
            "y_range": list(self.y_range),
            "width": self.width,
            "height": self.height,
            "margins": {
                "l": self.margin_left,
                "r": self.margin_right,
                "t": self.margin_top,
                "b": self.margin_bottom,
            },
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Viewport":
        if not data:
            return cls.initial()
        margins = data.get("margins") or config.MAP_MARGINS
        return cls(
            x_range=tuple(data["x_range"]),
            y_range=tuple(data["y_range"]),
            width=data.get("width", config.MAP_WIDTH),
            height=data.get("height", config.MAP_HEIGHT),
            margin_left=margins["l"],
            margin_right=margins["r"],
            margin_top=margins["t"],
            margin_bottom=margins["b"],
        )


def _read_range(relayout_data: Dict[str, Any], axis: str, current: Tuple[float, float]) -> Tuple[float, float]:
    if f"{axis}.range" in relayout_data:
        low, high = relayout_data[f"{axis}.range"]
        return float(low), float(high)
    if f"{axis}.range[0]" in relayout_data and f"{axis}.range[1]" in relayout_data:
        return float(relayout_data[f"{axis}.range[0]"]), float(relayout_data[f"{axis}.range[1]"])
    return current


class OverlayPositioner:
    """Project station coordinates to pixel positions over the map figure."""

    def project(self, coordinate: Coordinate, viewport: Viewport) -> ScreenPoint:
        xs, ys = to_mercator([coordinate.longitude], [coordinate.latitude])
        mx, my = float(xs[0]), float(ys[0])

        x0, x1 = viewport.x_range
        y0, y1 = viewport.y_range
        if math.isclose(x0, x1) or math.isclose(y0, y1):
            raise ValueError(f"Degenerate viewport: {viewport}")

        x = viewport.margin_left + (mx - x0) / (x1 - x0) * viewport.plot_width
        # Screen y grows downward
        y = viewport.margin_top + (y1 - my) / (y1 - y0) * viewport.plot_height
        return ScreenPoint(x, y)


def callout_origin(
    anchor: ScreenPoint,
    min_height: int,
    width: int = config.CALLOUT_WIDTH,
    offset: int = config.CALLOUT_ANCHOR_OFFSET,
) -> Tuple[float, float]:
    """Top-left corner of a callout box centered above an anchor point."""
    return anchor.x - width / 2, anchor.y - min_height - offset
