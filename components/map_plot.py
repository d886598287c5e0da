"""Map plotting component for the station map.

Creates Plotly figures with station markers over basemap tiles on Web Mercator
axes.
"""

from typing import Iterable, Optional

import numpy as np
import pandas as pd
import plotly.graph_objects as go

import config
from components.basemap import tile_images
from components.overlay import MAX_MERCATOR_LAT, Viewport, to_mercator
from utils.station_directory import Station

# Trace order in the station figure
BACKGROUND_TRACE = 0
STATION_TRACE = 1


def stations_to_frame(stations: Iterable[Station]) -> pd.DataFrame:
    """Tabulate stations with their Web Mercator positions.

    Args:
        stations: Stations to tabulate

    Returns:
        DataFrame with station_id, name, latitude, longitude, x and y columns
    """
    df = pd.DataFrame(
        [
            {
                "station_id": s.identifier,
                "name": s.name,
                "latitude": s.coordinate.latitude,
                "longitude": s.coordinate.longitude,
            }
            for s in stations
        ],
        columns=["station_id", "name", "latitude", "longitude"],
    )
    if df.empty:
        df["x"] = pd.Series(dtype=float)
        df["y"] = pd.Series(dtype=float)
        return df

    xs, ys = to_mercator(df["longitude"].values, df["latitude"].values)
    df["x"] = xs
    df["y"] = ys
    return df


class StationMap:
    """Create the station map figure."""

    def __init__(
        self,
        marker_size: int = config.MARKER_SIZE,
        marker_color: str = config.MARKER_COLOR,
    ):
        """Initialize the station map.

        Args:
            marker_size: Size of station markers
            marker_color: Fill color of station markers
        """
        self.marker_size = marker_size
        self.marker_color = marker_color

    def _background_trace(self) -> go.Heatmap:
        # Invisible layer covering the world so taps on empty map produce
        # click events; markers win over it when a tap is near a station.
        xs, ys = to_mercator([-180.0, 180.0], [-MAX_MERCATOR_LAT, MAX_MERCATOR_LAT])
        return go.Heatmap(
            x=np.asarray(xs),
            y=np.asarray(ys),
            z=np.zeros((2, 2)),
            opacity=0,
            showscale=False,
            hoverinfo="none",
            name="background",
        )

    def _station_trace(self, df: pd.DataFrame) -> go.Scatter:
        return go.Scatter(
            x=df["x"].values,
            y=df["y"].values,
            mode="markers",
            marker=dict(
                size=self.marker_size,
                color=self.marker_color,
                line=dict(color="white", width=0.5),
            ),
            customdata=df["station_id"].values,
            hovertext=[f"{n} ({s})" for n, s in zip(df["name"], df["station_id"])],
            hoverinfo="text",
            name="Stations",
        )

    def create_figure(
        self,
        stations: Iterable[Station],
        viewport: Optional[Viewport] = None,
    ) -> go.Figure:
        """Create a Plotly figure with station markers.

        Args:
            stations: Stations to plot
            viewport: Visible window (defaults to the initial region)

        Returns:
            Plotly Figure object
        """
        viewport = viewport or Viewport.initial()
        df = stations_to_frame(stations)

        fig = go.Figure()
        fig.add_trace(self._background_trace())
        fig.add_trace(self._station_trace(df))

        fig.update_layout(
            width=viewport.width,
            height=viewport.height,
            autosize=False,
            margin=dict(
                l=viewport.margin_left,
                r=viewport.margin_right,
                t=viewport.margin_top,
                b=viewport.margin_bottom,
            ),
            xaxis=dict(range=list(viewport.x_range), visible=False, fixedrange=False),
            yaxis=dict(range=list(viewport.y_range), visible=False, fixedrange=False),
            hovermode="closest",
            dragmode="pan",
            showlegend=False,
            plot_bgcolor="#eaf2f8",
            images=tile_images(viewport),
            # Keep pan/zoom when the figure is re-rendered
            uirevision="station-map",
        )
        fig.add_annotation(
            text=config.BASEMAP_ATTRIBUTION,
            xref="paper",
            yref="paper",
            x=1,
            y=0,
            xanchor="right",
            yanchor="bottom",
            showarrow=False,
            font=dict(size=9, color="#555"),
            bgcolor="rgba(255, 255, 255, 0.7)",
        )

        return fig


def create_station_figure(
    stations: Iterable[Station],
    viewport: Optional[Viewport] = None,
) -> go.Figure:
    """Convenience function to create a station map figure.

    Args:
        stations: Stations to plot
        viewport: Visible window

    Returns:
        Plotly Figure object
    """
    return StationMap().create_figure(stations, viewport)


def station_id_from_click(click_data) -> Optional[str]:
    """Station identifier of a clicked marker, or None for a background tap."""
    if not click_data:
        return None
    points = click_data.get("points") or []
    for point in points:
        if point.get("curveNumber") == STATION_TRACE and point.get("customdata"):
            return str(point["customdata"])
    return None
