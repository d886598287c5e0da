"""Callout component: the observation popup drawn over the station map."""

from typing import List, Optional, Sequence

from dash import html

import config
from components.overlay import callout_origin
from utils.observation_fetcher import DisplayObservation
from utils.screen_controller import CalloutStatus, CalloutViewModel

CALLOUT_STYLE = {
    "position": "absolute",
    "width": f"{config.CALLOUT_WIDTH}px",
    "padding": "10px",
    "backgroundColor": "white",
    "borderRadius": "10px",
    "border": "1px solid #ccc",
    "boxShadow": "0 2px 2px rgba(0, 0, 0, 0.8)",
    "boxSizing": "border-box",
    "zIndex": 10,
    "pointerEvents": "none",
}
TITLE_STYLE = {"fontWeight": "bold", "fontSize": "16px", "marginBottom": "5px"}
TEXT_STYLE = {"fontSize": "14px", "margin": "0 0 2px 0"}


def observation_lines(display: DisplayObservation, fields: Sequence[str]) -> List[str]:
    """Text lines for a ready observation, limited to the requested fields."""
    lines = []
    if "temperature" in fields:
        lines.append(f"Temp: {display.temp_f} °F")
    if "conditions" in fields:
        lines.append(f"Conditions: {display.conditions or 'Not available'}")
    if "wind" in fields and display.wind_speed_mph is not None:
        if display.wind_direction_cardinal:
            lines.append(
                f"Wind: {display.wind_speed_mph} mph from the {display.wind_direction_cardinal}"
            )
        else:
            lines.append(f"Wind: {display.wind_speed_mph} mph")
    if "humidity" in fields and display.humidity_pct is not None:
        lines.append(f"Humidity: {display.humidity_pct}%")
    return lines


def render_callout(
    callout: Optional[CalloutViewModel],
    min_height: int,
    fields: Sequence[str] = config.CALLOUT_FIELDS,
):
    """Render a callout view model as a positioned Dash component.

    Args:
        callout: Active view model, or None when no station is selected
        min_height: Minimum callout height in pixels
        fields: Observation fields to render

    Returns:
        Dash component, or None when there is no callout
    """
    if callout is None:
        return None

    left, top = callout_origin(callout.anchor, min_height)
    children = [html.Div(callout.station_name, style=TITLE_STYLE)]

    if callout.status is CalloutStatus.LOADING:
        children.append(html.P("Loading...", className="callout-loading", style=TEXT_STYLE))
    elif callout.status is CalloutStatus.ERROR:
        children.append(html.P(callout.message, className="callout-error", style=TEXT_STYLE))
    else:
        children.append(
            html.Div([
                html.P(line, style=TEXT_STYLE)
                for line in observation_lines(callout.display, fields)
            ])
        )

    style = dict(CALLOUT_STYLE)
    style.update({
        "left": f"{left:.0f}px",
        "top": f"{top:.0f}px",
        "minHeight": f"{min_height}px",
    })
    return html.Div(children, className="station-callout", style=style)
