"""Main Dash application entry point for the Station Observation Map.

A multi-page dashboard showing NWS weather stations on a map, with the latest
observation of a clicked station in a callout.
"""

import logging

from dash import Dash, dcc, html, page_container, page_registry

import config

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

# Initialize the Dash app with multi-page support
app = Dash(
    __name__,
    use_pages=True,
    suppress_callback_exceptions=True,
    title="Station Observation Map",
)

NAV_LINK_STYLE = {"marginLeft": "16px", "color": "#2c3e50"}


def nav_bar():
    """Title plus one link per screen variant."""
    links = [
        dcc.Link(page["name"], href=page["path"], style=NAV_LINK_STYLE)
        for page in page_registry.values()
    ]
    return html.Nav(
        [html.Strong("Station Observation Map")] + links,
        style={"padding": "12px 20px", "borderBottom": "1px solid #dee2e6"},
    )


app.layout = html.Div(
    [
        nav_bar(),
        html.Main(page_container, style={"padding": "0 20px"}),
        html.Footer(
            "Observations from the National Weather Service API (api.weather.gov). "
            "Map tiles " + config.BASEMAP_ATTRIBUTION,
            style={"color": "gray", "fontSize": "12px", "padding": "20px"},
        ),
    ]
)

# Server reference for deployment
server = app.server

if __name__ == "__main__":
    # Run the development server
    app.run(debug=True, host="0.0.0.0", port=8050)
