"""Station map screen: layout and callbacks shared by every screen variant.

Each page module registers one screen with its own PAGE_ID prefix and
ControllerRegistry. The flow is:

1. Page load writes a fresh session id; the mount callback loads stations
   and draws the map.
2. A marker click anchors a loading callout and writes a selection ticket.
3. The ticket triggers the observation fetch; the result is applied only if
   the ticket is still current.
4. A click on empty map dismisses the callout.

The selection ticket travels through the browser, so a session whose
controller was evicted still resolves its pending callout.
"""

import logging
import uuid

import dash
import plotly.graph_objects as go
from dash import Input, Output, Patch, State, callback, dcc, html

import config
from components.basemap import tile_images
from components.callout import render_callout
from components.map_plot import create_station_figure, station_id_from_click
from components.overlay import Viewport
from utils.screen_controller import ControllerRegistry, ScreenController, SelectionTicket

logger = logging.getLogger(__name__)


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        width=config.MAP_WIDTH,
        height=config.MAP_HEIGHT,
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
    )
    return fig


def build_layout(page_id: str, title: str):
    """Build the screen layout. Called on every page load (screen mount)."""
    return html.Div(
        [
            html.H2(title),
            html.Hr(),
            dcc.Store(id=f"{page_id}-session", data=str(uuid.uuid4())),
            dcc.Store(id=f"{page_id}-viewport", data=Viewport.initial().to_dict()),
            dcc.Store(id=f"{page_id}-ticket", data=None),
            html.Div(
                [
                    dcc.Loading(
                        id=f"{page_id}-loading",
                        type="default",
                        children=[
                            dcc.Graph(
                                id=f"{page_id}-map",
                                figure=_empty_figure(),
                                config={"scrollZoom": True, "displayModeBar": False},
                                style={
                                    "width": f"{config.MAP_WIDTH}px",
                                    "height": f"{config.MAP_HEIGHT}px",
                                },
                            ),
                        ],
                    ),
                    html.Div(id=f"{page_id}-callout"),
                ],
                style={
                    "position": "relative",
                    "width": f"{config.MAP_WIDTH}px",
                    "overflow": "hidden",
                },
            ),
            # Info display
            html.Div(
                id=f"{page_id}-info",
                children=config.LOADING_STATIONS_MESSAGE,
                style={"color": "gray", "fontSize": "12px", "marginTop": "10px"},
            ),
        ]
    )


class StationScreen:
    """Callbacks of one map screen, bound to its page id and registry.

    Session state lives in the browser (viewport and ticket stores); the
    server-side controller of a session can be evicted or live in another
    worker, so every callback rebuilds what it needs from the stores.
    """

    def __init__(self, page_id: str, registry: ControllerRegistry):
        self.page_id = page_id
        self.registry = registry
        self.variant = registry.variant

    def _controller(self, session_id: str) -> ScreenController:
        # Sessions evicted from the registry are mounted again on demand
        return self.registry.get(session_id) or self.registry.mount(session_id)

    def _render(self, controller: ScreenController):
        return render_callout(
            controller.callout, self.variant.callout_min_height, self.variant.fields
        )

    def mount_screen(self, session_id, viewport_data):
        if not session_id:
            return dash.no_update, dash.no_update

        controller = self.registry.mount(session_id)
        stations = controller.stations
        logger.info("Mounted %s screen (%d stations)", self.variant.key, len(stations))
        fig = create_station_figure(stations, Viewport.from_dict(viewport_data))
        info = f"{self.variant.title} | {len(stations)} stations | click a marker for its latest observation"
        return fig, info

    def update_viewport(self, relayout_data, viewport_data):
        current = Viewport.from_dict(viewport_data)
        viewport = current.apply_relayout(relayout_data)
        if viewport == current:
            return dash.no_update, dash.no_update

        # Swap only the basemap tiles; traces stay on the client
        patched = Patch()
        patched["layout"]["images"] = tile_images(viewport)
        return viewport.to_dict(), patched

    def select_station(self, click_data, session_id, viewport_data, ticket_data):
        controller = self._controller(session_id)
        previous = SelectionTicket.from_dict(ticket_data)
        if previous is not None:
            controller.sync_generation(previous.generation)

        station_id = station_id_from_click(click_data)
        if station_id is None:
            return None, controller.dismiss().to_dict()

        ticket = controller.select_station(station_id, Viewport.from_dict(viewport_data))
        if ticket is None:
            return dash.no_update, dash.no_update
        return self._render(controller), ticket.to_dict()

    def resolve_observation(self, ticket_data, session_id):
        ticket = SelectionTicket.from_dict(ticket_data)
        if ticket is None or ticket.is_dismissal:
            return dash.no_update

        controller = self._controller(session_id)
        if not controller.resolve(ticket):
            return dash.no_update
        return self._render(controller)

    def register_callbacks(self) -> "StationScreen":
        page_id = self.page_id

        callback(
            Output(f"{page_id}-map", "figure"),
            Output(f"{page_id}-info", "children"),
            Input(f"{page_id}-session", "data"),
            State(f"{page_id}-viewport", "data"),
        )(self.mount_screen)

        callback(
            Output(f"{page_id}-viewport", "data"),
            Output(f"{page_id}-map", "figure", allow_duplicate=True),
            Input(f"{page_id}-map", "relayoutData"),
            State(f"{page_id}-viewport", "data"),
            prevent_initial_call=True,
        )(self.update_viewport)

        callback(
            Output(f"{page_id}-callout", "children"),
            Output(f"{page_id}-ticket", "data"),
            Input(f"{page_id}-map", "clickData"),
            State(f"{page_id}-session", "data"),
            State(f"{page_id}-viewport", "data"),
            State(f"{page_id}-ticket", "data"),
            prevent_initial_call=True,
        )(self.select_station)

        callback(
            Output(f"{page_id}-callout", "children", allow_duplicate=True),
            Input(f"{page_id}-ticket", "data"),
            State(f"{page_id}-session", "data"),
            prevent_initial_call=True,
        )(self.resolve_observation)

        return self


def register_callbacks(page_id: str, registry: ControllerRegistry) -> StationScreen:
    """Register the screen callbacks for one page."""
    return StationScreen(page_id, registry).register_callbacks()
