import dash
import pytest
from dash import Patch

import config
from components.map_plot import BACKGROUND_TRACE, STATION_TRACE
from components.overlay import Viewport
from components.station_screen import StationScreen
from utils.screen_controller import ControllerRegistry, ScreenVariant


def marker_click(station_id):
    return {"points": [{"curveNumber": STATION_TRACE, "pointIndex": 0, "customdata": station_id}]}


BACKGROUND_CLICK = {"points": [{"curveNumber": BACKGROUND_TRACE, "x": 0.0, "y": 0.0, "z": 0}]}


def callout_text(component):
    """Title and body lines of a rendered callout."""
    title, body = component.children
    if isinstance(body.children, list):
        return title.children, [p.children for p in body.children]
    return title.children, [body.children]


@pytest.fixture
def viewport_data():
    return Viewport.initial().to_dict()


@pytest.fixture
def screen(fake_client):
    registry = ControllerRegistry(ScreenVariant.from_config("all"), client=fake_client)
    return StationScreen("test", registry)


def test_mount_draws_stations(screen, viewport_data):
    fig, info = screen.mount_screen("a", viewport_data)

    assert list(fig.data[1].customdata) == ["KJFK", "KDEN", "PHNL", "K1"]
    assert info.startswith("All Stations | 4 stations")


def test_mount_without_session_does_nothing(screen):
    assert screen.mount_screen(None, None) == (dash.no_update, dash.no_update)


def test_marker_click_shows_loading_callout(screen, viewport_data):
    screen.mount_screen("a", viewport_data)

    callout, ticket = screen.select_station(marker_click("KJFK"), "a", viewport_data, None)

    assert callout_text(callout) == ("New York JFK", ["Loading..."])
    assert ticket["station_id"] == "KJFK"
    assert ticket["generation"] == 1


def test_resolve_renders_ready_observation(screen, fake_client, viewport_data):
    screen.mount_screen("a", viewport_data)
    _, ticket = screen.select_station(marker_click("KJFK"), "a", viewport_data, None)

    callout = screen.resolve_observation(ticket, "a")

    title, lines = callout_text(callout)
    assert title == "New York JFK"
    assert lines[0] == "Temp: 68.0 °F"
    assert "Wind: 22 mph from the W" in lines
    assert fake_client.observation_calls == ["KJFK"]


def test_resolve_renders_error(screen, viewport_data):
    screen.mount_screen("a", viewport_data)
    _, ticket = screen.select_station(marker_click("PHNL"), "a", viewport_data, None)

    callout = screen.resolve_observation(ticket, "a")

    assert callout_text(callout) == ("Honolulu International", [config.NOT_AVAILABLE_MESSAGE])


def test_background_click_dismisses_callout(screen, fake_client, viewport_data):
    screen.mount_screen("a", viewport_data)
    _, ticket = screen.select_station(marker_click("KJFK"), "a", viewport_data, None)

    callout, dismissal = screen.select_station(BACKGROUND_CLICK, "a", viewport_data, ticket)

    assert callout is None
    assert dismissal["station_id"] is None
    assert dismissal["generation"] > ticket["generation"]
    assert screen.resolve_observation(dismissal, "a") is dash.no_update
    # The fetch for the dismissed selection is superseded
    assert screen.resolve_observation(ticket, "a") is dash.no_update
    assert fake_client.observation_calls == []


def test_unknown_station_click_changes_nothing(screen, viewport_data):
    screen.mount_screen("a", viewport_data)

    result = screen.select_station(marker_click("XXXX"), "a", viewport_data, None)

    assert result == (dash.no_update, dash.no_update)


def test_empty_ticket_store_does_not_resolve(screen):
    assert screen.resolve_observation(None, "a") is dash.no_update


def test_evicted_session_still_resolves_pending_callout(fake_client, viewport_data):
    registry = ControllerRegistry(
        ScreenVariant.from_config("all"), client=fake_client, max_sessions=1
    )
    screen = StationScreen("test", registry)
    screen.mount_screen("a", viewport_data)
    loading, ticket = screen.select_station(marker_click("KJFK"), "a", viewport_data, None)

    screen.mount_screen("b", viewport_data)
    assert registry.get("a") is None

    callout = screen.resolve_observation(ticket, "a")

    assert callout is not dash.no_update
    title, lines = callout_text(callout)
    assert title == "New York JFK"
    assert lines[0] == "Temp: 68.0 °F"
    assert callout.style["left"] == loading.style["left"]
    assert callout.style["top"] == loading.style["top"]


def test_evicted_session_keeps_discarding_dismissed_selection(fake_client, viewport_data):
    registry = ControllerRegistry(
        ScreenVariant.from_config("all"), client=fake_client, max_sessions=1
    )
    screen = StationScreen("test", registry)
    screen.mount_screen("a", viewport_data)
    _, ticket = screen.select_station(marker_click("KJFK"), "a", viewport_data, None)
    screen.mount_screen("b", viewport_data)

    _, dismissal = screen.select_station(BACKGROUND_CLICK, "a", viewport_data, ticket)

    assert dismissal["generation"] > ticket["generation"]
    assert screen.resolve_observation(ticket, "a") is dash.no_update


def test_pan_updates_viewport_and_basemap(screen, viewport_data):
    viewport, figure = screen.update_viewport(
        {"xaxis.range[0]": -1e6, "xaxis.range[1]": 1e6,
         "yaxis.range[0]": -5e5, "yaxis.range[1]": 5e5},
        viewport_data,
    )

    assert viewport["x_range"] == [-1e6, 1e6]
    assert isinstance(figure, Patch)


def test_unrelated_relayout_is_ignored(screen, viewport_data):
    assert screen.update_viewport({"autosize": True}, viewport_data) == (
        dash.no_update, dash.no_update
    )
