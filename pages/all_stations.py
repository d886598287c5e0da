"""All Stations page: the first page of the NWS station list, unfiltered."""

import dash

from components.station_screen import build_layout, register_callbacks
from utils.screen_controller import ControllerRegistry, ScreenVariant

VARIANT = ScreenVariant.from_config("all")

# Register page
dash.register_page(__name__, path="/", name=VARIANT.title, order=0)

PAGE_ID = "allsta"

registry = ControllerRegistry(VARIANT)


def layout(**kwargs):
    return build_layout(PAGE_ID, VARIANT.title)


register_callbacks(PAGE_ID, registry)
