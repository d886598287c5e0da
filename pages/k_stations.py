"""K Stations page: four-letter K identifiers from a larger station page."""

import dash

from components.station_screen import build_layout, register_callbacks
from utils.screen_controller import ControllerRegistry, ScreenVariant

VARIANT = ScreenVariant.from_config("k_stations")

# Register page
dash.register_page(__name__, path="/k-stations", name=VARIANT.title, order=1)

PAGE_ID = "ksta"

registry = ControllerRegistry(VARIANT)


def layout(**kwargs):
    return build_layout(PAGE_ID, VARIANT.title)


register_callbacks(PAGE_ID, registry)
