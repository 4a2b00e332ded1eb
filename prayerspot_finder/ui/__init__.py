"""User interface components for prayer spot finder.

File Structure (layout-based naming):
- left_panel.py: Sidebar with search, add button, account
- center_map.py: Pydeck marker backend (ScatterplotLayer)
- folium_map.py: Folium marker backend (Leaflet)
- right_panel.py: Detail panel for the selected marker
- spot_form.py / detail_page.py / auth_page.py: Routed pages

Core Components:
- state_machine.py: MapViewModel (Loading/Ready/Error) + MapContext
- marker_renderer.py: MarkerRenderer diffing spots into a MarkerBackend
- actions.py: Remote-call actions returning ToastMessages
- auth_gate.py: Current identity and route guard
- routes.py: Path parsing
- geolocation.py: Browser position for the start center and the Spot Form
- validators.py: Spot Form validation with Optional[Message] returns
"""

from prayerspot_finder.ui.actions import (
    delete_spot,
    geocode_draft_address,
    refresh_spots,
    restore_spot,
    sign_in,
    sign_out,
    sign_up,
    submit_spot,
)
from prayerspot_finder.ui.auth_gate import AuthGate, can_manage
from prayerspot_finder.ui.center_map import PydeckMarkerBackend
from prayerspot_finder.ui.click_detector import ClickDetector, SpotClick
from prayerspot_finder.ui.folium_map import FoliumMarkerBackend
from prayerspot_finder.ui.left_panel import SidebarRenderer
from prayerspot_finder.ui.marker_renderer import (
    ActionKind,
    MarkerAction,
    MarkerBackend,
    MarkerBinding,
    MarkerCallbacks,
    MarkerRenderer,
)
from prayerspot_finder.ui.routes import Route, RouteKind, parse_route
from prayerspot_finder.ui.state_machine import MapContext, MapViewModel, TransitionLogListener

__all__ = [
    "MapViewModel",
    "MapContext",
    "TransitionLogListener",
    "MarkerRenderer",
    "MarkerBackend",
    "MarkerBinding",
    "MarkerAction",
    "MarkerCallbacks",
    "ActionKind",
    "PydeckMarkerBackend",
    "FoliumMarkerBackend",
    "ClickDetector",
    "SpotClick",
    "SidebarRenderer",
    "AuthGate",
    "can_manage",
    "Route",
    "RouteKind",
    "parse_route",
    "refresh_spots",
    "delete_spot",
    "restore_spot",
    "geocode_draft_address",
    "submit_spot",
    "sign_in",
    "sign_up",
    "sign_out",
]
