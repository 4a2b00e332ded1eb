"""Browser geolocation - start the map and the Spot Form at the user.

The browser is asked for its position through streamlit-js-eval. The
component answers on a later rerun, so the first render never waits for it.
A denial, a browser error or no answer at all leaves the default start
center in place and shows nothing to the user.

The outcome is kept in session state so the browser is asked once per
session.
"""

import logging
from collections.abc import Callable, MutableMapping
from typing import Any, Optional

from streamlit_js_eval import get_geolocation

from prayerspot_finder.constants import MapConfig
from prayerspot_finder.model.spot_draft import SpotDraft
from prayerspot_finder.ui.state_machine import ViewContext

logger = logging.getLogger(__name__)

POSITION_KEY = "user_position"
COMPONENT_KEY = "browser_geolocation"

Position = tuple[float, float]  # (lat, lon)


def parse_position(value: Any) -> Optional[Position]:
    """Read (lat, lon) from a getCurrentPosition payload.

    Returns None for a denial or error payload, or coordinates out of range.
    """
    if not isinstance(value, dict):
        return None
    if value.get("error"):
        logger.warning(f"[GEO] Browser position unavailable: {value['error']}")
        return None

    coords = value.get("coords") or {}
    try:
        lat = float(coords["latitude"])
        lon = float(coords["longitude"])
    except (KeyError, TypeError, ValueError):
        logger.warning(f"[GEO] Unreadable browser position: {value}")
        return None
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        logger.warning(f"[GEO] Browser position out of range: ({lat}, {lon})")
        return None
    return lat, lon


def locate_user(
    session_state: MutableMapping[str, Any],
    request: Callable[..., Any] = get_geolocation,
) -> Optional[Position]:
    """Position of this session's browser, or None if unknown.

    Keeps asking on each rerun until the browser answers; after that the
    stored outcome is returned without a new request.
    """
    if POSITION_KEY not in session_state:
        value = request(component_key=COMPONENT_KEY)
        if value is None:
            return None
        session_state[POSITION_KEY] = parse_position(value)
        logger.info(f"[GEO] Browser answered: {session_state[POSITION_KEY]}")
    return session_state[POSITION_KEY]


def apply_user_position(view: ViewContext, position: Optional[Position]) -> bool:
    """Fly the map to the user once. Without a position the view keeps its defaults."""
    if position is None or view.located:
        return False
    lat, lon = position
    view.set_center(lon=lon, lat=lat, zoom=MapConfig.LOCATE_ZOOM)
    view.located = True
    return True


def seed_draft_location(draft: SpotDraft, position: Optional[Position]) -> bool:
    if position is None:
        return False
    lat, lon = position
    return draft.seed_location(lat=lat, lng=lon)
