"""Pydeck click handler using streamlit-deckgl.

st_deckgl returns the full deck.gl onClick event, including the fields of
the picked object, on every rerun until the next click. Deduplication is
left to the ClickDetector.
"""

import logging
from dataclasses import dataclass
from typing import Any

import pydeck as pdk
from streamlit_deckgl import st_deckgl  # type: ignore[import-untyped]

from prayerspot_finder.constants import MapConfig

logger = logging.getLogger(__name__)


@dataclass
class PydeckClickResult:
    """Result from Pydeck click detection.

    Attributes:
        clicked_object: The picked deck.gl object data (dict) or None if empty map click
        clicked_coordinate: [lon, lat] of click location
    """

    clicked_object: dict[str, Any] | None
    clicked_coordinate: list[float] | None

    @property
    def is_object_click(self) -> bool:
        return self.clicked_object is not None

    @staticmethod
    def empty() -> "PydeckClickResult":
        return PydeckClickResult(clicked_object=None, clicked_coordinate=None)


def parse_click_event(event: Any) -> PydeckClickResult:
    """Split a st_deckgl event into picked object and coordinate.

    st_deckgl SPREADS object properties into the event dict (no "object" key):
    - Empty map click: {coordinate: [lon, lat], eventType: "click"}
    - Object click: {type: "spot", id: ..., coordinate: [lon, lat], eventType: "click", ...}
    """
    if not event or not isinstance(event, dict):
        return PydeckClickResult.empty()

    clicked_coordinate: list[float] | None = None
    coord = event.get("coordinate")
    if isinstance(coord, (list, tuple)) and len(coord) >= 2:
        clicked_coordinate = [float(coord[0]), float(coord[1])]

    clicked_object: dict[str, Any] | None = None
    if event.get("type") and event["type"] != "click":
        clicked_object = {k: v for k, v in event.items() if k not in ("coordinate", "eventType")}

    return PydeckClickResult(clicked_object=clicked_object, clicked_coordinate=clicked_coordinate)


def render_pydeck_map(deck: pdk.Deck, key: str, height: int = MapConfig.HEIGHT_PX) -> PydeckClickResult:
    """Render the deck and return the last click event it reported."""
    # MUST pass events=['click'] to enable click detection
    event = st_deckgl(deck, key=key, height=height, events=["click"])
    result = parse_click_event(event)
    if result.is_object_click:
        logger.debug(f"Object click detected: {result.clicked_object}")
    return result
