"""Pydeck marker backend for the prayer spot map.

Renders placed markers as one pickable ScatterplotLayer:
- Active spots, soft-deleted spots and the selected spot get distinct colors
- The selected spot is drawn larger
- Tooltips show name, address and description

Key differences from Folium:
- Uses [lon, lat] coordinate order (GeoJSON standard)
- Colors as RGBA lists [R, G, B, A] (0-255)
- Data prepared as list[dict] for GPU streaming
- pickable=True enables click detection; the "type" and "id" fields of each
  row come back in the click event

deck.gl interpolates tooltip fields as raw HTML, so every user-entered text
field is escaped before it enters the layer data.
"""

import html
import logging
from typing import Any, Optional

import pydeck as pdk

from prayerspot_finder.constants import MapConfig, MarkerConfig, StyleConfig
from prayerspot_finder.ui.marker_renderer import MarkerBackend, MarkerBinding

logger = logging.getLogger(__name__)


def _escape(value: Optional[str]) -> str:
    return html.escape(value) if value else ""


class PydeckMarkerBackend(MarkerBackend):
    """Marker backend building a pydeck Deck.

    Example:
        backend = PydeckMarkerBackend()
        renderer = MarkerRenderer(backend=backend, callbacks=callbacks)
        renderer.sync(spots=spots, actor=None, profile=None)
        deck = backend.render(center_lat=42.35, center_lon=-70.9)
    """

    def __init__(self) -> None:
        self._markers: dict[str, MarkerBinding] = {}
        self.popup_spot_id: Optional[str] = None

    # ==========================================================================
    # MarkerBackend capabilities
    # ==========================================================================

    def place_marker(self, binding: MarkerBinding) -> None:
        self._markers[binding.spot_id] = binding

    def remove_marker(self, spot_id: str) -> None:
        self._markers.pop(spot_id, None)
        if self.popup_spot_id == spot_id:
            self.popup_spot_id = None

    def show_popup(self, spot_id: str) -> None:
        # The popup is the detail panel beside the map; the marker is highlighted
        self.popup_spot_id = spot_id

    def clear(self) -> None:
        self._markers.clear()
        self.popup_spot_id = None

    # ==========================================================================
    # Rendering
    # ==========================================================================

    @property
    def marker_ids(self) -> list[str]:
        return list(self._markers)

    def marker_rows(self) -> list[dict[str, Any]]:
        """Layer data, one row per placed marker."""
        rows = []
        for spot_id, binding in self._markers.items():
            spot = binding.spot
            highlighted = binding.selected or spot_id == self.popup_spot_id
            if highlighted:
                color = StyleConfig.SELECTED_COLOR
            elif spot.is_deleted:
                color = StyleConfig.DELETED_COLOR
            else:
                color = StyleConfig.ACTIVE_COLOR
            rows.append(
                {
                    "type": MarkerConfig.TYPE_SPOT,
                    "id": spot_id,
                    "lon": spot.longitude,
                    "lat": spot.latitude,
                    "name": _escape(spot.name),
                    "address": _escape(spot.address),
                    "description": _escape(spot.description),
                    "status": "Removed" if spot.is_deleted else "",
                    "color": color,
                    "radius": MarkerConfig.SELECTED_RADIUS_PX if highlighted else MarkerConfig.RADIUS_PX,
                }
            )
        return rows

    def render(
        self,
        center_lat: float = MapConfig.START_CENTER_LAT,
        center_lon: float = MapConfig.START_CENTER_LON,
        zoom: int = MapConfig.DEFAULT_ZOOM,
    ) -> pdk.Deck:
        layer = pdk.Layer(
            "ScatterplotLayer",
            data=self.marker_rows(),
            id="prayer-spots",
            get_position=["lon", "lat"],
            get_fill_color="color",
            get_radius="radius",
            radius_units="pixels",
            stroked=True,
            get_line_color=[255, 255, 255, 255],
            line_width_min_pixels=1,
            pickable=True,
        )
        return pdk.Deck(
            layers=[layer],
            initial_view_state=pdk.ViewState(latitude=center_lat, longitude=center_lon, zoom=zoom),
            map_style="light",
            tooltip=self._create_tooltip_config(),
        )

    @staticmethod
    def _create_tooltip_config() -> dict[str, str | dict[str, str]]:
        return {
            "html": "<b>{name}</b> <i>{status}</i><br/>{address}<br/><small>{description}</small>",
            "style": {"backgroundColor": "white", "color": "#1f2933", "fontSize": "12px"},
        }
