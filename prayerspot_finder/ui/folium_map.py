"""Folium marker backend (Leaflet) for the prayer spot map.

Each placed binding becomes a folium.Marker with an HTML popup listing
name, address and description plus a "View Details" link to the spot's
route. Delete/Restore stay in the detail panel, where they run the
binding's own closures.

Leaflet popups are raw HTML, so all user-entered text is escaped.
"""

import html
import logging
from typing import Optional

import folium

from prayerspot_finder.constants import MapConfig, RouteConfig, StyleConfig
from prayerspot_finder.ui.marker_renderer import MarkerBackend, MarkerBinding

logger = logging.getLogger(__name__)

POPUP_MAX_WIDTH_PX = 280


def build_popup_html(binding: MarkerBinding) -> str:
    spot = binding.spot
    parts = [f"<b>{html.escape(spot.name)}</b>"]
    if spot.is_deleted:
        parts.append("<i>Removed</i>")
    if spot.address:
        parts.append(html.escape(spot.address))
    if spot.description:
        parts.append(f"<small>{html.escape(spot.description)}</small>")
    href = html.escape(f"?{RouteConfig.QUERY_PARAM}={spot.url_path}", quote=True)
    parts.append(f'<a href="{href}" target="_top">View Details</a>')
    return "<br/>".join(parts)


class FoliumMarkerBackend(MarkerBackend):
    """Marker backend building a folium Map."""

    def __init__(self) -> None:
        self._markers: dict[str, MarkerBinding] = {}
        self.popup_spot_id: Optional[str] = None

    def place_marker(self, binding: MarkerBinding) -> None:
        self._markers[binding.spot_id] = binding

    def remove_marker(self, spot_id: str) -> None:
        self._markers.pop(spot_id, None)
        if self.popup_spot_id == spot_id:
            self.popup_spot_id = None

    def show_popup(self, spot_id: str) -> None:
        self.popup_spot_id = spot_id

    def clear(self) -> None:
        self._markers.clear()
        self.popup_spot_id = None

    @property
    def marker_ids(self) -> list[str]:
        return list(self._markers)

    def _marker(self, binding: MarkerBinding) -> folium.Marker:
        spot = binding.spot
        opened = binding.selected or binding.spot_id == self.popup_spot_id
        if opened:
            color = StyleConfig.FOLIUM_SELECTED_COLOR
        elif spot.is_deleted:
            color = StyleConfig.FOLIUM_DELETED_COLOR
        else:
            color = StyleConfig.FOLIUM_ACTIVE_COLOR
        return folium.Marker(
            location=[spot.latitude, spot.longitude],
            tooltip=html.escape(spot.name),
            popup=folium.Popup(build_popup_html(binding), max_width=POPUP_MAX_WIDTH_PX, show=opened),
            icon=folium.Icon(color=color, icon=StyleConfig.FOLIUM_ICON, prefix="fa"),
        )

    def render(
        self,
        center_lat: float = MapConfig.START_CENTER_LAT,
        center_lon: float = MapConfig.START_CENTER_LON,
        zoom: int = MapConfig.DEFAULT_ZOOM,
    ) -> folium.Map:
        m = folium.Map(location=[center_lat, center_lon], zoom_start=zoom)
        for binding in self._markers.values():
            self._marker(binding).add_to(m)
        return m

    def render_html(self, center_lat: float, center_lon: float, zoom: int) -> str:
        """Standalone HTML document for st.components.v1.html."""
        return self.render(center_lat=center_lat, center_lon=center_lon, zoom=zoom).get_root().render()
