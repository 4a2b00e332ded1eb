"""Detail panel beside the map.

Shows the selected marker's detail surface: name, address, description and
the buttons of its binding's actions. Pressing a button runs that binding's
own closure.

With no selection it offers a picker over the visible spots, which is also
how spots are selected when the map provider cannot report clicks.
"""

import logging
from typing import Optional

import streamlit as st

from prayerspot_finder.model.message import SpotRemovedBannerMessage
from prayerspot_finder.model.prayer_spot import PrayerSpot
from prayerspot_finder.ui.infra import trigger_rerun
from prayerspot_finder.ui.marker_renderer import ActionKind, MarkerBinding
from prayerspot_finder.ui.state_machine import MapViewModel

logger = logging.getLogger(__name__)

_BUTTON_TYPES = {
    ActionKind.VIEW_DETAILS: "primary",
    ActionKind.DELETE: "secondary",
    ActionKind.RESTORE: "secondary",
}


def render_spot_panel(vm: MapViewModel, binding: Optional[MarkerBinding], map_version: int) -> None:
    """Render the panel for the selected binding, or the spot picker."""
    if binding is None:
        _render_spot_picker(vm=vm, map_version=map_version)
        return

    spot = binding.spot
    st.subheader(spot.name)
    if spot.is_deleted:
        SpotRemovedBannerMessage().display()
    if spot.address:
        st.markdown(f"📍 {spot.address}")
    if spot.description:
        st.markdown(spot.description)
    st.caption(f"{spot.city}, {spot.country}")

    for action in binding.actions:
        if st.button(
            action.label,
            key=f"marker_action_{action.kind.name}_{spot.id}_{map_version}",
            type=_BUTTON_TYPES[action.kind],
            use_container_width=True,
        ):
            logger.info(f"[MAP] {action.label} pressed for {spot!r}")
            action()

    if st.button("Close", key=f"close_panel_{map_version}", use_container_width=True):
        vm.clear_selection()
        trigger_rerun()


def _render_spot_picker(vm: MapViewModel, map_version: int) -> None:
    spots = vm.context.visible_spots
    if not spots:
        st.caption("No prayer spots to show.")
        return

    st.caption("Click a marker, or pick a spot:")
    choice: Optional[PrayerSpot] = st.selectbox(
        "Prayer spot",
        options=spots,
        index=None,
        format_func=lambda s: f"{s.name} ({s.city})" + (" [removed]" if s.is_deleted else ""),
        key=f"spot_picker_{map_version}",
        label_visibility="collapsed",
    )
    if choice is not None and vm.select_spot(choice.id):
        trigger_rerun()
